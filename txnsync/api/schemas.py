"""Request bodies accepted by the development transaction server."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from txnsync.core.models import TransactionKind


class CreateTransactionCommand(BaseModel):
    """Body of ``POST /api/transactions``."""

    model_config = ConfigDict(populate_by_name=True)

    kind: TransactionKind = Field(alias="type")
    amount: PositiveInt
    description: str = Field(min_length=1, max_length=255)
    occurred_on: date = Field(alias="date")
    category_id: int | None = Field(default=None, alias="categoryId")
