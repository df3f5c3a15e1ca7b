"""Background categorization of newly created transactions for the development server."""

from txnsync.agents.base import FALLBACK_CATEGORY_KEY, BaseAgent
from txnsync.api.store import TransactionStore
from txnsync.core.models import CategorizationStatus
from txnsync.core.utils import get_logger

logger = get_logger("txnsync.worker")


def categorize_in_background(store: TransactionStore, agent: BaseAgent, transaction_id: int) -> None:
    """Categorize a pending transaction and mark it completed, or failed if the agent errors."""
    record = store.get(transaction_id)
    if record is None:
        logger.warning(f"Transaction {transaction_id} disappeared before categorization")
        return
    logger.info(f"Starting categorization: transaction_id={transaction_id}")
    try:
        result = agent.categorize(record.description, [cat.key for cat in store.categories])
    except Exception as exc:
        logger.exception(f"Categorization failed for transaction {transaction_id}")
        store.update(transaction_id, categorization_status=CategorizationStatus.FAILED)
        logger.info(f"Transaction {transaction_id} marked failed: {exc!r}")
        return
    category = store.category_by_key(result.category_key) or store.category_by_key(FALLBACK_CATEGORY_KEY)
    store.update(
        transaction_id,
        category=category,
        categorization_status=CategorizationStatus.COMPLETED,
        is_ai_categorized=category is not None,
    )
    logger.info(f"Transaction {transaction_id} categorized as '{category.key if category else None}'")
