"""Workers package: fetch orchestration, categorization polling and the composed transaction list handle."""

from .fetch_orchestrator import FetchOrchestrator  # noqa: F401
from .poll_supervisor import PollState, PollSupervisor  # noqa: F401
from .transaction_list import TransactionList  # noqa: F401
