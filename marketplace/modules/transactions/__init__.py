"""Purchase transactions and their settlement."""

from .exceptions import (
    InvalidTransactionStateError,
    PaidTransactionDeletionError,
    TransactionNotFoundError,
    TransactionPermissionError,
)
from .models import (
    STATUS_CANCELLED,
    STATUS_PAID,
    STATUS_PENDING,
    STATUSES,
    Transaction,
    TransactionCreateInput,
    TransactionDetail,
)
from .service import TransactionService

__all__ = [
    "InvalidTransactionStateError",
    "PaidTransactionDeletionError",
    "STATUSES",
    "STATUS_CANCELLED",
    "STATUS_PAID",
    "STATUS_PENDING",
    "Transaction",
    "TransactionCreateInput",
    "TransactionDetail",
    "TransactionNotFoundError",
    "TransactionPermissionError",
    "TransactionService",
]
