"""Transaction domain specific exceptions."""

from marketplace.core.errors import BusinessRuleError, ForbiddenError, InvalidStateError, NotFoundError


class TransactionNotFoundError(NotFoundError):
    default_message = "Transaction not found"


class InvalidTransactionStateError(InvalidStateError):
    default_message = "Transaction is not pending"


class PaidTransactionDeletionError(BusinessRuleError):
    default_message = "Paid transactions cannot be deleted"


class TransactionPermissionError(ForbiddenError):
    default_message = "You do not have permission to access this transaction"
