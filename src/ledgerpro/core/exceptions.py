"""
Custom exceptions for the LedgerPro core.

All LedgerPro-specific exceptions inherit from LedgerError for easy catching.
"""


class LedgerError(Exception):
    """Base exception for all LedgerPro errors."""

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        self.code = code


class DatabaseError(LedgerError):
    """Database operation errors."""

    def __init__(self, message: str, code: str = "DB_ERROR"):
        super().__init__(message, code)


class ValidationError(LedgerError):
    """Data validation errors. The message is meant to be shown to the user."""

    def __init__(self, message: str, field: str = None, code: str = "VALIDATION_ERROR"):
        super().__init__(message, code)
        self.field = field


class UnbalancedJournalError(ValidationError):
    """Raised when journal lines don't balance (Debit != Credit)."""

    def __init__(
        self,
        message: str = "Entry not balanced! Debits must equal Credits",
        total_debit=None,
        total_credit=None,
        code: str = "JOURNAL_UNBALANCED",
    ):
        super().__init__(message, code=code)
        self.total_debit = total_debit
        self.total_credit = total_credit


class AccountNotFoundError(LedgerError):
    """Raised when an account is not found."""

    def __init__(self, account_ref: str, code: str = "ACCOUNT_NOT_FOUND"):
        super().__init__(f"Account not found: {account_ref}", code)
        self.account_ref = account_ref


class AccountInUseError(LedgerError):
    """Raised when deleting an account that journal lines still reference."""

    def __init__(self, account_ref: str, line_count: int = 0, code: str = "ACCOUNT_IN_USE"):
        super().__init__("Cannot delete: account has journal entries", code)
        self.account_ref = account_ref
        self.line_count = line_count


class EntryNotFoundError(LedgerError):
    """Raised when a journal entry is not found."""

    def __init__(self, entry_id: str, code: str = "ENTRY_NOT_FOUND"):
        super().__init__(f"Journal entry not found: {entry_id}", code)
        self.entry_id = entry_id


class ExtractionError(LedgerError):
    """Raised when a document cannot be turned into text."""

    def __init__(self, message: str, source: str = None, code: str = "EXTRACTION_ERROR"):
        super().__init__(message, code)
        self.source = source
