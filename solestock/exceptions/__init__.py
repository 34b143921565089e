"""Custom exceptions for the SoleStock application."""

class ErpError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv

class BusinessLogicError(ErpError):
    """Exception raised for business logic violations."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)

class NotFoundError(ErpError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)

class UnbalancedJournalError(BusinessLogicError):
    """Raised when journal debits and credits differ by more than the tolerance."""
    def __init__(self, total_debit, total_credit):
        difference = abs(total_debit - total_credit)
        message = (
            f"Journal is not balanced: debits {total_debit:.2f}, "
            f"credits {total_credit:.2f} (difference {difference:.2f})"
        )
        super().__init__(message, payload={'difference': f"{difference:.2f}"})

class UnauthorizedError(ErpError):
    """Raised when a request has no valid company context."""
    def __init__(self, message="Unauthorized access"):
        super().__init__(message, 403)
