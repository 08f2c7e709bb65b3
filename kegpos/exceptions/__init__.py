"""Custom exceptions for the keg POS application."""

class PosError(Exception):
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

class BusinessLogicError(PosError):
    """Exception raised for business logic violations."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)

class NotFoundError(PosError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)

class InsufficientStockError(BusinessLogicError):
    """Raised when the cart needs more liters than the tank holds."""
    def __init__(self, required_liters, available_liters):
        req_fmt = _format_liters(required_liters)
        avail_fmt = _format_liters(available_liters)
        message = f"Insufficient stock: the sale needs {req_fmt} L, only {avail_fmt} L available"
        super().__init__(message, status_code=409,
                         payload={'required_liters': req_fmt, 'available_liters': avail_fmt})

class SettlementBlockedError(BusinessLogicError):
    """Raised when a draft cannot be settled yet; the draft is left untouched."""
    def __init__(self, message, state=None):
        payload = {'state': state} if state else None
        super().__init__(message, status_code=422, payload=payload)
        self.state = state

class AccountChangedError(BusinessLogicError):
    """Raised when the customer balance moved after the settlement was computed."""
    def __init__(self, expected_balance, current_balance):
        message = 'The customer balance changed while the sale was open. Review the sale and settle again'
        super().__init__(message, status_code=409,
                         payload={'expected_balance': str(expected_balance), 'current_balance': str(current_balance)})

class SettlementPersistenceError(PosError):
    """Raised when the settlement could not be recorded; nothing was applied."""
    def __init__(self, message):
        super().__init__(message, 500)


def _format_liters(value):
    return f"{int(value)}" if value % 1 == 0 else f"{value:.2f}".rstrip('0').rstrip('.')
