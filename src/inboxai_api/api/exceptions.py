"""
Exceptions raised by API handlers and mapped to responses in error_handlers.
"""


class InvalidInputError(Exception):
    """
    Raised when an inbound request body cannot be decoded.
    
    Mapped to 400 Bad Request.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ClientDisconnectedError(Exception):
    """
    Raised when the client went away while an outbound inference call was pending.
    
    The outbound call has already been cancelled; the response is only logged.
    """
    pass
