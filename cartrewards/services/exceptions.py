"""
Service-level errors, mapped to HTTP status codes in main.py
"""

class CartRewardsError(Exception):
    """Base class for business errors raised by the service layer"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class ValidationError(CartRewardsError):
    """Malformed or out-of-range input (negative cart value, unknown reward type, ...)"""
    status_code = 400

class NotFoundError(CartRewardsError):
    """Unknown cart token, store id or milestone id"""
    status_code = 404

class ConflictError(CartRewardsError):
    """Concurrent update lost the optimistic-lock race"""
    status_code = 409
