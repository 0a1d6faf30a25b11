# Jobs Package - Scheduled background tasks
from .cart_poller import CartValuePoller

__all__ = ["CartValuePoller"]
