"""
Error types and common error messages.

Messages are centralized so stores, adapters and tests agree on wording.
"""

# Gateway (transport) messages
ERROR_NETWORK = "Network error. Please check your internet connection."
ERROR_AUTH_REQUIRED = "Authentication required. Please log in."
ERROR_ACCESS_DENIED = "Access denied. Insufficient permissions."
ERROR_SERVER = "Server error. Please try again later."
ERROR_UNKNOWN = "An unknown error occurred"
ERROR_INVALID_RESPONSE = "Unexpected response from server"

# Cart messages
ERROR_CART_LOAD = "Failed to load cart"
ERROR_CART_ADD = "Failed to add product to cart"
ERROR_CART_UPDATE = "Failed to update cart item"
ERROR_CART_REMOVE = "Failed to remove item from cart"
ERROR_CART_CLEAR = "Failed to clear cart"

# Wishlist messages
ERROR_WISHLIST_LOAD = "Failed to load wishlist"
ERROR_WISHLIST_ADD = "Failed to add product to wishlist"
ERROR_WISHLIST_REMOVE = "Failed to remove product from wishlist"
ERROR_WISHLIST_CLEAR = "Failed to clear wishlist"

# Merge-on-login messages
ERROR_SYNC_RELOAD = "Sync succeeded but failed to reload"


def sync_failure_message(failed: int, attempted: int) -> str:
    """Aggregate merge failure summary, e.g. "Failed to sync 1 of 2 items"."""
    return f"Failed to sync {failed} of {attempted} items"


class CartSyncError(Exception):
    """Base exception for cartsync."""


class GatewayError(CartSyncError):
    """Remote request failed. `message` is safe to show to the user."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class StorageError(CartSyncError):
    """Persistent Store read or write failed."""


def describe_error(error: BaseException, fallback: str) -> str:
    """Return a human-readable message for an exception captured at a store boundary."""
    if isinstance(error, GatewayError):
        return error.message or fallback
    message = str(error)
    return message or fallback
