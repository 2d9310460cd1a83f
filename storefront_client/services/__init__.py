"""Client-side state services

Only the leaf services are re-exported here; the services that talk to the
backend are imported from their own modules.
"""

from .session_manager import SessionManager
from .navigation import Navigator
from .cart_store import CartStore

__all__ = [
    'SessionManager',
    'Navigator',
    'CartStore'
]
