"""Player-state and social-data services.

The stores own persistence (accounts with their publication feed, direct
messages); the sync service maps request payloads onto them. HTTP routes and
socket handlers import from here and stay free of storage details.
"""

from .accounts import AccountStore
from .messages import MessageStore
from .sync import SyncService

__all__ = ['AccountStore', 'MessageStore', 'SyncService']
