from typing import Any, Dict, List

from flask import current_app

from candle import socketio
from candle.errors import InvalidInput
from candle.progress import ProgressRecord
from .accounts import AccountStore
from .messages import MessageStore


def user_room(user_id) -> str:
    return f"user:{user_id}"


def notify(event: str, payload: Dict[str, Any], user_id) -> None:
    """Push a realtime event to a user's room after the write has been committed.

    A failed push is logged and dropped; the write it reports on already succeeded.
    """
    try:
        socketio.emit(event, payload, to=user_room(user_id), namespace='/ws')
    except Exception:
        current_app.logger.exception(f"[notify] event={event} user={user_id} push failed")


class SyncService:
    """Request-level contracts over the account and message stores.

    Holds no state of its own besides the injected stores, so a single
    instance is shared by every request.
    """

    def __init__(self, accounts: AccountStore, messages: MessageStore,
                 profile_picture_max_bytes: int = 32 * 1024, search_limit: int = 10):
        self.accounts = accounts
        self.messages = messages
        self.profile_picture_max_bytes = profile_picture_max_bytes
        self.search_limit = search_limit

    # ---- accounts ----

    def register(self, username, password) -> int:
        user_id = self.accounts.register(username, password)
        current_app.logger.info(f"[register] user={user_id}")
        return user_id

    def login(self, username, password) -> int:
        user_id = self.accounts.authenticate(username, password)
        current_app.logger.info(f"[login] user={user_id}")
        return user_id

    def search_users(self, prefix) -> List[Dict[str, Any]]:
        return self.accounts.search_by_username_prefix(prefix, limit=self.search_limit)

    def profile(self, user_id) -> Dict[str, Any]:
        return self.accounts.get_profile(user_id)

    # ---- progress ----

    def push_progress(self, user_id, payload) -> None:
        """Store ``payload`` verbatim as the account's live progress."""
        if not isinstance(payload, dict):
            raise InvalidInput('Progress must be a JSON object.')
        problems = ProgressRecord.validate(payload)
        if problems:
            current_app.logger.warning(f"[progress-push] user={user_id} suspicious payload: {', '.join(problems)}")
        if not self.accounts.set_live_progress(user_id, payload):
            current_app.logger.warning(f"[progress-push] user={user_id} not found, nothing saved")

    def pull_progress(self, user_id) -> Dict[str, Any]:
        """Live progress with defaults filled in, or ``{}`` when nothing was saved."""
        record = self.accounts.get_live_progress(user_id)
        if record is None:
            return {}
        return ProgressRecord.with_defaults(record)

    def publish(self, user_id, payload) -> None:
        if not isinstance(payload, dict):
            raise InvalidInput('Progress must be a JSON object.')
        publication = self.accounts.append_publication(user_id, payload)
        if publication is None:
            current_app.logger.warning(f"[publish] user={user_id} not found, nothing published")
            return
        current_app.logger.info(f"[publish] user={user_id} publication={publication.id}")
        notify('publication_added', publication.to_dict(), user_id)

    def upload_profile_picture(self, user_id, image) -> None:
        if not image or not isinstance(image, str) or len(image) > self.profile_picture_max_bytes:
            raise InvalidInput('Image is too large or missing.')
        if not self.accounts.set_profile_picture(user_id, image, max_length=self.profile_picture_max_bytes):
            current_app.logger.warning(f"[profile-picture] user={user_id} not found, nothing saved")

    # ---- messages ----

    def send_message(self, sender_id, recipient_id, sender_username, content) -> int:
        message = self.messages.send(sender_id, recipient_id, sender_username, content)
        current_app.logger.info(f"[message-send] id={message.id} from={message.sender_id} to={message.recipient_id}")
        notify('message_received', message.to_dict(), message.recipient_id)
        return message.id

    def conversation(self, user_a, user_b) -> List[Dict[str, Any]]:
        return [m.to_dict() for m in self.messages.get_conversation(user_a, user_b)]

    def purge_expired_messages(self) -> int:
        deleted = self.messages.purge_expired()
        if deleted:
            current_app.logger.info(f"[sweep] purged {deleted} expired messages")
        return deleted
