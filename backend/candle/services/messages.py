from datetime import datetime, timedelta
from typing import Callable, List

from sqlalchemy import and_, or_

from candle.errors import InvalidInput
from candle.models import Message, utcnow


class MessageStore:
    """Direct messages with a hard time-to-live.

    Expired messages are filtered out on every read, so a message past its
    TTL is never returned even if ``purge_expired`` has not run yet. The
    purge only reclaims space.
    """

    def __init__(self, session, ttl_seconds: int = 24 * 60 * 60, max_length: int = 200,
                 clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.ttl = timedelta(seconds=ttl_seconds)
        self.max_length = max_length
        self.clock = clock

    def _cutoff(self) -> datetime:
        return self.clock() - self.ttl

    def send(self, sender_id, recipient_id, sender_username, content) -> Message:
        fields = (sender_id, recipient_id, sender_username, content)
        if any(value is None or value == '' for value in fields):
            raise InvalidInput('Missing data required to send the message.')
        if not isinstance(content, str) or not isinstance(sender_username, str):
            raise InvalidInput('Message content and sender name must be text.')
        if len(content) > self.max_length:
            raise InvalidInput(f'Message is longer than {self.max_length} characters.')

        message = Message(
            sender_id=str(sender_id),
            recipient_id=str(recipient_id),
            sender_username=sender_username,
            content=content,
            created_at=self.clock(),
        )
        self.session.add(message)
        self.session.commit()
        return message

    def get_conversation(self, user_a, user_b) -> List[Message]:
        if not user_a or not user_b:
            raise InvalidInput('Missing user ids.')
        a, b = str(user_a), str(user_b)
        return (
            self.session.query(Message)
            .filter(
                or_(
                    and_(Message.sender_id == a, Message.recipient_id == b),
                    and_(Message.sender_id == b, Message.recipient_id == a),
                ),
                Message.created_at > self._cutoff(),
            )
            .order_by(Message.created_at.asc(), Message.id.asc())
            .all()
        )

    def purge_expired(self) -> int:
        deleted = (
            self.session.query(Message)
            .filter(Message.created_at <= self._cutoff())
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted
