from datetime import datetime, timezone

from candle import db
from candle.progress import ProgressRecord


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite drops tzinfo, so everything is stored naive)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value: datetime) -> str:
    return value.isoformat(timespec='milliseconds') + 'Z' if value else None


class User(db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.Text, unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    profile_picture = db.Column(db.Text, nullable=False, default='')
    live_progress = db.Column(db.JSON, nullable=True)
    publications = db.relationship(
        'Publication',
        back_populates='user',
        order_by='Publication.id',
        lazy='select',
        cascade='all, delete-orphan',
    )

    def to_summary(self):
        return {
            'id': self.id,
            'username': self.username,
            'profilePicture': self.profile_picture or '',
        }

    def to_profile(self):
        return {
            'id': self.id,
            'username': self.username,
            'publications': [p.to_dict() for p in self.publications],
            'profilePicture': self.profile_picture or '',
        }


class Publication(db.Model):
    __tablename__ = 'publication'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow)
    progress = db.Column(db.JSON, nullable=False)
    user = db.relationship('User', back_populates='publications')

    def to_dict(self):
        return {
            'id': self.id,
            'timestamp': isoformat(self.timestamp),
            'progress': ProgressRecord.with_defaults(self.progress or {}),
        }


class Message(db.Model):
    __tablename__ = 'message'
    id = db.Column(db.Integer, primary_key=True)
    # Weak references to user ids, stored by value and never validated
    sender_id = db.Column(db.Text, nullable=False, index=True)
    recipient_id = db.Column(db.Text, nullable=False, index=True)
    sender_username = db.Column(db.Text, nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'senderId': self.sender_id,
            'recipientId': self.recipient_id,
            'senderUsername': self.sender_username,
            'content': self.content,
            'createdAt': isoformat(self.created_at),
        }
