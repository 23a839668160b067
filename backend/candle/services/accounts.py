from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from candle import bcrypt
from candle.errors import Conflict, InvalidInput, NotFound, Unauthorized
from candle.models import Publication, User

MIN_USERNAME_LENGTH = 3


def _escape_like(value: str) -> str:
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class AccountStore:
    """Accounts, their live progress and their publication feed.

    Takes the SQLAlchemy session it works against, so callers decide which
    store it talks to.
    """

    def __init__(self, session, publication_retention: int = 0):
        self.session = session
        self.publication_retention = publication_retention

    def _get(self, user_id) -> Optional[User]:
        try:
            return self.session.get(User, int(user_id))
        except (TypeError, ValueError):
            return None

    def register(self, username: str, password: str) -> int:
        username = (username or '').strip()
        if not username or not password:
            raise InvalidInput('Missing username or password.')
        if len(username) < MIN_USERNAME_LENGTH:
            raise InvalidInput(f'Username must be at least {MIN_USERNAME_LENGTH} characters.')
        if self.session.query(User).filter_by(username=username).first():
            raise Conflict()

        hashed = bcrypt.generate_password_hash(password).decode('utf-8')
        user = User(username=username, password_hash=hashed, profile_picture='')
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name
            self.session.rollback()
            raise Conflict()
        return user.id

    def authenticate(self, username: str, password: str) -> int:
        username = (username or '').strip()
        if not username or not password:
            raise InvalidInput('Missing username or password.')
        user = self.session.query(User).filter_by(username=username).first()
        if not user or not bcrypt.check_password_hash(user.password_hash, password):
            raise Unauthorized()
        return user.id

    def get_live_progress(self, user_id) -> Optional[Dict[str, Any]]:
        # A missing account and a never-synced account look the same
        user = self._get(user_id)
        if not user:
            return None
        return user.live_progress

    def set_live_progress(self, user_id, record: Dict[str, Any]) -> bool:
        """Overwrite live progress. Last writer wins, there is no version check."""
        updated = (
            self.session.query(User)
            .filter(User.id == user_id)
            .update({User.live_progress: record}, synchronize_session=False)
        )
        self.session.commit()
        return bool(updated)

    def append_publication(self, user_id, record: Dict[str, Any]) -> Optional[Publication]:
        user = self._get(user_id)
        if not user:
            return None
        publication = Publication(user_id=user.id, progress=record)
        self.session.add(publication)
        self.session.flush()
        if self.publication_retention > 0:
            self._prune_publications(user.id)
        self.session.commit()
        return publication

    def _prune_publications(self, user_id: int) -> None:
        stale = [
            row.id for row in
            self.session.query(Publication.id)
            .filter(Publication.user_id == user_id)
            .order_by(Publication.id.desc())
            .offset(self.publication_retention)
            .all()
        ]
        if not stale:
            return
        self.session.query(Publication).filter(Publication.id.in_(stale)).delete(synchronize_session=False)
        current_app.logger.info(f"[publish-prune] user={user_id} pruned={len(stale)}")

    def search_by_username_prefix(self, prefix: str, limit: int = 10) -> List[Dict[str, Any]]:
        if not prefix:
            raise InvalidInput('Missing search parameter.')
        pattern = _escape_like(prefix.lower()) + '%'
        users = (
            self.session.query(User)
            .filter(func.lower(User.username).like(pattern, escape='\\'))
            .limit(limit)
            .all()
        )
        return [u.to_summary() for u in users]

    def get_profile(self, user_id) -> Dict[str, Any]:
        user = self._get(user_id)
        if not user:
            raise NotFound()
        return user.to_profile()

    def set_profile_picture(self, user_id, encoded_image: str, max_length: int = 32 * 1024) -> bool:
        if not encoded_image or not isinstance(encoded_image, str) or len(encoded_image) > max_length:
            raise InvalidInput('Image is too large or missing.')
        updated = (
            self.session.query(User)
            .filter(User.id == user_id)
            .update({User.profile_picture: encoded_image}, synchronize_session=False)
        )
        self.session.commit()
        return bool(updated)
