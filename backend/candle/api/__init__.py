from functools import wraps

from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from candle import db
from candle.errors import SyncError


def sync_service():
    return current_app.extensions['candle']


def failure_message(message: str):
    """Turn store failures inside a route into a fixed 500 response.

    Nothing from the underlying exception reaches the client; it is logged
    with its traceback instead.
    """
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except SQLAlchemyError:
                db.session.rollback()
                current_app.logger.exception(f"[{view.__name__}] store failure")
                return jsonify({'message': message}), 500
        return wrapper
    return decorator


def handle_sync_error(error: SyncError):
    return jsonify(error.to_dict()), error.status_code
