"""Error taxonomy shared by the stores and the HTTP layer.

Stores and the sync service raise these; the blueprints turn them into
``{'message': ...}`` JSON responses with the matching status code.
"""


class SyncError(Exception):
    status_code = 500
    default_message = 'Internal server error.'

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'message': self.message}


class InvalidInput(SyncError):
    status_code = 400
    default_message = 'Invalid or missing input.'


class Unauthorized(SyncError):
    status_code = 401
    default_message = 'Invalid username or password.'


class NotFound(SyncError):
    status_code = 404
    default_message = 'User not found.'


class Conflict(SyncError):
    status_code = 409
    default_message = 'A user with this name already exists.'


class Internal(SyncError):
    status_code = 500
