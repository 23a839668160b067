from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def _parse_origins(value):
    if not value or value == '*':
        return '*'
    return [o.strip() for o in value.split(',') if o.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    migrate.init_app(flask_app, db)
    allowed_origins = _parse_origins(flask_app.config.get('CORS_ORIGINS', '*'))
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # The stores share Flask-SQLAlchemy's scoped session; one service per app
    from candle.services import AccountStore, MessageStore, SyncService
    cfg = flask_app.config
    flask_app.extensions['candle'] = SyncService(
        AccountStore(db.session, publication_retention=int(cfg.get('PUBLICATION_RETENTION', 0))),
        MessageStore(
            db.session,
            ttl_seconds=int(cfg.get('MESSAGE_TTL_SEC', 24 * 60 * 60)),
            max_length=int(cfg.get('MESSAGE_MAX_LENGTH', 200)),
        ),
        profile_picture_max_bytes=int(cfg.get('PROFILE_PICTURE_MAX_BYTES', 32 * 1024)),
        search_limit=int(cfg.get('SEARCH_LIMIT', 10)),
    )

    from candle.api import handle_sync_error
    from candle.errors import SyncError
    flask_app.register_error_handler(SyncError, handle_sync_error)

    @flask_app.errorhandler(500)
    def internal_error(_error):
        return jsonify({'message': 'Internal server error.'}), 500

    from candle.main import main
    flask_app.register_blueprint(main)

    from candle.api.players import players
    flask_app.register_blueprint(players)

    from candle.api.messages import messages
    flask_app.register_blueprint(messages, url_prefix='/messages')

    from candle.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            service = flask_app.extensions['candle']
            for u in ['testuser1', 'testuser2', 'testuser3']:
                service.accounts.register(u, 'password')
            click.echo('Database has been reset and seeded!')

    @click.command('purge-messages')
    def purge_messages_command():
        """Deletes direct messages older than MESSAGE_TTL_SEC."""
        with flask_app.app_context():
            deleted = flask_app.extensions['candle'].purge_expired_messages()
            click.echo(f'Purged {deleted} expired messages.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(purge_messages_command)

    return flask_app
