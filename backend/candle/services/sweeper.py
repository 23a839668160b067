import time

from sqlalchemy.exc import SQLAlchemyError

from candle import db, socketio

_sweeper_started = set()


def sweep_once(app) -> int:
    """Delete every expired message once. Returns the number of rows removed."""
    with app.app_context():
        try:
            return app.extensions['candle'].purge_expired_messages()
        except SQLAlchemyError:
            db.session.rollback()
            app.logger.exception("[sweep] purge failed")
            return 0


def schedule_message_sweep(app) -> None:
    """Start the background loop that purges expired messages.

    - No-ops in TESTING mode unless ENABLE_SWEEPER_IN_TESTS is set
    - No-ops when MESSAGE_SWEEP_INTERVAL_SEC is 0
    - Starts at most one loop per app
    Reads already hide expired messages; the loop only reclaims storage.
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SWEEPER_IN_TESTS'):
        return
    interval = int(app.config.get('MESSAGE_SWEEP_INTERVAL_SEC', 300))
    if interval <= 0:
        return
    if id(app) in _sweeper_started:
        app.logger.info("[sweep-skip] sweeper already running")
        return
    _sweeper_started.add(id(app))
    app.logger.info(f"[sweep-set] interval={interval}s")

    def _worker(delay: int):
        while True:
            time.sleep(delay)
            sweep_once(app)

    socketio.start_background_task(_worker, interval)
