from candle import create_app, socketio
from candle.services.sweeper import schedule_message_sweep

app = create_app()

if __name__ == '__main__':
    schedule_message_sweep(app)
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, debug=True)
