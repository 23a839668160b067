from flask_socketio import join_room, leave_room, emit
from candle import socketio
from candle.services.sync import user_room


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def _room_from(data):
    user_id = (data or {}).get('userId')
    if user_id is None or str(user_id).strip() == '':
        emit('error', {'message': 'userId is required'})
        return None
    return user_room(str(user_id).strip())


def handle_join_user(data):
    """Subscribe this socket to a user's notifications (new messages, publications)."""
    room = _room_from(data)
    if not room:
        return
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_user(data):
    room = _room_from(data)
    if not room:
        return
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_user', handle_join_user, namespace='/ws')
    socketio.on_event('leave_user', handle_leave_user, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('join_user', handle_join_user, namespace='/')
        socketio.on_event('leave_user', handle_leave_user, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
