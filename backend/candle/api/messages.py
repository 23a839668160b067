from flask import Blueprint, jsonify, request
from candle.api import failure_message, sync_service


messages = Blueprint('messages', __name__)


@messages.route('/send', methods=['POST'])
@failure_message('Server error while sending the message.')
def send_message():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    sync_service().send_message(
        data.get('senderId'),
        data.get('recipientId'),
        data.get('senderUsername'),
        data.get('content'),
    )
    return jsonify({'message': 'Message sent.'}), 201


@messages.route('/conversation', methods=['GET'])
@failure_message('Failed to load conversation.')
def get_conversation():
    conversation = sync_service().conversation(request.args.get('user1Id'), request.args.get('user2Id'))
    return jsonify(conversation), 200
