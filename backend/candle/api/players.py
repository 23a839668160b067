from flask import Blueprint, jsonify, request
from candle.api import failure_message, sync_service


players = Blueprint('players', __name__)


@players.route('/progress/<int:user_id>', methods=['POST'])
@failure_message('Failed to save progress.')
def push_progress(user_id):
    sync_service().push_progress(user_id, request.get_json(silent=True))
    return jsonify({'message': 'Progress saved.'}), 200


@players.route('/progress/<int:user_id>', methods=['GET'])
@failure_message('Failed to load progress.')
def pull_progress(user_id):
    return jsonify(sync_service().pull_progress(user_id)), 200


@players.route('/publish/<int:user_id>', methods=['POST'])
@failure_message('Failed to publish progress.')
def publish(user_id):
    sync_service().publish(user_id, request.get_json(silent=True))
    return jsonify({'message': 'Progress published.'}), 200


@players.route('/users/search', methods=['GET'])
@failure_message('Failed to search users.')
def search_users():
    users = sync_service().search_users(request.args.get('username'))
    # Wrapped in an object so the Unity JSON parser can read it
    return jsonify({'users': users}), 200


@players.route('/profile/<int:user_id>', methods=['GET'])
@failure_message('Failed to load profile.')
def get_profile(user_id):
    return jsonify(sync_service().profile(user_id)), 200


@players.route('/profile/picture/<int:user_id>', methods=['POST'])
@failure_message('Failed to upload picture.')
def upload_profile_picture(user_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    sync_service().upload_profile_picture(user_id, data.get('imageBase64'))
    return jsonify({'message': 'Profile picture updated.'}), 200
