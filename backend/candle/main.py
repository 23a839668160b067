from flask import Blueprint, request, jsonify
from candle.api import failure_message, sync_service

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return 'Candle Clicker server is online!', 200, {'Content-Type': 'text/plain; charset=utf-8'}


@main.route('/register', methods=['GET'])
@failure_message('Server error during registration.')
def register():
    user_id = sync_service().register(request.args.get('username'), request.args.get('password'))
    return jsonify({'message': 'Registration successful!', 'userId': user_id}), 201


@main.route('/login', methods=['GET'])
@failure_message('Server error during login.')
def login():
    user_id = sync_service().login(request.args.get('username'), request.args.get('password'))
    return jsonify({'message': 'Login successful!', 'userId': user_id}), 200
