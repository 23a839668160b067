from conftest import register


FULL_PROGRESS = {
    'upgradeCost': 450.5,
    'upgradeLevel': 4,
    'currentFireType': 'Blue',
    'clickBonus': 3,
    'adRewardMultiplier': 2.0,
    'offlineRewardMultiplier': 50,
    'fireCounts': [{'fireType': 'Basic', 'count': 12}, {'fireType': 'Blue', 'count': 3}],
    'unlockedArtifacts': [{'artifactType': 'Wick', 'isUnlocked': True}],
    'equippedArtifacts': ['Wick'],
}


def test_index_is_plain_text(client):
    res = client.get('/')
    assert res.status_code == 200
    assert res.mimetype == 'text/plain'
    assert b'online' in res.data


def test_register_and_login(client):
    res = client.get('/register', query_string={'username': 'alice', 'password': 'secret'})
    assert res.status_code == 201
    body = res.get_json()
    assert body['message']
    user_id = body['userId']

    res = client.get('/login', query_string={'username': 'alice', 'password': 'secret'})
    assert res.status_code == 200
    assert res.get_json()['userId'] == user_id


def test_register_missing_fields(client):
    assert client.get('/register', query_string={'username': 'alice'}).status_code == 400
    assert client.get('/register', query_string={'password': 'secret'}).status_code == 400
    assert client.get('/register').get_json()['message']


def test_register_duplicate_is_conflict(client):
    first = register(client, 'alice')
    res = client.get('/register', query_string={'username': 'alice', 'password': 'other'})
    assert res.status_code == 409
    # The first account still logs in with its own password
    res = client.get('/login', query_string={'username': 'alice', 'password': 'secret'})
    assert res.get_json()['userId'] == first


def test_login_bad_credentials(client):
    register(client, 'alice')
    res = client.get('/login', query_string={'username': 'alice', 'password': 'wrong'})
    assert res.status_code == 401
    res = client.get('/login', query_string={'username': 'nobody', 'password': 'secret'})
    assert res.status_code == 401
    assert client.get('/login', query_string={'username': 'alice'}).status_code == 400


def test_progress_round_trip(client):
    user_id = register(client, 'alice')
    res = client.post(f'/progress/{user_id}', json=FULL_PROGRESS)
    assert res.status_code == 200
    assert res.get_json()['message']

    res = client.get(f'/progress/{user_id}')
    assert res.status_code == 200
    assert res.get_json() == FULL_PROGRESS


def test_progress_pull_without_push_is_empty(client):
    user_id = register(client, 'alice')
    assert client.get(f'/progress/{user_id}').get_json() == {}
    # Unknown account looks the same as never-synced
    assert client.get('/progress/9999').get_json() == {}


def test_progress_push_keeps_unknown_fields_and_defaults_on_read(client):
    user_id = register(client, 'alice')
    client.post(f'/progress/{user_id}', json={'upgradeLevel': 7, 'prestige': 2})
    pulled = client.get(f'/progress/{user_id}').get_json()
    assert pulled['upgradeLevel'] == 7
    assert pulled['prestige'] == 2
    assert pulled['upgradeCost'] == 200
    assert pulled['currentFireType'] == 'Basic'
    assert pulled['fireCounts'] == []


def test_progress_push_is_last_writer_wins(client):
    user_id = register(client, 'alice')
    client.post(f'/progress/{user_id}', json=FULL_PROGRESS)
    client.post(f'/progress/{user_id}', json={'upgradeLevel': 2})
    pulled = client.get(f'/progress/{user_id}').get_json()
    assert pulled['upgradeLevel'] == 2
    # Whole record replaced, nothing merged from the earlier push
    assert pulled['currentFireType'] == 'Basic'


def test_progress_push_rejects_non_object(client):
    user_id = register(client, 'alice')
    res = client.post(f'/progress/{user_id}', json=[1, 2, 3])
    assert res.status_code == 400


def test_publish_appends_in_order(client):
    user_id = register(client, 'alice')
    for level in (1, 2, 3):
        res = client.post(f'/publish/{user_id}', json={'upgradeLevel': level})
        assert res.status_code == 200
    # Overwriting live progress leaves the feed alone
    client.post(f'/progress/{user_id}', json={'upgradeLevel': 99})

    profile = client.get(f'/profile/{user_id}').get_json()
    assert profile['username'] == 'alice'
    assert [p['progress']['upgradeLevel'] for p in profile['publications']] == [1, 2, 3]
    assert all(p['timestamp'].endswith('Z') for p in profile['publications'])


def test_profile_not_found(client):
    res = client.get('/profile/4242')
    assert res.status_code == 404
    assert res.get_json()['message']


def test_search_by_prefix(client):
    for name in ('alice', 'ALBERT', 'balice'):
        register(client, name)
    res = client.get('/users/search', query_string={'username': 'al'})
    assert res.status_code == 200
    names = sorted(u['username'] for u in res.get_json()['users'])
    assert names == ['ALBERT', 'alice']
    assert set(res.get_json()['users'][0]) == {'id', 'username', 'profilePicture'}


def test_search_limit_and_missing_param(client):
    for i in range(15):
        register(client, f'player{i:02d}')
    res = client.get('/users/search', query_string={'username': 'play'})
    assert len(res.get_json()['users']) == 10
    assert client.get('/users/search').status_code == 400


def test_search_treats_wildcards_literally(client):
    register(client, 'alice')
    res = client.get('/users/search', query_string={'username': '%'})
    assert res.get_json()['users'] == []


def test_profile_picture_limits(client):
    user_id = register(client, 'alice')
    res = client.post(f'/profile/picture/{user_id}', json={'imageBase64': 'A' * (33 * 1024)})
    assert res.status_code == 400
    assert client.post(f'/profile/picture/{user_id}', json={}).status_code == 400

    picture = 'A' * (32 * 1024)
    res = client.post(f'/profile/picture/{user_id}', json={'imageBase64': picture})
    assert res.status_code == 200
    assert client.get(f'/profile/{user_id}').get_json()['profilePicture'] == picture


def test_send_message_and_conversation(client):
    alice = register(client, 'alice')
    bob = register(client, 'bob')
    res = client.post('/messages/send', json={
        'senderId': str(alice), 'recipientId': str(bob), 'senderUsername': 'alice', 'content': 'hi bob',
    })
    assert res.status_code == 201
    client.post('/messages/send', json={
        'senderId': str(bob), 'recipientId': str(alice), 'senderUsername': 'bob', 'content': 'hi alice',
    })

    res = client.get('/messages/conversation', query_string={'user1Id': bob, 'user2Id': alice})
    assert res.status_code == 200
    conversation = res.get_json()
    assert [m['content'] for m in conversation] == ['hi bob', 'hi alice']
    assert conversation[0]['senderUsername'] == 'alice'


def test_send_message_validation(client):
    base = {'senderId': '1', 'recipientId': '2', 'senderUsername': 'alice'}
    assert client.post('/messages/send', json={**base, 'content': 'x' * 201}).status_code == 400
    assert client.post('/messages/send', json={**base, 'content': 'x' * 200}).status_code == 201
    assert client.post('/messages/send', json={**base, 'content': ''}).status_code == 400
    assert client.post('/messages/send', json={'content': 'hello'}).status_code == 400


def test_conversation_requires_both_ids(client):
    assert client.get('/messages/conversation', query_string={'user1Id': '1'}).status_code == 400
    res = client.get('/messages/conversation', query_string={'user1Id': '1', 'user2Id': '2'})
    assert res.status_code == 200
    assert res.get_json() == []


def test_store_failure_returns_fixed_message(client, service, monkeypatch):
    from sqlalchemy.exc import OperationalError

    def boom(*args, **kwargs):
        raise OperationalError('UPDATE user', {}, Exception('database is gone'))

    monkeypatch.setattr(service.accounts, 'set_live_progress', boom)
    res = client.post('/progress/1', json={'upgradeLevel': 1})
    assert res.status_code == 500
    assert res.get_json() == {'message': 'Failed to save progress.'}


def test_long_names_are_accepted(client):
    long_name = 'n' * 80
    user_id = register(client, long_name)
    assert client.get(f'/profile/{user_id}').get_json()['username'] == long_name

    res = client.post('/messages/send', json={
        'senderId': 'x' * 70, 'recipientId': 'y' * 70, 'senderUsername': long_name, 'content': 'hi',
    })
    assert res.status_code == 201
    res = client.get('/messages/conversation', query_string={'user1Id': 'y' * 70, 'user2Id': 'x' * 70})
    assert res.get_json()[0]['senderUsername'] == long_name


def test_whitespace_message_is_sent_verbatim(client):
    res = client.post('/messages/send', json={
        'senderId': '1', 'recipientId': '2', 'senderUsername': ' ', 'content': '   ',
    })
    assert res.status_code == 201
    conversation = client.get('/messages/conversation', query_string={'user1Id': '1', 'user2Id': '2'}).get_json()
    assert conversation[0]['content'] == '   '


def test_publish_succeeds_when_notification_fails(client, monkeypatch):
    from candle import socketio

    def boom(*args, **kwargs):
        raise RuntimeError('socket server unavailable')

    user_id = register(client, 'alice')
    monkeypatch.setattr(socketio, 'emit', boom)
    res = client.post(f'/publish/{user_id}', json={'upgradeLevel': 3})
    assert res.status_code == 200
    res = client.post('/messages/send', json={
        'senderId': str(user_id), 'recipientId': '2', 'senderUsername': 'alice', 'content': 'hi',
    })
    assert res.status_code == 201

    publications = client.get(f'/profile/{user_id}').get_json()['publications']
    assert [p['progress']['upgradeLevel'] for p in publications] == [3]
