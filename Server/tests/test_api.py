def auth_header(user):
    return {'Authorization': f"Bearer {user['token']}"}


def test_signup_returns_identity_and_token(client):
    res = client.post('/api/players/signup', json={'username': 'Alice', 'password': 'secret123'})
    assert res.status_code == 201
    body = res.get_json()
    assert body['success'] is True
    assert body['username'] == 'alice'
    assert body['userId']
    assert body['token']


def test_signup_validation(client, signup):
    signup('alice')

    res = client.post('/api/players/signup', json={'username': 'ALICE', 'password': 'secret123'})
    assert res.status_code == 400
    assert res.get_json() == {'success': False, 'message': 'Username already exists'}

    res = client.post('/api/players/signup', json={'username': 'al', 'password': 'secret123'})
    assert res.status_code == 400

    res = client.post('/api/players/signup', json={'username': 'bobby', 'password': '123'})
    assert res.status_code == 400

    res = client.post('/api/players/signup')
    assert res.status_code == 400


def test_login(client, signup):
    user = signup('alice')

    res = client.post('/api/players/login', json={'username': 'alice', 'password': 'secret123'})
    assert res.status_code == 200
    body = res.get_json()
    assert body['userId'] == user['userId']
    assert body['token']

    res = client.post('/api/players/login', json={'username': 'alice', 'password': 'wrong-password'})
    assert res.status_code == 401
    assert res.get_json()['message'] == 'Invalid username or password'


def test_verify(client, signup):
    user = signup('alice')

    res = client.get('/api/players/verify', headers=auth_header(user))
    assert res.status_code == 200
    assert res.get_json()['userId'] == user['userId']

    assert client.get('/api/players/verify').status_code == 401
    res = client.get('/api/players/verify', headers={'Authorization': 'Bearer not-a-token'})
    assert res.status_code == 401
    assert res.get_json()['message'] == 'Invalid token'


def test_create_and_join_room(client, signup):
    alice = signup('alice')
    bob = signup('bobby')

    res = client.post('/api/rooms/create', headers=auth_header(alice))
    assert res.status_code == 201
    room_id = res.get_json()['roomId']
    assert res.get_json()['room']['owner'] == alice['userId']

    res = client.post('/api/rooms/join', json={'roomId': room_id.lower()}, headers=auth_header(bob))
    assert res.status_code == 200
    players = res.get_json()['room']['players']
    assert [p['username'] for p in players] == ['alice', 'bobby']

    res = client.get(f'/api/rooms/{room_id}', headers=auth_header(bob))
    assert res.status_code == 200
    room = res.get_json()['room']
    assert room['status'] == 'waiting'
    assert room['capacity'] == 7


def test_room_errors(client, signup):
    alice = signup('alice')

    assert client.post('/api/rooms/create').status_code == 401

    res = client.post('/api/rooms/join', json={'roomId': 'ZZZZZ'}, headers=auth_header(alice))
    assert res.status_code == 404
    assert res.get_json() == {'success': False, 'message': 'Room ZZZZZ not found'}

    res = client.post('/api/rooms/join', json={}, headers=auth_header(alice))
    assert res.status_code == 400

    assert client.get('/api/rooms/ZZZZZ', headers=auth_header(alice)).status_code == 404


def test_room_full(client, signup):
    owner = signup('owner')
    room_id = client.post('/api/rooms/create', headers=auth_header(owner)).get_json()['roomId']

    for i in range(6):
        member = signup(f'member{i}')
        res = client.post('/api/rooms/join', json={'roomId': room_id}, headers=auth_header(member))
        assert res.status_code == 200

    late = signup('latecomer')
    res = client.post('/api/rooms/join', json={'roomId': room_id}, headers=auth_header(late))
    assert res.status_code == 409
