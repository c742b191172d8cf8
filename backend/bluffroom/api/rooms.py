from flask import Blueprint, current_app, jsonify

rooms = Blueprint('rooms', __name__)


def _store():
    return current_app.extensions['bluffroom'].store


@rooms.route('/<string:code>/state', methods=['GET'])
def get_room_state(code):
    """
    Returns the public state of a room. Answers, voting options and the
    correct answers are never included.
    """
    store = _store()
    room = store.get_room(code)
    if not room:
        return jsonify({'error': 'Room not found'}), 404
    leaderboard = store.get_leaderboard(code, int(current_app.config.get('LEADERBOARD_SIZE', 3)))
    return jsonify(room.to_dict(leaderboard=leaderboard))
