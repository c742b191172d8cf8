from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(config):
    return [o.strip() for o in config.get('CORS_ORIGINS', '').split(',') if o.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _allowed_origins(flask_app.config)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/ws')

    # One store and orchestrator per app; handlers reach them via app.extensions
    from bluffroom.broadcast import SocketIOBroadcaster
    from bluffroom.orchestrator import GameOrchestrator
    from bluffroom.store import RoomStore

    flask_app.extensions['bluffroom'] = GameOrchestrator(
        RoomStore(),
        SocketIOBroadcaster(socketio, namespace=namespace),
        points_per_vote=int(flask_app.config.get('POINTS_PER_CORRECT_VOTE', 10)),
        leaderboard_size=int(flask_app.config.get('LEADERBOARD_SIZE', 3)),
        logger=flask_app.logger,
    )

    # Import and register blueprints here
    from bluffroom.routes import main
    flask_app.register_blueprint(main)

    from bluffroom.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    # Register Socket.IO event handlers
    from bluffroom.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    @click.command('rooms-list')
    def rooms_list_command():
        """Lists active rooms with their phase and player count."""
        store = flask_app.extensions['bluffroom'].store
        codes = store.room_codes()
        if not codes:
            click.echo('No active rooms.')
            return
        for code in codes:
            room = store.get_room(code)
            if room is None:
                continue
            click.echo(f'{code}  phase={room.phase}  players={len(room.players)}  questions={len(room.questions)}')

    flask_app.cli.add_command(rooms_list_command)

    return flask_app
