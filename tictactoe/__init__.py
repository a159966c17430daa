from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

WS_NAMESPACE = '/ws'


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])
    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from tictactoe.errors import register_error_handlers
    register_error_handlers(flask_app)

    # Per-app services; handlers and routes get them from here, never from module globals
    from tictactoe.services.games.broadcaster import UpdateBroadcaster
    from tictactoe.services.games.session import SessionService
    from tictactoe.services.games.store import GameStore
    broadcaster = UpdateBroadcaster(
        socketio,
        namespace=WS_NAMESPACE,
        background=bool(flask_app.config.get('BROADCAST_IN_BACKGROUND', True)),
        logger=flask_app.logger,
    )
    flask_app.extensions['update_broadcaster'] = broadcaster
    flask_app.extensions['game_sessions'] = SessionService(
        GameStore(),
        max_name_length=int(flask_app.config.get('PLAYER_NAME_MAX_LENGTH', 64)),
    )

    from tictactoe.routes import main
    flask_app.register_blueprint(main)

    from tictactoe.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from tictactoe.socketio_events import register_socketio_handlers
    register_socketio_handlers(broadcaster)

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the game tables."""
        import tictactoe.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
