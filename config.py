import os


def _database_url():
    if os.environ.get('DATABASE_URL'):
        return os.environ['DATABASE_URL']
    user = os.environ.get('DB_USER', 'postgres')
    password = os.environ.get('DB_PASSWORD', 'password')
    host = os.environ.get('DB_HOST', 'localhost')
    port = os.environ.get('DB_PORT', '5432')
    name = os.environ.get('DB_NAME', 'tictactoe')
    return f'postgresql://{user}:{password}@{host}:{port}/{name}'


def _cors_origins():
    origins = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:4173",
        os.environ.get('FRONTEND_URL'),
    ]
    return [o.rstrip('/') for o in origins if o]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Store calls must fail within bounded time rather than hang a request
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_timeout': int(os.environ.get('DB_POOL_TIMEOUT_SEC', '10')),
    }
    CORS_ORIGINS = _cors_origins()
    PLAYER_NAME_MAX_LENGTH = int(os.environ.get('PLAYER_NAME_MAX_LENGTH', '64'))
    # Fan out pushes from a Socket.IO background task instead of the request thread
    BROADCAST_IN_BACKGROUND = os.environ.get('BROADCAST_IN_BACKGROUND', '1') != '0'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    PORT = int(os.environ.get('PORT', '3001'))
