import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma-separated origins allowed for HTTP and Socket.IO
    CORS_ORIGINS = os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
    )
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    # Scoring
    POINTS_PER_CORRECT_VOTE = int(os.environ.get('POINTS_PER_CORRECT_VOTE', '10'))
    LEADERBOARD_SIZE = int(os.environ.get('LEADERBOARD_SIZE', '3'))
