import os
import sys


def _default_async_mode() -> str:
    # eventlet has known compatibility issues on Windows and newer Python
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Socket.IO
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip() or _default_async_mode()

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Matchmaking
    PLAYERS_PER_GAME = int(os.environ.get("PLAYERS_PER_GAME", "3"))
    QUEUE_CHECK_INTERVAL_SEC = float(os.environ.get("QUEUE_CHECK_INTERVAL_SEC", "1.0"))
    MATCH_ON_JOIN = os.environ.get("MATCH_ON_JOIN", "1") == "1"
    QUEUE_ALLOW_DUPLICATES = os.environ.get("QUEUE_ALLOW_DUPLICATES", "0") == "1"

    # Game
    WORDS_PER_GAME = int(os.environ.get("WORDS_PER_GAME", "2"))
    WORDS_PREVIEW_COUNT = int(os.environ.get("WORDS_PREVIEW_COUNT", "2"))
    SESSION_HISTORY_LIMIT = int(os.environ.get("SESSION_HISTORY_LIMIT", "100"))
