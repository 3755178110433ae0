from __future__ import annotations

from pathlib import Path

from flask import Flask, send_from_directory
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .game.service import GameService
from .routes.health import bp as health_bp
from .routes.sessions import bp as sessions_bp
from .routes.words import bp as words_bp
from .realtime.handlers import register_socketio_handlers
from .realtime.router import EventRouter


def create_app(config_class=Config) -> tuple[Flask, SocketIO]:
    dist_dir = Path(__file__).resolve().parents[2] / "frontend" / "dist"

    static_folder = str(dist_dir) if dist_dir.exists() else None
    static_url_path = "/" if dist_dir.exists() else None

    app = Flask(
        __name__,
        static_folder=static_folder,
        static_url_path=static_url_path,
    )
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}, r"/words": {"origins": cors_origins}})

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=app.config.get("SOCKETIO_ASYNC_MODE") or None,
    )

    service = GameService.from_config(app.config, logger=app.logger)
    app.extensions["typerace"] = service
    router = EventRouter(
        service,
        match_on_join=app.config.get("MATCH_ON_JOIN", True),
        logger=app.logger,
    )

    app.register_blueprint(words_bp)
    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(sessions_bp, url_prefix="/api")

    register_socketio_handlers(
        socketio,
        router,
        queue_check_interval=float(app.config.get("QUEUE_CHECK_INTERVAL_SEC", 1.0)),
    )

    if dist_dir.exists():
        @app.get("/")
        def index():
            return send_from_directory(dist_dir, "index.html")

        @app.get("/<path:path>")
        def static_proxy(path: str):
            file_path = dist_dir / path
            if file_path.exists() and file_path.is_file():
                return send_from_directory(dist_dir, path)
            return send_from_directory(dist_dir, "index.html")

    app.logger.info(
        f"[startup] players_per_game={service.players_per_game} words_per_game={service.words_per_game}"
    )
    return app, socketio
