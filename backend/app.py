import os
import sys
from pathlib import Path

from dotenv import load_dotenv


def main() -> None:
    load_dotenv(Path(__file__).resolve().parents[1] / ".env")

    # Must patch before Flask/SocketIO are imported
    if os.environ.get("SOCKETIO_ASYNC_MODE", "").strip() in ("", "eventlet") and (
        not sys.platform.startswith("win") and sys.version_info < (3, 13)
    ):
        import eventlet

        eventlet.monkey_patch()

    from typerace.server import create_app

    app, socketio = create_app()
    socketio.run(
        app,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8080")),
        debug=os.environ.get("FLASK_DEBUG", "0") == "1",
        allow_unsafe_werkzeug=True,
    )


if __name__ == "__main__":
    main()
