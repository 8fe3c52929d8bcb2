import logging
import os
from pathlib import Path
from typing import Optional

from flask import Flask

from .console import ConsoleLog
from .errors import PersistFailure
from .facade import LauncherFacade
from .launch import ProcessRunner
from .routes import bp as routes_bp
from .store import RecordStore

# Bind only localhost unless overridden
BIND = os.environ.get("BIND", "127.0.0.1")
PORT = int(os.environ.get("PORT", "5000"))

logger = logging.getLogger(__name__)


def create_app(data_file: str, runner: Optional[ProcessRunner] = None) -> Flask:
    app = Flask(__name__)
    app.secret_key = os.environ.get("FLASK_SECRET", "dev-" + os.urandom(8).hex())
    app.config["DATA_FILE"] = str(Path(data_file))
    app.config["APP_TITLE"] = "GameSpace"
    app.config["CONSOLE_MAX_LINES"] = 2000

    launcher = LauncherFacade(
        RecordStore(app.config["DATA_FILE"]),
        runner=runner,
        console=ConsoleLog(app.config["CONSOLE_MAX_LINES"]),
    )
    try:
        launcher.load()
    except PersistFailure as e:
        logger.error("%s", e)
        launcher.console.append(f"Failed to load games: {e}")
    app.extensions["gamespace"] = launcher

    app.register_blueprint(routes_bp)
    return app
