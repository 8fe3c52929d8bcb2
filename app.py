#!/usr/bin/env python3
import logging
import os
import sys
from gamespace import create_app, BIND, PORT


def _resolve_data_file() -> str:
    if len(sys.argv) >= 2:
        return os.path.abspath(sys.argv[1])
    return os.path.abspath(os.environ.get("GAMES_FILE", "games.txt"))


if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(_resolve_data_file())
    app.run(host=BIND, port=PORT, debug=False, threaded=True)
