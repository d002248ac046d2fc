#!/usr/bin/env python3
"""

    Greynir: Natural language processing for Icelandic

    Treebank web server main module

    Copyright (C) 2023 Miðeind ehf.

       This program is free software: you can redistribute it and/or modify
       it under the terms of the GNU General Public License as published by
       the Free Software Foundation, either version 3 of the License, or
       (at your option) any later version.
       This program is distributed in the hope that it will be useful,
       but WITHOUT ANY WARRANTY; without even the implied warranty of
       MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
       GNU General Public License for more details.

    You should have received a copy of the GNU General Public License
    along with this program.  If not, see http://www.gnu.org/licenses/.


    This module is written in Python 3 and uses the Flask framework
    as its web server. It exposes a small JSON API for reading trees
    in Penn Treebank format and for detokenizing token sequences.
    In production, this module is typically run inside Gunicorn under
    nginx or a compatible WSGI HTTP(S) server. For development, it can
    be run directly from the command line and accessed through port 5000.

    Flask routes are imported from routes/*

"""

from typing import Any, List, Tuple, cast

import sys
import logging
from datetime import datetime
from platform import system as os_name

from flask import Flask
from flask.wrappers import Response
from flask_cors import CORS  # type: ignore

from werkzeug.middleware.proxy_fix import ProxyFix

from dotenv import load_dotenv

from settings import Settings, ConfigError
from utility import CONFIG_DIR, CONFIG_FILE


# RUNNING_AS_SERVER is True if we're executing under nginx/Gunicorn,
# but False if the program was invoked directly as a Python main module.
RUNNING_AS_SERVER = __name__ != "__main__"

# Load variables from '.env' file into environment
load_dotenv()

# Initialize and configure Flask app
app = Flask(__name__)

# Enable Cross Origin Resource Sharing for app
cors = CORS(app)
app.config["CORS_HEADERS"] = "Content-Type"

# Fix access to client remote_addr when running behind proxy
setattr(app, "wsgi_app", ProxyFix(app.wsgi_app))  # type: ignore

cast(Any, app).json.ensure_ascii = False  # We're fine with using Unicode/UTF-8
app.config["MAX_CONTENT_LENGTH"] = 1 * 1024 * 1024  # 1 MB, max upload file size

# Push application context to give view functions, error handlers,
# and other functions access to app instance via current_app
app.app_context().push()

# Register blueprint routes
from routes import routes, better_jsonify  # noqa

app.register_blueprint(routes)


# Custom 404 error handler
@app.errorhandler(404)
def page_not_found(_) -> Tuple[Response, int]:
    """Return a custom 404 error"""
    return better_jsonify(valid=False, reason="Not found"), 404


# Custom 500 error handler
@app.errorhandler(500)
def server_error(_) -> Tuple[Response, int]:
    """Return a custom 500 error"""
    return better_jsonify(valid=False, reason="Internal server error"), 500


# Initialize the main module
try:
    # Read configuration file
    Settings.read(str(CONFIG_FILE))
except ConfigError as e:
    logging.error("Treebank server did not start due to a configuration error:\n{0}".format(e))
    sys.exit(1)

if Settings.DEBUG:
    print(
        "\nStarting Treebank web app at {0} with debug={1}, "
        "host={2}:{3}\nPython {4} on {5}\n".format(
            datetime.utcnow(),
            Settings.DEBUG,
            Settings.HOST,
            Settings.PORT,
            sys.version,
            os_name(),
        )
    )


if not RUNNING_AS_SERVER:

    # Run a default Flask web server for testing if invoked directly as a main program

    logging.basicConfig(
        format="%(asctime)s %(levelname)s:%(message)s",
        level=logging.DEBUG if Settings.DEBUG else logging.INFO,
    )

    # Reload web server when config files change
    extra_files: List[str] = [str(p) for p in CONFIG_DIR.resolve().glob("*.conf")]

    from socket import error as socket_error
    import errno

    try:
        # Suppress information log messages from Werkzeug
        werkzeug_log = logging.getLogger("werkzeug")
        if werkzeug_log:
            werkzeug_log.setLevel(logging.WARNING)
        # Run the Flask web server application
        app.run(
            host=Settings.HOST,
            port=Settings.PORT,
            debug=Settings.DEBUG,
            use_reloader=True,
            extra_files=extra_files,
        )
    except socket_error as e:
        if e.errno == errno.EADDRINUSE:  # Address already in use
            logging.error(
                "Another application is already running at host {0}:{1}".format(
                    Settings.HOST, Settings.PORT
                )
            )
            sys.exit(1)
        else:
            raise

else:
    app.config["PRODUCTION"] = True

    # Suppress information log messages from Werkzeug
    werkzeug_log = logging.getLogger("werkzeug")
    if werkzeug_log:
        werkzeug_log.setLevel(logging.WARNING)

    # Log our startup
    version = sys.version.replace("\n", " ")
    log_str = (
        f"Treebank server instance starting with "
        f"host={Settings.HOST}:{Settings.PORT} "
        f"on Python {version}"
    )
    logging.info(log_str)
