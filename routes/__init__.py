"""

    Greynir: Natural language processing for Icelandic

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


    This module contains all routes for the Treebank Flask web application,
    along with a few utility functions for handling requests and responses.

"""

from typing import Optional, Any

from flask import Blueprint, jsonify
from flask.wrappers import Response, Request


# Maximum length of incoming GET/POST parameters
MAX_TEXT_LENGTH = 65536
MAX_TEXT_LENGTH_VIA_URL = 2048

_TRUTHY = frozenset(("true", "1", "yes"))

routes: Blueprint = Blueprint("routes", __name__)


def bool_from_request(rq: Request, name: str, default: bool = False) -> bool:
    """Get a boolean from JSON encoded in a request form"""
    b = rq.form.get(name)
    if b is None:
        b = rq.args.get(name)
    if b is None:
        # Not present in the form: return the default
        return default
    return isinstance(b, str) and b.lower() in _TRUTHY


def better_jsonify(**kwargs: Any) -> Response:
    """Ensure that the Content-Type header includes 'charset=utf-8'"""
    resp: Response = jsonify(**kwargs)
    resp.headers["Content-Type"] = "application/json; charset=utf-8"
    return resp


def text_from_request(
    rq: Request, *, post_field: Optional[str] = None, get_field: Optional[str] = None
) -> str:
    """Return text passed in a HTTP request, either using GET or POST.
    When using GET, the default parameter name is 't'. This can
    be overridden using the get_field parameter.
    When using POST, the default form field name is 'text'. This can
    be overridden using the post_field paramter.
    """
    if rq.method == "POST":
        if rq.headers.get("Content-Type") == "text/plain":
            # Accept plain text POSTs, UTF-8 encoded.
            # Example usage:
            # curl -d @wsj_0001.mrg http://localhost:5000/trees.api \
            #     --header "Content-Type: text/plain"
            text = rq.data.decode("utf-8")
        else:
            # Also accept form/url-encoded requests:
            # curl -d "text=(S (NP (NN dog)) (VP (VB runs)))" \
            #     http://localhost:5000/trees.api
            text = rq.form.get(post_field or "text", "")
        text = text[0:MAX_TEXT_LENGTH]
    elif rq.method == "GET":
        text = rq.args.get(get_field or "t", "")[0:MAX_TEXT_LENGTH_VIA_URL]
    else:
        # Unknown/unsupported method
        text = ""

    return text


# Import routes from other files
from .api import *  # noqa
