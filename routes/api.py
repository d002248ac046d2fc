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


    API routes
    Note: All routes ending with .api are configured not to be cached by nginx

"""

from typing import List, Optional, Tuple

import logging

from flask import request
from flask.wrappers import Response

from settings import Settings, DetokenizerRules
from tree import Tree
from treereader import PennTreeReader, UnexpectedEndOfInput
from detokenizer import DictionaryDetokenizer
from utility import default_normalizer

from . import routes, better_jsonify, text_from_request, bool_from_request


def _read_trees(text: str, strip: Optional[bool]) -> Tuple[List[Tree], bool]:
    """Read at most Settings.MAX_TREES trees from the text. Returns
    the trees and a flag indicating whether the output was truncated."""
    trees: List[Tree] = []
    with PennTreeReader.from_string(
        text, tree_normalizer=default_normalizer(strip)
    ) as rdr:
        for t in rdr:
            if len(trees) >= Settings.MAX_TREES:
                return trees, True
            trees.append(t)
    return trees, False


def _strip_flag() -> Optional[bool]:
    """Return the strip flag from the request, or None if it is absent"""
    if request.values.get("strip") is None:
        return None
    return bool_from_request(request, "strip")


@routes.route("/trees.api", methods=["GET", "POST"])
@routes.route("/trees.api/v<int:version>", methods=["GET", "POST"])
def trees_api(version: int = 1) -> Response:
    """API to read trees in Penn Treebank bracketed format and
    return them in JSON format"""
    if not (1 <= version <= 1):
        # Unsupported version
        return better_jsonify(valid=False, reason="Unsupported version")

    try:
        text = text_from_request(request)
    except Exception:
        return better_jsonify(valid=False, reason="Invalid request")

    try:
        trees, truncated = _read_trees(text, _strip_flag())
    except UnexpectedEndOfInput as e:
        logging.info("trees.api: incomplete tree in input")
        return better_jsonify(valid=False, reason=str(e))

    # Nested JSON output is bounded in depth
    depth = max((t.depth() for t in trees), default=0)
    if depth > Settings.MAX_DEPTH:
        logging.info("trees.api: tree of depth {0} rejected".format(depth))
        return better_jsonify(
            valid=False,
            reason="Tree is too deep ({0} levels, maximum is {1})".format(
                depth, Settings.MAX_DEPTH
            ),
        )

    stats = dict(
        num_trees=len(trees),
        num_leaves=sum(len(t.words()) for t in trees),
        truncated=truncated,
    )
    return better_jsonify(valid=True, result=[t.to_dict() for t in trees], stats=stats)


@routes.route("/yield.api", methods=["GET", "POST"])
@routes.route("/yield.api/v<int:version>", methods=["GET", "POST"])
def yield_api(version: int = 1) -> Response:
    """API to read trees in Penn Treebank bracketed format and
    return their tagged words and plain text"""
    if not (1 <= version <= 1):
        return better_jsonify(valid=False, reason="Unsupported version")

    try:
        text = text_from_request(request)
    except Exception:
        return better_jsonify(valid=False, reason="Invalid request")

    try:
        trees, truncated = _read_trees(text, _strip_flag())
    except UnexpectedEndOfInput as e:
        return better_jsonify(valid=False, reason=str(e))

    result = [
        dict(text=t.text, tagged=[[w, tag] for w, tag in t.tagged_words()])
        for t in trees
    ]
    return better_jsonify(valid=True, result=result, truncated=truncated)


@routes.route("/detokenize.api", methods=["GET", "POST"])
@routes.route("/detokenize.api/v<int:version>", methods=["GET", "POST"])
def detokenize_api(version: int = 1) -> Response:
    """API to join a sequence of whitespace separated tokens into text"""
    if not (1 <= version <= 1):
        return better_jsonify(valid=False, reason="Unsupported version")

    try:
        text = text_from_request(request)
    except Exception:
        return better_jsonify(valid=False, reason="Invalid request")

    marker = request.values.get("marker")
    detok = DictionaryDetokenizer(DetokenizerRules.merged())
    tokens = text.split()
    return better_jsonify(
        valid=True, result=detok.detokenize(tokens, split_marker=marker or None)
    )
