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


    Tests for the Flask web application and its API routes

"""

import os
import sys

import pytest

# Shenanigans to enable Pytest to discover modules in the
# main workspace directory (the parent of /tests)
basepath, _ = os.path.split(os.path.realpath(__file__))
mainpath = os.path.join(basepath, "..")
if mainpath not in sys.path:
    sys.path.insert(0, mainpath)

from main import app  # noqa
from settings import Settings  # noqa

# Routes that don't return 200 OK without query/post parameters
SKIP_ROUTES = frozenset()

REQ_METHODS = set(["GET", "POST"])


@pytest.fixture
def client():
    """Create Flask's modified Werkzeug client to use in tests"""
    app.config["TESTING"] = True
    client = app.test_client()
    return client


def test_routes(client):
    """Test all non-argument routes in Flask app"""
    for rule in app.url_map.iter_rules():
        route = str(rule)
        if rule.arguments or route in SKIP_ROUTES:
            continue

        for m in REQ_METHODS.intersection(set(rule.methods)):
            # Make request for each method supported by route
            method = getattr(client, m.lower())
            resp = method(route)
            assert resp.status == "200 OK"
            assert resp.content_type == "application/json; charset=utf-8"


def test_trees_api(client):
    t = "(S (NP (NN dog)) (VP (VB runs))) (S (NP (NNP Þórir)))"
    for resp in (
        client.get("/trees.api", query_string=dict(t=t)),
        client.get("/trees.api/v1", query_string=dict(t=t)),
        client.post("/trees.api", data=dict(text=t)),
        client.post(
            "/trees.api",
            data=t.encode("utf-8"),
            headers={"Content-Type": "text/plain"},
        ),
    ):
        assert resp.status_code == 200
        j = resp.get_json()
        assert j["valid"]
        assert j["stats"] == dict(num_trees=2, num_leaves=3, truncated=False)
        assert len(j["result"]) == 2
        assert j["result"][0]["label"] == "S"
        np = j["result"][0]["children"][0]
        assert np == {
            "label": "NP",
            "children": [{"label": "NN", "children": [{"word": "dog", "index": 1}]}],
        }
        assert j["result"][1]["children"][0]["children"][0]["children"][0] == {
            "word": "Þórir",
            "index": 1,
        }


def test_trees_api_errors(client):
    resp = client.get("/trees.api", query_string=dict(t="(S (NP (NN dog)"))
    assert resp.status_code == 200
    j = resp.get_json()
    assert not j["valid"]
    assert j["reason"]

    resp = client.get("/trees.api/v2", query_string=dict(t="(A b)"))
    j = resp.get_json()
    assert not j["valid"]
    assert j["reason"] == "Unsupported version"

    # Garbage outside of trees is skipped
    resp = client.get("/trees.api", query_string=dict(t="junk (A b) ) (C d)"))
    j = resp.get_json()
    assert j["valid"]
    assert j["stats"]["num_trees"] == 2


def test_trees_api_strip(client):
    t = "(ROOT (S (X y)))"
    j = client.get("/trees.api", query_string=dict(t=t)).get_json()
    assert j["result"][0]["label"] == "ROOT"
    j = client.get("/trees.api", query_string=dict(t=t, strip="true")).get_json()
    assert j["result"][0]["label"] == "S"
    j = client.post("/trees.api", data=dict(text=t, strip="1")).get_json()
    assert j["result"][0]["label"] == "S"
    j = client.get("/trees.api", query_string=dict(t=t, strip="false")).get_json()
    assert j["result"][0]["label"] == "ROOT"


def test_trees_api_max_trees(client, monkeypatch):
    monkeypatch.setattr(Settings, "MAX_TREES", 2)
    j = client.get("/trees.api", query_string=dict(t="(A a) (B b) (C c)")).get_json()
    assert j["valid"]
    assert j["stats"]["num_trees"] == 2
    assert j["stats"]["truncated"]
    j = client.get("/trees.api", query_string=dict(t="(A a) (B b)")).get_json()
    assert not j["stats"]["truncated"]


def test_deep_trees(client, monkeypatch):
    def deep(n):
        return "(X " * n + "w" + ")" * n

    resp = client.post("/trees.api", data=dict(text=deep(3000)))
    assert resp.status_code == 200
    j = resp.get_json()
    assert not j["valid"]
    assert "too deep" in j["reason"]

    j = client.post("/trees.api", data=dict(text=deep(100))).get_json()
    assert j["valid"]
    d = j["result"][0]
    for _ in range(100):
        (d,) = d["children"]
    assert d == {"word": "w", "index": 1}

    monkeypatch.setattr(Settings, "MAX_DEPTH", 50)
    j = client.post("/trees.api", data=dict(text=deep(100))).get_json()
    assert not j["valid"]

    # Flat output is not limited
    j = client.post("/yield.api", data=dict(text=deep(3000))).get_json()
    assert j["valid"]
    assert j["result"] == [dict(text="w", tagged=[["w", "X"]])]


def test_yield_api(client):
    t = "(S (NP (NNP John)) (VP (VBZ runs)) (. .))"
    j = client.get("/yield.api", query_string=dict(t=t)).get_json()
    assert j["valid"]
    assert not j["truncated"]
    assert j["result"] == [
        dict(text="John runs.", tagged=[["John", "NNP"], ["runs", "VBZ"], [".", "."]])
    ]
    j = client.get("/yield.api", query_string=dict(t="(S (X")).get_json()
    assert not j["valid"]


def test_detokenize_api(client):
    j = client.get(
        "/detokenize.api", query_string=dict(t='He said , " Hello ! "')
    ).get_json()
    assert j["valid"]
    assert j["result"] == 'He said, "Hello!"'
    # Rules from the configuration file
    j = client.post("/detokenize.api", data=dict(text="I do n't know")).get_json()
    assert j["result"] == "I don't know"
    j = client.get(
        "/detokenize.api", query_string=dict(t="-LRB- see above -RRB-")
    ).get_json()
    assert j["result"] == "-LRB-see above-RRB-"
    j = client.get(
        "/detokenize.api", query_string=dict(t="well - known", marker="|")
    ).get_json()
    assert j["result"] == "well|-|known"


def test_not_found(client):
    resp = client.get("/no/such/route")
    assert resp.status_code == 404
    j = resp.get_json()
    assert not j["valid"]
