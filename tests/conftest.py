"""Shared fixtures: fake sheet payloads and HTTP transports."""

import json

import httpx
import pytest

from creatormatch.integrations.classifier_client import ClassifierClient
from creatormatch.integrations.roster_source import CsvRosterSource, GvizRosterSource
from creatormatch.pipeline import MatchOrchestrator
from creatormatch.roster import RosterLoader

GVIZ_URL = "https://sheets.test/gviz"
CSV_URL = "https://sheets.test/csv"
CLASSIFIER_URL = "https://classifier.test/api/classify"


def _gviz_text(rows, headers=("Creator", "Category", "Photo", "Price")):
    payload = {
        "version": "0.6",
        "status": "ok",
        "table": {
            "cols": [{"id": chr(65 + i), "label": h, "type": "string"} for i, h in enumerate(headers)],
            "rows": [{"c": [None if v is None else {"v": v} for v in row]} for row in rows],
        },
    }
    return "/*O_o*/\ngoogle.visualization.Query.setResponse(" + json.dumps(payload) + ");"


@pytest.fixture
def gviz_text():
    return _gviz_text


@pytest.fixture
def games_sheet():
    """Three Games creators, one Finance creator, one uncategorizable row."""
    return _gviz_text([
        ["Ava Stone", "Gaming", "https://img.test/ava.png", 120],
        ["Ben Ray", "games", None, None],
        ["Cleo Park", "Esports", None, 80.5],
        ["Dan Cole", "Fintech", None, 40],
        ["Eve Moss", "Gardening", None, 10],
    ])


@pytest.fixture
def make_orchestrator():
    """
    Orchestrator wired to a MockTransport.
    routes maps a URL (without query) to a (status, text) pair or an exception.
    """
    def build(routes, **kwargs):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            key = f"{request.url.scheme}://{request.url.host}{request.url.path}"
            calls.append(key)
            route = routes.get(key)
            if route is None:
                return httpx.Response(404, text="not found")
            if isinstance(route, Exception):
                raise route
            status, body = route
            if isinstance(body, (dict, list)):
                return httpx.Response(status, json=body)
            return httpx.Response(status, text=body)

        transport = httpx.MockTransport(handler)
        orchestrator = MatchOrchestrator(
            roster_loader=RosterLoader(
                sources=[GvizRosterSource(GVIZ_URL), CsvRosterSource(CSV_URL)],
                transport=transport,
            ),
            classifier=ClassifierClient(base_url=CLASSIFIER_URL, transport=transport),
            min_display_seconds=kwargs.pop("min_display_seconds", 0),
            **kwargs,
        )
        orchestrator.calls = calls
        return orchestrator

    return build
