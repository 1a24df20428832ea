"""Tests for the category classifier client."""

import asyncio

import httpx
import pytest

from creatormatch.errors import ClassificationFailed
from creatormatch.integrations.classifier_client import ClassifierClient, parse_classification
from creatormatch.models import ClassificationResult

CLASSIFIER_URL = "https://classifier.test/api/classify"


def _classify(handler, url="https://brand.com/"):
    client = ClassifierClient(base_url=CLASSIFIER_URL, transport=httpx.MockTransport(handler))
    return asyncio.run(client.classify(url))


def test_sends_target_url_as_query_param():
    seen = {}

    def handler(request):
        seen["url"] = request.url.params.get("url")
        return httpx.Response(200, json={"category": "Games", "confidence": 0.9})

    result = _classify(handler, "https://brand.com/shop?x=1")
    assert seen["url"] == "https://brand.com/shop?x=1"
    assert result == ClassificationResult(category="Games", confidence=0.9)


def test_label_is_normalized():
    result = _classify(lambda r: httpx.Response(200, json={"category": "gaming", "confidence": 0.7}))
    assert result.category == "Games"


@pytest.mark.parametrize("payload", [{"category": "Finance"}, {"category": "Finance", "confidence": "high"},
                                     {"category": "Finance", "confidence": None}])
def test_missing_or_non_numeric_confidence_defaults(payload):
    result = _classify(lambda r: httpx.Response(200, json=payload))
    assert result.confidence == 0.6


def test_confidence_is_not_clamped():
    result = _classify(lambda r: httpx.Response(200, json={"category": "Social", "confidence": 1.4}))
    assert result.confidence == 1.4


def test_unknown_category_fails():
    with pytest.raises(ClassificationFailed, match="unknown category"):
        _classify(lambda r: httpx.Response(200, json={"category": "Gardening", "confidence": 0.9}))


def test_error_status_carries_service_message():
    def handler(request):
        return httpx.Response(500, json={"error": "Missing ANTHROPIC_API_KEY"})

    with pytest.raises(ClassificationFailed) as exc:
        _classify(handler)
    assert str(exc.value) == "Missing ANTHROPIC_API_KEY"


def test_error_status_with_plain_body():
    with pytest.raises(ClassificationFailed, match="upstream exploded"):
        _classify(lambda r: httpx.Response(502, text="upstream exploded"))


def test_error_status_with_empty_body():
    with pytest.raises(ClassificationFailed, match=r"Classifier failed \(503\)"):
        _classify(lambda r: httpx.Response(503))


def test_malformed_json_fails():
    with pytest.raises(ClassificationFailed, match="malformed JSON"):
        _classify(lambda r: httpx.Response(200, text="not json"))


def test_transport_error_fails():
    def handler(request):
        raise httpx.ConnectTimeout("connect timed out", request=request)

    with pytest.raises(ClassificationFailed, match="connect timed out"):
        _classify(handler)


def test_parse_classification_rejects_non_objects():
    with pytest.raises(ClassificationFailed):
        parse_classification(["Games"])
