"""
Creator Match - Category Classifier Client
Asks the classification service which category a website belongs to.
An unrecognized category is a failure, never silently defaulted.
"""
import logging
from typing import Optional
import httpx
from creatormatch.config import CLASSIFIER_URL, CLASSIFIER_TIMEOUT, DEFAULT_CONFIDENCE
from creatormatch.engine.taxonomy import normalize_to_canonical_category
from creatormatch.errors import ClassificationFailed
from creatormatch.models import ClassificationResult

logger = logging.getLogger(__name__)


def _error_text(resp: httpx.Response) -> str:
    """Prefer the service's {"error": ...} message, then the raw body."""
    try:
        data = resp.json()
        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
    except ValueError:
        pass
    return resp.text.strip() or f"Classifier failed ({resp.status_code})"


def parse_classification(data) -> ClassificationResult:
    if not isinstance(data, dict):
        raise ClassificationFailed("Classifier returned malformed JSON")

    category = normalize_to_canonical_category(data.get("category"))
    if not category:
        raise ClassificationFailed("Classifier returned an unknown category")

    confidence = data.get("confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        confidence = DEFAULT_CONFIDENCE
    return ClassificationResult(category=category, confidence=float(confidence))


class ClassifierClient:
    """HTTP client for GET <classifier>?url=..."""

    def __init__(
        self,
        base_url: str = CLASSIFIER_URL,
        timeout: float = CLASSIFIER_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    async def classify(self, url: str) -> ClassificationResult:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(
                    self.base_url,
                    params={"url": url},
                    headers={"Accept": "application/json", "Cache-Control": "no-store"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Classifier request failed for {url}: {e}")
            raise ClassificationFailed(str(e) or "Classifier request failed")

        if not resp.is_success:
            message = _error_text(resp)
            logger.error(f"Classifier error ({resp.status_code}) for {url}: {message}")
            raise ClassificationFailed(message)

        try:
            data = resp.json()
        except ValueError:
            raise ClassificationFailed("Classifier returned malformed JSON")

        result = parse_classification(data)
        logger.info(f"Classified {url} as {result.category} ({result.confidence:.2f})")
        return result
