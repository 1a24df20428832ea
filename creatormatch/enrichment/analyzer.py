"""
Creator Match - Site Classifier (LLM)
Build prompt from the homepage snippet, call the model for strict JSON,
map its category onto the taxonomy. Backs the /api/classify endpoint.
"""
import json
import math
import uuid
import logging
from typing import Optional
from anthropic import AsyncAnthropic, APIError
from creatormatch.config import (
    ANTHROPIC_API_KEY, LLM_MODEL, LLM_MAX_TOKENS, CANONICAL_CATEGORIES, DEFAULT_CONFIDENCE,
)
from creatormatch.engine.taxonomy import normalize_to_canonical_category
from creatormatch.errors import ClassificationFailed
from creatormatch.models import SiteClassification, SiteSnippet

logger = logging.getLogger(__name__)

client = AsyncAnthropic(api_key=ANTHROPIC_API_KEY) if ANTHROPIC_API_KEY else None


CLASSIFIER_SYSTEM = """You are a strict website classifier.
Return ONLY valid JSON (no markdown, no code fences).
Choose exactly one category from this list:
{categories}

Output JSON schema:
{{ "category": "<one of the categories>", "confidence": <number 0..1>, "reason": "<short reason>" }}"""

CLASSIFIER_PROMPT = """Website URL: {website_url}

Title: {title}
Meta description: {description}

Homepage text sample:
{text}"""


async def classify_site(
    website_url: str,
    snippet: SiteSnippet,
    llm: Optional[AsyncAnthropic] = None,
) -> SiteClassification:
    """
    Classify a website into one canonical category.
    Raises ClassificationFailed when the model is unavailable, answers
    without JSON, or picks a category outside the taxonomy.
    """
    llm = llm or client
    if not llm:
        raise ClassificationFailed("Missing ANTHROPIC_API_KEY")

    llm_call_id = f"llm-{uuid.uuid4().hex[:12]}"
    system = CLASSIFIER_SYSTEM.format(
        categories="\n".join(f"- {c}" for c in CANONICAL_CATEGORIES),
    )
    prompt = CLASSIFIER_PROMPT.format(
        website_url=website_url,
        title=snippet.title or "(none)",
        description=snippet.description or "(none)",
        text=snippet.text or "(no text)",
    )

    raw_text = await _call_llm(llm, system, prompt, llm_call_id)
    parsed = _parse_strict_json(raw_text)
    if parsed is None:
        logger.error(f"No JSON in model output [{llm_call_id}]")
        raise ClassificationFailed("Model did not return JSON")

    category = normalize_to_canonical_category(parsed.get("category"))
    if not category:
        raise ClassificationFailed("Model returned an invalid category")

    return SiteClassification(
        category=category,
        confidence=_clamp_confidence(parsed.get("confidence")),
        reason=str(parsed.get("reason") or "").strip() or "Classified by site signals",
    )


def _clamp_confidence(value) -> float:
    try:
        n = float(value)
    except (TypeError, ValueError):
        return DEFAULT_CONFIDENCE
    if not math.isfinite(n):
        return DEFAULT_CONFIDENCE
    return max(0.0, min(1.0, n))


async def _call_llm(llm: AsyncAnthropic, system: str, prompt: str, call_id: str) -> str:
    """Call Claude and return the raw text response."""
    logger.info(f"LLM call [{call_id}]: {len(prompt)} chars")
    try:
        response = await llm.messages.create(
            model=LLM_MODEL,
            max_tokens=LLM_MAX_TOKENS,
            temperature=0,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        )
    except APIError as e:
        logger.error(f"LLM call failed [{call_id}]: {e}")
        raise ClassificationFailed(f"Classifier model error: {e}")
    return response.content[0].text if response.content else ""


def _parse_strict_json(text: str) -> Optional[dict]:
    """Parse a JSON object from model output, tolerating code fences or chatter."""
    text = (text or "").strip()
    try:
        parsed = json.loads(text)
        return parsed if isinstance(parsed, dict) else None
    except json.JSONDecodeError:
        pass

    if "```" in text:
        for part in text.split("```"):
            part = part.strip()
            if part.startswith("json"):
                part = part[4:].strip()
            try:
                parsed = json.loads(part)
                if isinstance(parsed, dict):
                    return parsed
            except json.JSONDecodeError:
                continue

    start = text.find("{")
    end = text.rfind("}") + 1
    if start >= 0 and end > start:
        try:
            parsed = json.loads(text[start:end])
            return parsed if isinstance(parsed, dict) else None
        except json.JSONDecodeError:
            pass

    return None
