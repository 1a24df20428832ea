"""
Creator Match - Category Normalizer
Maps free-text labels from the classifier and the roster sheet onto the
closed canonical taxonomy. Exact match first, then the ordered alias
table (first matching entry wins).
"""
from typing import Optional
from creatormatch.config import CANONICAL_CATEGORIES

# Order matters: a label containing aliases of several categories goes to
# the first entry listed. Substring hits ("profile" -> "file") are accepted.
CATEGORY_ALIASES = [
    ("Games", ["game", "games", "gaming", "video games", "esports"]),
    ("Social", ["social", "community", "messaging", "chat"]),
    ("Entertainment", ["entertainment", "media", "music", "video", "streaming"]),
    ("Productivity", ["productivity", "tools", "workspace", "notes", "calendar", "tasks"]),
    ("Lifestyle", ["lifestyle", "home", "shopping", "dating"]),
    ("Health & Fitness", ["health", "fitness", "wellness", "workout", "gym", "nutrition"]),
    ("Education", ["education", "learning", "course", "school", "training"]),
    ("Business", ["business", "b2b", "enterprise", "crm", "sales", "marketing"]),
    ("Finance", ["finance", "fintech", "bank", "banking", "payments", "wallet", "credit", "investing"]),
    ("Utilities", ["utilities", "utility", "security", "vpn", "scanner", "file", "storage"]),
]

_CANONICAL_BY_KEY = {c.lower(): c for c in CANONICAL_CATEGORIES}


def title_case(label) -> str:
    """'  health   AND fitness ' -> 'Health And Fitness'."""
    words = str(label or "").split()
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def normalize_header(label) -> str:
    """Column header key: trimmed, lowercased, inner whitespace collapsed."""
    return " ".join(str(label or "").split()).lower()


def is_canonical(label: str) -> bool:
    return label in CANONICAL_CATEGORIES


def normalize_to_canonical_category(raw_label) -> Optional[str]:
    """Return the canonical category for a label, or None if uncategorizable."""
    key = title_case(raw_label).lower()
    if not key:
        return None

    if key in _CANONICAL_BY_KEY:
        return _CANONICAL_BY_KEY[key]

    for category, aliases in CATEGORY_ALIASES:
        for alias in aliases:
            if key == alias or alias in key:
                return category

    return None
