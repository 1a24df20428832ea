"""
Creator Match - Deterministic Selector
Same site + same roster snapshot -> same creator, with no stored state.
The rolling hash (multiplier 31, modulo 2**32) is part of the contract:
changing it reshuffles every existing match.

URLs are canonicalized the way a browser's URL parser does it (IDNA
host, percent-encoded path and query, dot segments resolved) so the seed
matches the one the web front end computes.
"""
import re
from typing import Optional
from urllib.parse import quote, urlsplit, urlunsplit
import idna
from creatormatch.errors import InvalidUrl
from creatormatch.models import Creator, Roster

HASH_MULTIPLIER = 31
HASH_MODULUS = 2 ** 32

INVALID_URL_MESSAGE = "That URL doesn't look valid. Try something like https://yourbrand.com"

# Printable ASCII left as-is by the URL standard's percent-encode sets
PATH_SAFE = "!$%&'()*+,-./:;=@[\\]^_|~"
QUERY_SAFE = "!$%&()*+,-./:;=?@[\\]^_`{|}~"
FRAGMENT_SAFE = "!#$%&'()*+,-./:;=?@[\\]^_{|}~"

SINGLE_DOT = (".", "%2e")
DOUBLE_DOT = ("..", ".%2e", "%2e.", "%2e%2e")

_TAB_OR_NEWLINE = re.compile(r"[\t\n\r]")


def seed_hash(seed: str) -> int:
    h = 0
    for ch in seed:
        h = (h * HASH_MULTIPLIER + ord(ch)) % HASH_MODULUS
    return h


def pick_creator(roster: Roster, category: str, seed: str) -> Optional[Creator]:
    """Pick one creator from the category's list, or None when it has none."""
    creators = roster.creators_for(category)
    if not creators:
        return None
    return creators[seed_hash(seed) % len(creators)]


def seed_from_url(url: str) -> str:
    """
    host + path + query, lowercased. Scheme, port and fragment are left
    out so http/https variants and #anchors select the same creator.
    Expects a URL from normalize_website_input.
    """
    parts = urlsplit(url)
    path = parts.path or "/"
    search = f"?{parts.query}" if parts.query else ""
    return f"{parts.hostname or ''}{path}{search}".lower()


def resolve_dot_segments(path: str) -> str:
    """'/a/b/../c/./d' -> '/a/c/d'. A trailing '.' or '..' keeps the slash."""
    segments = path.split("/")[1:]
    out: list[str] = []
    for i, segment in enumerate(segments):
        last = i == len(segments) - 1
        lowered = segment.lower()
        if lowered in DOUBLE_DOT:
            if out:
                out.pop()
            if last:
                out.append("")
        elif lowered in SINGLE_DOT:
            if last:
                out.append("")
        else:
            out.append(segment)
    return "/" + "/".join(out)


def _ascii_host(host: str) -> str:
    if host.isascii():
        return host
    try:
        return idna.encode(host, uts46=True).decode("ascii")
    except idna.IDNAError:
        raise InvalidUrl(INVALID_URL_MESSAGE)


def normalize_website_input(raw) -> str:
    """
    Validate user input and return a canonical absolute http(s) URL.
    'brand.com' becomes 'https://brand.com/'.
    """
    value = _TAB_OR_NEWLINE.sub("", str(raw or "")).strip()
    if not value:
        raise InvalidUrl("Please enter your website URL.")

    with_scheme = value if "://" in value else f"https://{value}"

    # Backslashes act as path separators before the query starts
    marks = [i for i in (with_scheme.find("?"), with_scheme.find("#")) if i != -1]
    cut = min(marks, default=len(with_scheme))
    with_scheme = with_scheme[:cut].replace("\\", "/") + with_scheme[cut:]

    try:
        parts = urlsplit(with_scheme)
        host = parts.hostname
        port = parts.port
    except ValueError:
        raise InvalidUrl(INVALID_URL_MESSAGE)

    if parts.scheme not in ("http", "https") or not host or " " in parts.netloc:
        raise InvalidUrl(INVALID_URL_MESSAGE)

    scheme = parts.scheme
    netloc = f"[{host}]" if ":" in host else _ascii_host(host)
    if port is not None and port != {"http": 80, "https": 443}[scheme]:
        netloc = f"{netloc}:{port}"
    userinfo = parts.netloc.rpartition("@")[0]
    if userinfo:
        netloc = f"{userinfo}@{netloc}"

    path = resolve_dot_segments(quote(parts.path or "/", safe=PATH_SAFE))
    query = quote(parts.query, safe=QUERY_SAFE)
    fragment = quote(parts.fragment, safe=FRAGMENT_SAFE)
    return urlunsplit((scheme, netloc, path, query, fragment))


def brand_host(url: str) -> str:
    """Display host for outreach copy: 'www.brand.com' -> 'brand.com'."""
    host = urlsplit(url).hostname or ""
    return host[4:] if host.startswith("www.") else host
