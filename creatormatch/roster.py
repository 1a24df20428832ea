"""
Creator Match - Roster Loader
Tries each roster source in order and builds the categorized Roster from
the first one that answers. Only fails when every source has failed.
"""
import logging
from typing import Optional
import httpx
from creatormatch.config import ROSTER_TIMEOUT
from creatormatch.engine.taxonomy import normalize_to_canonical_category
from creatormatch.errors import RosterEmpty, RosterSourceError, RosterUnavailable
from creatormatch.integrations.roster_source import RosterSource, get_roster_sources
from creatormatch.models import Creator, Roster, RosterRow

logger = logging.getLogger(__name__)


def build_roster(rows: list[RosterRow]) -> Roster:
    """
    Group rows under their canonical category. Rows whose category does
    not normalize are counted in ignored_count and left out.
    """
    ignored = 0
    grouped: dict[str, list[Creator]] = {}

    for row in rows:
        canonical = normalize_to_canonical_category(row.category)
        if not canonical:
            ignored += 1
            continue
        grouped.setdefault(canonical, []).append(Creator(
            name=row.name,
            category=canonical,
            photo_url=row.photo_url,
            price=row.price,
        ))

    if ignored:
        logger.info(f"Roster: ignored {ignored} row(s) with unrecognized categories")
    return Roster(creators_by_category=grouped, ignored_count=ignored)


class RosterLoader:
    """Fetches the creator sheet with ordered transport fallback."""

    def __init__(
        self,
        sources: Optional[list[RosterSource]] = None,
        timeout: float = ROSTER_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.sources = sources if sources is not None else get_roster_sources()
        self.timeout = timeout
        self.transport = transport

    async def load(self) -> list[RosterRow]:
        """Raw rows from the first source that succeeds."""
        last_error: Optional[Exception] = None

        async with httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True, transport=self.transport,
        ) as client:
            for source in self.sources:
                try:
                    rows = await source.fetch_rows(client)
                    logger.info(f"Roster loaded from {source.name}: {len(rows)} rows")
                    return rows
                except (httpx.HTTPError, RosterSourceError, ValueError) as e:
                    logger.warning(f"Roster source {source.name} failed: {e}")
                    last_error = e

        raise RosterUnavailable(str(last_error) if last_error else "Failed to load sheet")

    async def load_roster(self) -> Roster:
        rows = await self.load()
        if not rows:
            raise RosterEmpty("No creators found in the sheet")
        return build_roster(rows)
