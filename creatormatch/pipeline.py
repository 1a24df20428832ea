"""
Creator Match - Match Orchestrator
Ties the modules together: validate URL → (load roster ‖ classify site ‖
minimum display timer) → deterministic pick → outreach.

Phase announcements (classifying → finding → finalizing) run on a fixed
wall-clock schedule for the loading UI and never gate the result.
"""
import asyncio
import contextlib
import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Optional
from creatormatch.config import (
    CANONICAL_CATEGORIES, DEFAULT_FALLBACK_CATEGORY, LOW_CONFIDENCE_THRESHOLD,
    MIN_DISPLAY_SECONDS, PHASE_SCHEDULE, REFINE_CONFIDENCE,
)
from creatormatch.engine.outreach import confidence_label, generate_outreach
from creatormatch.engine.selector import (
    brand_host, normalize_website_input, pick_creator, seed_from_url,
)
from creatormatch.engine.taxonomy import is_canonical
from creatormatch.errors import (
    ClassificationFailed, InvalidCategory, InvalidUrl, MatchError, RosterUnavailable,
)
from creatormatch.integrations.classifier_client import ClassifierClient
from creatormatch.models import (
    ClassificationResult, Creator, MatchPhase, MatchResult, MatchStatus, Roster,
)
from creatormatch.roster import RosterLoader

logger = logging.getLogger(__name__)

PhaseObserver = Callable[[MatchPhase], None]


@dataclass
class MatchSession:
    """Roster from the latest successful load. Replaced whole, never mutated."""
    roster: Optional[Roster] = None

    @property
    def fallback_categories(self) -> list[str]:
        return self.roster.fallback_categories if self.roster else list(CANONICAL_CATEGORIES)


class MatchOrchestrator:
    """Runs one match per URL and answers refine requests from the loaded roster."""

    def __init__(
        self,
        roster_loader: Optional[RosterLoader] = None,
        classifier: Optional[ClassifierClient] = None,
        min_display_seconds: float = MIN_DISPLAY_SECONDS,
        phase_schedule=PHASE_SCHEDULE,
        observer: Optional[PhaseObserver] = None,
    ):
        self.roster_loader = roster_loader or RosterLoader()
        self.classifier = classifier or ClassifierClient()
        self.min_display_seconds = min_display_seconds
        self.phase_schedule = phase_schedule
        self.observer = observer
        self.session = MatchSession()

    # ── Match ────────────────────────────────────────────────────

    async def match(self, raw_url: str, observer: Optional[PhaseObserver] = None) -> MatchResult:
        observer = observer or self.observer
        request_id = f"match-{uuid.uuid4().hex[:12]}"

        try:
            url = normalize_website_input(raw_url)
        except InvalidUrl as e:
            logger.info(f"[{request_id}] Rejected input {raw_url!r}: {e}")
            self._notify(observer, MatchPhase.FAILED)
            return self._failed(str(raw_url or ""), e)

        logger.info(f"[{request_id}] Match started for {url}")

        # Completion order, so the first failure wins
        failures: list[MatchError] = []

        async def load() -> Optional[Roster]:
            try:
                roster = await self.roster_loader.load_roster()
            except MatchError as e:
                failures.append(e)
                return None
            except Exception as e:
                logger.exception(f"[{request_id}] Roster load crashed")
                failures.append(RosterUnavailable(str(e) or type(e).__name__))
                return None
            self.session = MatchSession(roster=roster)
            return roster

        async def classify() -> Optional[ClassificationResult]:
            try:
                return await self.classifier.classify(url)
            except MatchError as e:
                failures.append(e)
                return None
            except Exception as e:
                logger.exception(f"[{request_id}] Classification crashed")
                failures.append(ClassificationFailed(str(e) or type(e).__name__))
                return None

        announcer = asyncio.create_task(self._announce_phases(observer)) if observer else None
        try:
            _, roster, classified = await asyncio.gather(
                asyncio.sleep(self.min_display_seconds), load(), classify(),
            )
        finally:
            if announcer:
                announcer.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await announcer

        if failures:
            first = failures[0]
            logger.warning(f"[{request_id}] Match failed ({first.kind}): {first}")
            self._notify(observer, MatchPhase.FAILED)
            return self._failed(url, first)

        result = self._select(url, roster, classified.category, classified.confidence)
        if result.status == MatchStatus.MATCHED and classified.confidence < LOW_CONFIDENCE_THRESHOLD:
            result.offer_fallback = True
            result.fallback_categories = roster.fallback_categories
            result.preselected_category = classified.category

        logger.info(
            f"[{request_id}] {result.status.value}: {classified.category} "
            f"→ {result.creator.name if result.creator else '-'}"
        )
        self._notify(observer, MatchPhase.DONE)
        return result

    # ── Refine ───────────────────────────────────────────────────

    def refine(self, category: str, raw_url: str, session: Optional[MatchSession] = None) -> MatchResult:
        """
        Re-pick for a user-chosen category against the already loaded roster.
        No classification, no network.
        """
        session = session or self.session
        if not is_canonical(category):
            raise InvalidCategory(f"Unknown category: {category}")

        try:
            url = normalize_website_input(raw_url)
        except InvalidUrl as e:
            return self._failed(str(raw_url or ""), e)

        if session.roster is None:
            return self._failed(url, RosterUnavailable("Creator roster has not been loaded"))

        return self._select(url, session.roster, category, REFINE_CONFIDENCE)

    # ── Helpers ──────────────────────────────────────────────────

    def _select(self, url: str, roster: Roster, category: str, confidence: float) -> MatchResult:
        creator = pick_creator(roster, category, seed_from_url(url))
        if creator is None:
            fallback = roster.fallback_categories
            return MatchResult(
                status=MatchStatus.NO_CREATOR_FOR_CATEGORY,
                url=url,
                category=category,
                confidence=confidence,
                offer_fallback=True,
                fallback_categories=fallback,
                preselected_category=roster.categories_with_creators[0]
                if roster.categories_with_creators else DEFAULT_FALLBACK_CATEGORY,
                message=f"No creators found for {category}",
            )
        return self._matched(url, category, confidence, creator)

    def _matched(self, url: str, category: str, confidence: float, creator: Creator) -> MatchResult:
        return MatchResult(
            status=MatchStatus.MATCHED,
            url=url,
            category=category,
            confidence=confidence,
            confidence_label=confidence_label(confidence),
            creator=creator,
            outreach=generate_outreach(brand_host(url), category, creator),
        )

    def _failed(self, url: str, error: MatchError) -> MatchResult:
        return MatchResult(
            status=MatchStatus.FAILED,
            url=url or None,
            error=error.kind,
            message=error.message,
            offer_fallback=True,
            fallback_categories=self.session.fallback_categories,
            preselected_category=CANONICAL_CATEGORIES[0],
        )

    async def _announce_phases(self, observer: PhaseObserver):
        loop = asyncio.get_running_loop()
        started = loop.time()
        for offset, phase in self.phase_schedule:
            delay = offset - (loop.time() - started)
            if delay > 0:
                await asyncio.sleep(delay)
            self._notify(observer, MatchPhase(phase))

    def _notify(self, observer: Optional[PhaseObserver], phase: MatchPhase):
        if observer:
            observer(phase)
