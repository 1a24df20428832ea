"""
Creator Match - Main Entry Point

Usage:
    # Start the API server (classification service + match endpoints):
    python main.py serve

    # Match a website to a creator:
    python main.py match yourbrand.com

    # Load the roster, then pick a creator for a chosen category:
    python main.py refine yourbrand.com "Health & Fitness"

    # Show the creator roster grouped by category:
    python main.py roster

    # Classify a website directly (no roster, no classification service):
    python main.py classify https://yourbrand.com
"""
import sys
import asyncio
import json
import logging
import os
import httpx
import uvicorn
from creatormatch.config import APP_HOST, APP_PORT, DEBUG, ANTHROPIC_API_KEY
from creatormatch.engine.outreach import format_price
from creatormatch.engine.selector import normalize_website_input
from creatormatch.enrichment.analyzer import classify_site
from creatormatch.enrichment.scraper import SiteScraper
from creatormatch.errors import MatchError
from creatormatch.models import MatchPhase, MatchResult, MatchStatus
from creatormatch.pipeline import MatchOrchestrator, MatchSession
from creatormatch.roster import RosterLoader

logging.basicConfig(
    level=logging.DEBUG if DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("creatormatch")

PHASE_LABELS = {
    MatchPhase.CLASSIFYING: "Categorizing your website...",
    MatchPhase.FINDING: "Finding the right creators...",
    MatchPhase.FINALIZING: "Finalizing your match...",
}


def print_phase(phase: MatchPhase):
    if phase in PHASE_LABELS:
        print(f"  {PHASE_LABELS[phase]}")


def print_result(result: MatchResult):
    print()
    if result.status == MatchStatus.FAILED:
        print("  We couldn't complete the match")
        print(f"  {result.error}: {result.message}")
    elif result.status == MatchStatus.NO_CREATOR_FOR_CATEGORY:
        print(f"  No creators found for {result.category}")
        print("  Pick another category, or add creators in that category to the sheet.")
    else:
        creator = result.creator
        print(f"  {creator.name}  ({result.category}, match {result.confidence_label})")
        print(f"  Price: {format_price(creator)}")
        if creator.photo_url:
            print(f"  Photo: {creator.photo_url}")
        print("\n" + "\n".join(f"    {line}" for line in result.outreach.splitlines()))

    if result.offer_fallback:
        print(f"\n  Refine with: {', '.join(result.fallback_categories)}")
        if result.preselected_category:
            print(f"  Suggested: {result.preselected_category}")
    print()


async def refine_after_load(website: str, category: str) -> MatchResult:
    orchestrator = MatchOrchestrator()
    roster = await orchestrator.roster_loader.load_roster()
    return orchestrator.refine(category, website, session=MatchSession(roster=roster))


async def show_roster():
    roster = await RosterLoader().load_roster()
    print(f"\n  Creator Roster ({roster.total_creators} creators, {roster.ignored_count} ignored rows)")
    print("  " + "=" * 45)
    for category in roster.categories_with_creators:
        print(f"  {category}")
        for c in roster.creators_for(category):
            print(f"    - {c.name:.<30} {format_price(c)}")
    print()


async def classify_direct(website: str) -> dict:
    url = normalize_website_input(website)
    snippet = await SiteScraper().scrape(url)
    result = await classify_site(url, snippet)
    return result.model_dump()


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        return

    command = sys.argv[1].lower()

    if command == "serve":
        port = int(os.getenv("PORT", APP_PORT))
        print(f"\n  Creator Match running at http://localhost:{port}\n")
        if not ANTHROPIC_API_KEY:
            logger.warning("ANTHROPIC_API_KEY is not set. /api/classify will fail until you set it.")
        uvicorn.run(
            "creatormatch.web.app:app",
            host=APP_HOST,
            port=port,
            reload=DEBUG,
        )

    elif command == "match":
        if len(sys.argv) < 3:
            print("Usage: python main.py match <website>")
            return
        result = asyncio.run(MatchOrchestrator(observer=print_phase).match(sys.argv[2]))
        print_result(result)

    elif command == "refine":
        if len(sys.argv) < 4:
            print('Usage: python main.py refine <website> "<category>"')
            return
        try:
            result = asyncio.run(refine_after_load(sys.argv[2], sys.argv[3]))
        except MatchError as e:
            print(f"{e.kind}: {e}")
            return
        print_result(result)

    elif command == "roster":
        try:
            asyncio.run(show_roster())
        except MatchError as e:
            print(f"{e.kind}: {e}")

    elif command == "classify":
        if len(sys.argv) < 3:
            print("Usage: python main.py classify <website>")
            return
        try:
            result = asyncio.run(classify_direct(sys.argv[2]))
        except MatchError as e:
            print(f"{e.kind}: {e}")
            return
        except httpx.HTTPError as e:
            print(f"Website fetch failed: {e}")
            return
        print(json.dumps(result, indent=2))

    else:
        print(f"Unknown command: {command}")
        print(__doc__)


if __name__ == "__main__":
    main()
