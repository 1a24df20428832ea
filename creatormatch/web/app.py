"""
Creator Match - Web API
FastAPI app exposing the classification service and the match / refine
entry points as JSON.
"""
import logging
from typing import Optional
from urllib.parse import urlsplit
import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from creatormatch.config import CANONICAL_CATEGORIES
from creatormatch.enrichment.analyzer import classify_site
from creatormatch.enrichment.scraper import SiteScraper
from creatormatch.errors import ClassificationFailed, InvalidCategory
from creatormatch.pipeline import MatchOrchestrator

logger = logging.getLogger(__name__)


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


def _server_error(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": message})


def create_app(
    orchestrator: Optional[MatchOrchestrator] = None,
    scraper: Optional[SiteScraper] = None,
    classify=classify_site,
) -> FastAPI:
    app = FastAPI(title="Creator Match", version="1.0.0")
    app.state.orchestrator = orchestrator or MatchOrchestrator()
    app.state.scraper = scraper or SiteScraper()
    app.state.classify = classify

    # ── Health ───────────────────────────────────────────────────

    @app.get("/api/health")
    def health():
        return {"ok": True}

    # ── Classification service ───────────────────────────────────

    @app.get("/api/classify")
    async def classify_endpoint(request: Request, url: Optional[str] = None):
        if not url:
            return _bad_request("Missing ?url=")
        try:
            parts = urlsplit(url)
        except ValueError:
            return _bad_request("Invalid url")
        if parts.scheme not in ("http", "https"):
            return _bad_request("URL must start with http:// or https://")
        if not parts.hostname:
            return _bad_request("Invalid url")

        try:
            snippet = await request.app.state.scraper.scrape(url)
            result = await request.app.state.classify(url, snippet)
        except (httpx.HTTPError, ClassificationFailed) as e:
            logger.error(f"Classification failed for {url}: {e}")
            return _server_error(str(e) or "Classification failed")
        return result.model_dump()

    # ── Match + Refine ───────────────────────────────────────────

    @app.get("/api/match")
    async def match(request: Request, website: str = ""):
        result = await request.app.state.orchestrator.match(website)
        return result.model_dump(mode="json")

    @app.get("/api/refine")
    def refine(request: Request, website: str = "", category: str = ""):
        try:
            result = request.app.state.orchestrator.refine(category, website)
        except InvalidCategory as e:
            raise HTTPException(400, str(e))
        return result.model_dump(mode="json")

    @app.get("/api/categories")
    def categories(request: Request):
        roster = request.app.state.orchestrator.session.roster
        return {
            "taxonomy": CANONICAL_CATEGORIES,
            "with_creators": roster.categories_with_creators if roster else [],
            "ignored_rows": roster.ignored_count if roster else 0,
        }

    return app


app = create_app()
