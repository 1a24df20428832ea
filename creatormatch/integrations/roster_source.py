"""
Creator Match - Roster Sources (Google Sheets)
Two read-only transports for the same creator sheet:
  - the visualization query endpoint (JSON wrapped in a JS callback)
  - the CSV export

Both produce RosterRow lists and require Creator + Category columns.
Photo and Price are optional. Rows without a name or category are dropped.
"""
import csv
import io
import json
import logging
import math
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import quote
import httpx
from creatormatch.config import (
    SHEET_SPREADSHEET_ID, SHEET_GID, ROSTER_GVIZ_URL, ROSTER_CSV_URL,
)
from creatormatch.engine.taxonomy import normalize_header, title_case
from creatormatch.errors import RosterSourceError
from creatormatch.models import RosterRow

logger = logging.getLogger(__name__)

GVIZ_MARKER = "google.visualization.Query.setResponse("
GVIZ_SUFFIX = ");"
MISSING_COLUMNS_MESSAGE = "Sheet must have columns: Creator, Category (and optionally Photo, Price)"


def safe_number(value) -> Optional[float]:
    """Finite, non-negative number or None. '$12' and '' are None, not errors."""
    if value is None or isinstance(value, bool):
        return None
    try:
        n = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(n) or n < 0:
        return None
    return n


def _column_index(headers: list[str]) -> dict:
    keys = [normalize_header(h) for h in headers]

    def find(name: str) -> int:
        return keys.index(name) if name in keys else -1

    idx = {
        "creator": find("creator"),
        "category": find("category"),
        "photo": find("photo"),
        "price": find("price"),
    }
    if idx["creator"] == -1 or idx["category"] == -1:
        raise RosterSourceError(MISSING_COLUMNS_MESSAGE)
    return idx


def _make_row(name: str, category: str, photo: str, price) -> Optional[RosterRow]:
    name = name.strip()
    category = category.strip()
    if not name or not category:
        return None
    return RosterRow(
        name=name,
        category=title_case(category),
        photo_url=photo.strip() or None,
        price=safe_number(price),
    )


# ── Visualization (gviz) payload ──────────────────────────────────

def parse_gviz_response(text: str) -> dict:
    """Strip the setResponse(...) envelope and parse the JSON inside."""
    start = text.find(GVIZ_MARKER)
    if start == -1:
        raise RosterSourceError("Unexpected gviz response")
    json_start = start + len(GVIZ_MARKER)
    json_end = text.rfind(GVIZ_SUFFIX)
    if json_end < json_start:
        raise RosterSourceError("Unexpected gviz response")
    try:
        return json.loads(text[json_start:json_end])
    except json.JSONDecodeError as e:
        raise RosterSourceError(f"Malformed gviz JSON: {e}")


def _gviz_cell(cells: list, i: int) -> Optional[dict]:
    if i == -1 or i >= len(cells) or cells[i] is None:
        return None
    if not isinstance(cells[i], dict):
        raise RosterSourceError("Invalid gviz table")
    return cells[i]


def _gviz_cell_text(cells: list, i: int) -> str:
    cell = _gviz_cell(cells, i)
    v = cell.get("v") if cell else None
    if v is None:
        return ""
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def _gviz_cell_value(cells: list, i: int):
    cell = _gviz_cell(cells, i)
    return cell.get("v") if cell else None


def rows_from_gviz(payload: dict) -> list[RosterRow]:
    table = payload.get("table") if isinstance(payload, dict) else None
    if not isinstance(table, dict) or not isinstance(table.get("cols"), list) \
            or not isinstance(table.get("rows"), list):
        raise RosterSourceError("Invalid gviz table")

    cols = table["cols"]
    if not all(c is None or isinstance(c, dict) for c in cols):
        raise RosterSourceError("Invalid gviz table")
    labels = [(c or {}).get("label") or (c or {}).get("id") or "" for c in cols]
    idx = _column_index([str(label) for label in labels])

    rows = []
    for r in table["rows"]:
        if r is None:
            continue
        if not isinstance(r, dict):
            raise RosterSourceError("Invalid gviz table")
        cells = r.get("c") or []
        if not isinstance(cells, list):
            raise RosterSourceError("Invalid gviz table")
        row = _make_row(
            _gviz_cell_text(cells, idx["creator"]),
            _gviz_cell_text(cells, idx["category"]),
            _gviz_cell_text(cells, idx["photo"]),
            _gviz_cell_value(cells, idx["price"]),
        )
        if row:
            rows.append(row)
    return rows


# ── CSV payload ───────────────────────────────────────────────────

def parse_csv(text: str) -> list[list[str]]:
    """
    Quoted fields may hold commas, newlines and doubled quotes; CRLF or LF.
    A trailing line break still opens one last (empty) record, so a
    header-only export reads as a sheet with no creators.
    """
    try:
        records = list(csv.reader(io.StringIO(text, newline="")))
    except csv.Error as e:
        raise RosterSourceError(f"Malformed CSV: {e}")
    if not text or text.endswith(("\n", "\r")):
        records.append([""])
    return records


def rows_from_csv(records: list[list[str]]) -> list[RosterRow]:
    if len(records) < 2:
        raise RosterSourceError("CSV appears empty")
    idx = _column_index(records[0])

    def cell(record: list[str], i: int) -> str:
        return record[i] if 0 <= i < len(record) else ""

    rows = []
    for record in records[1:]:
        row = _make_row(
            cell(record, idx["creator"]),
            cell(record, idx["category"]),
            cell(record, idx["photo"]),
            cell(record, idx["price"]) if idx["price"] != -1 else None,
        )
        if row:
            rows.append(row)
    return rows


# ── Sources ───────────────────────────────────────────────────────

class RosterSource(ABC):
    """One way of fetching the creator sheet."""

    name: str = "base"

    def __init__(self, url: str):
        self.url = url

    async def fetch_rows(self, client: httpx.AsyncClient) -> list[RosterRow]:
        resp = await client.get(self.url, headers={"Cache-Control": "no-store"})
        if not resp.is_success:
            raise RosterSourceError(f"Request failed: {resp.status_code}")
        rows = self.parse(resp.text)
        logger.debug(f"Roster source {self.name}: {len(rows)} rows")
        return rows

    @abstractmethod
    def parse(self, text: str) -> list[RosterRow]:
        ...


class GvizRosterSource(RosterSource):
    name = "gviz"

    def parse(self, text: str) -> list[RosterRow]:
        return rows_from_gviz(parse_gviz_response(text))


class CsvRosterSource(RosterSource):
    name = "csv"

    def parse(self, text: str) -> list[RosterRow]:
        return rows_from_csv(parse_csv(text))


def sheet_gviz_url(spreadsheet_id: str, gid: str) -> str:
    return (
        f"https://docs.google.com/spreadsheets/d/{spreadsheet_id}"
        f"/gviz/tq?tqx=out:json&gid={quote(gid, safe='')}"
    )


def sheet_csv_url(spreadsheet_id: str, gid: str) -> str:
    return (
        f"https://docs.google.com/spreadsheets/d/{spreadsheet_id}"
        f"/export?format=csv&gid={quote(gid, safe='')}"
    )


def get_roster_sources() -> list[RosterSource]:
    """Configured sources in the order they are tried."""
    return [
        GvizRosterSource(ROSTER_GVIZ_URL or sheet_gviz_url(SHEET_SPREADSHEET_ID, SHEET_GID)),
        CsvRosterSource(ROSTER_CSV_URL or sheet_csv_url(SHEET_SPREADSHEET_ID, SHEET_GID)),
    ]
