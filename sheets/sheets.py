"""Download and parse the roster spreadsheet tabs.

The CWL tab lists every clan taking part in Clan War League together with its
format, member quota, town-hall requirement, league and "In Use" rank. The
Trinity tab lists the family's clans with an Active/Inactive status.
"""

import asyncio
import csv
import io
import logging
import time

import aiohttp

from sheets.models import RosterRequirement, parse_int
from shared.config import CACHE_TTL, defaults
from shared.errors import SourceUnavailable
from shared.tags import normalize_tag

logger = logging.getLogger("trinity.sheets")

TRINITY_CACHE_KEY = "sheets:trinity-clans"
CWL_CACHE_KEY = "sheets:cwl-clans"
CWL_DETAILS_CACHE_KEY = "sheets:cwl-clans-details"


## <------------------------------------- CSV parsing -------------------------------------> ##

def parse_csv(text: str) -> list[dict]:
    '''
    Parses CSV text into one dict per row, keyed by the trimmed header names.
    Blank lines are skipped and missing trailing cells become empty strings.
    '''
    rows = list(csv.reader(io.StringIO(text)))
    if len(rows) < 2:
        return []

    headers = [header.strip() for header in rows[0]]
    result = []
    for values in rows[1:]:
        if not any(value.strip() for value in values):
            continue
        result.append({
            header: values[index].strip() if index < len(values) else ""
            for index, header in enumerate(headers)
        })
    return result


def is_cwl_row(row: dict) -> bool:
    """A CWL row needs a numeric "In Use" cell and a real clan tag."""
    if parse_int(row.get("In Use")) is None:
        return False
    tag = row.get("Clan Tag") or ""
    return bool(tag.strip()) and "#VALUE!" not in tag


def is_active_trinity_row(row: dict) -> bool:
    tag = row.get("Clan Tag") or ""
    if not tag.strip() or "//" in tag:
        return False
    status = row.get("Status") or row.get("status") or ""
    return status.strip().lower() == "active"


def roster_from_rows(rows) -> tuple:
    """Valid CWL rows as requirements, ordered by their "In Use" rank."""
    requirements = [RosterRequirement.from_row(row) for row in rows if is_cwl_row(row)]
    return tuple(sorted(requirements, key=lambda requirement: requirement.sort_rank))


def _with_cache_buster(url: str) -> str:
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}_={int(time.time() * 1000)}"


## <------------------------------------- Client -------------------------------------> ##

class SheetsClient:
    """Fetches roster tabs from their published CSV URLs, caching the parsed result."""

    def __init__(self, cwl_url=None, trinity_url=None, cache=None, timeout=None):
        self.cwl_url = cwl_url or defaults["cwl_clans_csv_url"]
        self.trinity_url = trinity_url or defaults["trinity_clans_csv_url"]
        self.cache = cache
        self.timeout = defaults["sheets_timeout"] if timeout is None else timeout

    async def _download(self, url: str) -> str:
        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.get(_with_cache_buster(url)) as response:
                    if response.status != 200:
                        raise SourceUnavailable(f"Failed to fetch Google Sheets data (HTTP {response.status})")
                    return await response.text()
        except asyncio.TimeoutError as exc:
            raise SourceUnavailable("Timed out fetching Google Sheets data") from exc
        except aiohttp.ClientError as exc:
            raise SourceUnavailable(f"Failed to fetch Google Sheets data: {exc}") from exc

    async def _cached(self, key, loader):
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached
        value = await loader()
        if self.cache is not None:
            self.cache.set(key, value, CACHE_TTL["GOOGLE_SHEETS"])
        return value

    async def fetch_trinity_clans(self) -> tuple:
        """Tags of the family clans whose Status is "Active"."""
        async def load():
            rows = parse_csv(await self._download(self.trinity_url))
            tags = tuple(normalize_tag(row["Clan Tag"]) for row in rows if is_active_trinity_row(row))
            logger.info("Fetched %d Trinity clans from Google Sheets", len(tags))
            return tags

        return await self._cached(TRINITY_CACHE_KEY, load)

    async def fetch_cwl_clans(self) -> tuple:
        """Tags of the clans currently in use for CWL."""
        async def load():
            rows = parse_csv(await self._download(self.cwl_url))
            tags = tuple(normalize_tag(row["Clan Tag"]) for row in rows if is_cwl_row(row))
            logger.info("Fetched %d CWL clans from Google Sheets", len(tags))
            return tags

        return await self._cached(CWL_CACHE_KEY, load)

    async def fetch_cwl_details(self) -> tuple:
        """Full roster requirements for the CWL clans, sorted by "In Use"."""
        async def load():
            requirements = roster_from_rows(parse_csv(await self._download(self.cwl_url)))
            logger.info("Fetched %d CWL clan details from Google Sheets", len(requirements))
            return requirements

        return await self._cached(CWL_DETAILS_CACHE_KEY, load)

    async def fetch_all(self) -> dict:
        trinity_clans, cwl_clans, cwl_details = await asyncio.gather(
            self.fetch_trinity_clans(),
            self.fetch_cwl_clans(),
            self.fetch_cwl_details(),
        )
        return {
            "trinityClans": list(trinity_clans),
            "cwlClans": list(cwl_clans),
            "cwlDetails": [requirement.to_dict() for requirement in cwl_details],
        }
