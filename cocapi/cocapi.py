import argparse
import asyncio
import json
import logging
from string import Template
from urllib.parse import quote

import aiohttp

from cocapi.models import ClanRecord, CurrentWar, WarLogEntry
from shared.config import CACHE_TTL, defaults
from shared.errors import ClanFetchError, ConfigurationError, UpstreamError
from shared.tags import normalize_tag

logger = logging.getLogger("trinity.cocapi")

'''
API endpoints, relative to the configured base URL. The keys are used to identify the endpoint when calling fetch_endpoint().
$tag is substituted with the percent-encoded clan tag ('#' becomes '%23').
'''
endpoints = {
    "clan": "/clans/$tag",
    "current_war": "/clans/$tag/currentwar",
    "war_log": "/clans/$tag/warlog",
    "capital_raid_seasons": "/clans/$tag/capitalraidseasons",
    "league_group": "/clans/$tag/currentwar/leaguegroup",
    "search_clans": "/clans",
}

# Placeholder left in unconfigured roster sheets.
PLACEHOLDER_TAG = "#YOUR_CLAN_TAG"


class CocClient:
    """Clash of Clans API client shared by every request handler.

    One authenticated ``aiohttp.ClientSession`` is opened lazily and reused. Concurrent first
    callers wait on the same in-flight initialization instead of each opening their own.
    """

    def __init__(
        self,
        token=None,
        base_url=None,
        timeout=None,
        batch_size=None,
        batch_delay=None,
        cache=None,
    ):
        self.token = defaults["coc_api_token"] if token is None else token
        self.base_url = (base_url or defaults["coc_api_base_url"]).rstrip("/")
        self.timeout = defaults["coc_timeout"] if timeout is None else timeout
        self.batch_size = max(1, batch_size or defaults["coc_batch_size"])
        self.batch_delay = defaults["coc_batch_delay"] if batch_delay is None else batch_delay
        self.cache = cache
        self.sessions_opened = 0
        self._session = None
        self._session_future = None

    ## <------------------------------------- Session -------------------------------------> ##

    async def _open_session(self) -> aiohttp.ClientSession:
        if not self.token:
            raise ConfigurationError("COC_API_TOKEN must be set in .env file")
        self.sessions_opened += 1
        logger.info("Opening Clash of Clans API session (%s)", self.base_url)
        return aiohttp.ClientSession(
            headers={"Authorization": f"Bearer {self.token}", "Accept": "application/json"},
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        )

    async def ensure_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session
        if self._session_future is None:
            self._session_future = asyncio.ensure_future(self._open_session())
        future = self._session_future
        try:
            session = await asyncio.shield(future)
        except Exception:
            # Let the next caller retry instead of caching the failure.
            if self._session_future is future:
                self._session_future = None
            raise
        self._session = session
        if self._session_future is future:
            self._session_future = None
        return session

    async def close(self) -> None:
        session, self._session, self._session_future = self._session, None, None
        if session is not None and not session.closed:
            await session.close()

    ## <------------------------------------- General purpose endpoint handler -------------------------------------> ##

    async def fetch_endpoint(self, endpoint_name, params=None, **values):
        '''
        Fetches any endpoint defined in the endpoints dictionary and returns the decoded JSON body.
        Raises UpstreamError on transport failures, timeouts and non-200 responses.

        :param endpoint_name: The name of the endpoint to fetch. Must be a key in the endpoints dictionary.
        :param params: Optional query string parameters.
        :param values: Values substituted into the endpoint template (e.g. tag).
        '''
        if endpoint_name not in endpoints:
            raise ValueError(f"Invalid or missing endpoint. Valid endpoints are: {list(endpoints.keys())}")

        path = Template(endpoints[endpoint_name]).substitute(
            **{key: quote(str(value), safe="") for key, value in values.items()}
        )
        session = await self.ensure_session()
        url = f"{self.base_url}{path}"
        logger.debug("Fetching endpoint '%s': %s", endpoint_name, url)
        try:
            async with session.get(url, params=params) as response:
                if response.status != 200:
                    reason = response.reason or ""
                    raise UpstreamError(
                        f"Clash of Clans API returned {response.status} {reason} for {endpoint_name}".rstrip(),
                        status=response.status,
                    )
                try:
                    return await response.json(content_type=None)
                except ValueError as exc:
                    raise UpstreamError(f"Malformed JSON from Clash of Clans API for {endpoint_name}: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise UpstreamError(f"Timed out after {self.timeout}s fetching {endpoint_name}") from exc
        except aiohttp.ClientError as exc:
            raise UpstreamError(f"Could not reach Clash of Clans API: {exc}") from exc

    async def _cached(self, key, ttl, loader):
        if self.cache is None:
            return await loader()
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        value = await loader()
        self.cache.set(key, value, ttl)
        return value

    ## <------------------------------------- Clans -------------------------------------> ##

    async def fetch_one(self, tag) -> ClanRecord:
        '''
        Fetches one clan by tag (with or without the leading '#').
        Raises ClanFetchError if the clan cannot be retrieved.
        '''
        formatted_tag = normalize_tag(tag)

        async def load():
            try:
                payload = await self.fetch_endpoint("clan", tag=formatted_tag)
            except UpstreamError as exc:
                raise ClanFetchError(formatted_tag, status=exc.status, message=str(exc)) from exc
            if not isinstance(payload, dict):
                raise ClanFetchError(formatted_tag, message=f"Unexpected clan payload for {formatted_tag}")
            return ClanRecord.from_payload(payload)

        return await self._cached(f"clan:{formatted_tag}", CACHE_TTL["CLAN_BASIC"], load)

    async def fetch_many(self, tags) -> list:
        '''
        Fetches several clans, batch_size at a time with a short pause between batches.
        Clans that fail to load are logged and left out; the rest of the batch still returns.
        '''
        valid_tags = [normalize_tag(tag) for tag in tags if tag and normalize_tag(tag) != PLACEHOLDER_TAG]
        if not valid_tags:
            logger.warning("No valid clan tags provided")
            return []

        clans = []
        for start in range(0, len(valid_tags), self.batch_size):
            if start:
                await asyncio.sleep(self.batch_delay)
            batch = valid_tags[start:start + self.batch_size]
            results = await asyncio.gather(*(self.fetch_one(tag) for tag in batch), return_exceptions=True)
            for tag, result in zip(batch, results):
                if isinstance(result, ClanFetchError):
                    logger.warning("Failed to fetch clan %s: %s", tag, result)
                    continue
                if isinstance(result, BaseException):
                    raise result
                clans.append(result)
        return clans

    async def search_clans(self, name, limit=10, **options) -> list:
        payload = await self.fetch_endpoint("search_clans", params={"name": name, "limit": limit, **options})
        return payload.get("items", [])

    ## <------------------------------------- Wars and raids -------------------------------------> ##

    async def get_current_war(self, tag) -> CurrentWar:
        formatted_tag = normalize_tag(tag)

        async def load():
            return CurrentWar.from_payload(await self.fetch_endpoint("current_war", tag=formatted_tag))

        return await self._cached(f"war:{formatted_tag}", CACHE_TTL["CLAN_WAR"], load)

    async def get_war_log(self, tag) -> tuple:
        formatted_tag = normalize_tag(tag)

        async def load():
            payload = await self.fetch_endpoint("war_log", tag=formatted_tag)
            return tuple(WarLogEntry.from_payload(item) for item in payload.get("items") or [])

        return await self._cached(f"warlog:{formatted_tag}", CACHE_TTL["CLAN_WAR_LOG"], load)

    async def get_capital_raid_seasons(self, tag) -> list:
        formatted_tag = normalize_tag(tag)

        async def load():
            payload = await self.fetch_endpoint("capital_raid_seasons", tag=formatted_tag)
            return payload.get("items") or []

        return await self._cached(f"raids:{formatted_tag}", CACHE_TTL["CLAN_RAIDS"], load)

    async def get_league_group(self, tag) -> dict:
        return await self.fetch_endpoint("league_group", tag=normalize_tag(tag))


## <------------------------------------- Helper functions -------------------------------------> ##

def _to_jsonable(result):
    if hasattr(result, "to_dict"):
        return result.to_dict()
    if isinstance(result, (list, tuple)):
        return [_to_jsonable(item) for item in result]
    return result


def _print_response(result, quiet=False):
    if quiet:
        return
    print(json.dumps(_to_jsonable(result), indent=2))


## <------------------------------------- Arg parsing for CLI use -------------------------------------> ##

def _build_arg_parser() -> argparse.ArgumentParser:
    common_parser = argparse.ArgumentParser(add_help=False)
    common_parser.add_argument("--quiet", action="store_true", help="Suppress CLI output")

    parser = argparse.ArgumentParser(
        description="Clash of Clans API CLI for fetching clan, war and raid endpoints.",
        parents=[common_parser],
    )
    subparsers = parser.add_subparsers(dest="command")

    for command, help_text in (
        ("clan", "Fetch clan details"),
        ("war", "Fetch the current war"),
        ("warlog", "Fetch the public war log"),
        ("raids", "Fetch capital raid seasons"),
        ("league-group", "Fetch the current CWL group"),
    ):
        command_parser = subparsers.add_parser(command, help=help_text, parents=[common_parser])
        command_parser.add_argument("-t", "--tag", type=str, required=True, help="Clan tag (the leading # is optional)")

    search_parser = subparsers.add_parser("search", help="Search clans by name", parents=[common_parser])
    search_parser.add_argument("-n", "--name", type=str, required=True, help="Clan name to search for")
    search_parser.add_argument("-l", "--limit", type=int, default=10, help="Maximum number of results")
    return parser


async def _run_command(args, client: CocClient):
    if args.command == "clan":
        return await client.fetch_one(args.tag)
    if args.command == "war":
        return await client.get_current_war(args.tag)
    if args.command == "warlog":
        return await client.get_war_log(args.tag)
    if args.command == "raids":
        return await client.get_capital_raid_seasons(args.tag)
    if args.command == "league-group":
        return await client.get_league_group(args.tag)
    if args.command == "search":
        return await client.search_clans(args.name, limit=args.limit)
    raise ValueError(f"Unknown command: {args.command}")


async def _main_async(args) -> None:
    client = CocClient()
    try:
        result = await _run_command(args, client)
    finally:
        await client.close()
    _print_response(result, quiet=args.quiet)


def main():
    parser = _build_arg_parser()
    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        return
    asyncio.run(_main_async(args))


if __name__ == "__main__":
    main()
