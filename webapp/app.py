import logging
import time

from aiohttp import web

from clanstats.stats import StatsService
from cocapi.cocapi import CocClient
from cwl.service import CwlService
from sheets.sheets import SheetsClient
from shared.cache import CacheService
from shared.config import defaults
from webapp.context import ALLOWED_ORIGIN, CACHE, COC_CLIENT, CWL_SERVICE, SHEETS_CLIENT, STARTED_AT, STATS_SERVICE
from webapp.middleware import cors, error_handler, request_logger
from webapp.routes import ROUTE_TABLES

logger = logging.getLogger("trinity.web")


async def _close_clients(app: web.Application) -> None:
    await app[COC_CLIENT].close()


def create_app(coc_client=None, sheets_client=None, cache=None, allowed_origin=None) -> web.Application:
    '''
    Builds the web application and wires the shared services into it.
    Collaborators can be injected (tests pass fakes); by default they are built from shared.config.

    :param coc_client: Clash of Clans API client. One instance is shared by all requests.
    :param sheets_client: Roster sheet client.
    :param cache: Cache used by every service for its results.
    :param allowed_origin: CORS origin allowed to call the API (defaults to FRONTEND_URL, "*" when unset).
    '''
    cache = cache if cache is not None else CacheService()
    coc_client = coc_client if coc_client is not None else CocClient(cache=cache)
    sheets_client = sheets_client if sheets_client is not None else SheetsClient(cache=cache)

    app = web.Application(middlewares=[cors, request_logger, error_handler])
    app[ALLOWED_ORIGIN] = allowed_origin or defaults["frontend_url"]
    app[CACHE] = cache
    app[COC_CLIENT] = coc_client
    app[SHEETS_CLIENT] = sheets_client
    app[CWL_SERVICE] = CwlService(coc_client, sheets_client, cache)
    app[STATS_SERVICE] = StatsService(coc_client, sheets_client, cache)
    app[STARTED_AT] = time.monotonic()

    for route_table in ROUTE_TABLES:
        app.router.add_routes(route_table)
    app.on_cleanup.append(_close_clients)
    return app
