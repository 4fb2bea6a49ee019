"""Typed keys for the services stored on the application."""

from aiohttp import web

from clanstats.stats import StatsService
from cocapi.cocapi import CocClient
from cwl.service import CwlService
from sheets.sheets import SheetsClient
from shared.cache import CacheService

CACHE = web.AppKey("cache", CacheService)
COC_CLIENT = web.AppKey("coc_client", CocClient)
SHEETS_CLIENT = web.AppKey("sheets_client", SheetsClient)
CWL_SERVICE = web.AppKey("cwl_service", CwlService)
STATS_SERVICE = web.AppKey("stats_service", StatsService)
STARTED_AT = web.AppKey("started_at", float)
ALLOWED_ORIGIN = web.AppKey("allowed_origin", str)
