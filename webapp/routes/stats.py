from aiohttp import web

from shared.errors import TrinityError
from webapp.context import STATS_SERVICE
from webapp.responses import error_response

routes = web.RouteTableDef()


@routes.get("/api/stats/clans/{tag}")
async def get_clan_stats(request):
    try:
        stats = await request.app[STATS_SERVICE].get_clan_stats(request.match_info["tag"])
    except TrinityError as exc:
        return error_response("Failed to fetch clan stats", exc)
    return web.json_response(stats)


@routes.get("/api/stats/clans/{tag}/th-distribution")
async def get_th_distribution(request):
    try:
        distribution = await request.app[STATS_SERVICE].get_th_distribution(request.match_info["tag"])
    except TrinityError as exc:
        return error_response("Failed to fetch TH distribution", exc)
    return web.json_response(distribution)


@routes.get("/api/stats/family")
async def get_family_stats(request):
    try:
        stats = await request.app[STATS_SERVICE].get_family_stats()
    except TrinityError as exc:
        return error_response("Failed to fetch family stats", exc)
    return web.json_response(stats)
