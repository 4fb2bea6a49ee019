from aiohttp import web

from shared.errors import TrinityError
from webapp.context import SHEETS_CLIENT
from webapp.responses import error_response

routes = web.RouteTableDef()


@routes.get("/api/sheets/trinity-clans")
async def get_trinity_clans(request):
    try:
        clan_tags = await request.app[SHEETS_CLIENT].fetch_trinity_clans()
    except TrinityError as exc:
        return error_response("Failed to fetch Trinity clans", exc)
    return web.json_response({"count": len(clan_tags), "clanTags": list(clan_tags)})


@routes.get("/api/sheets/cwl-clans")
async def get_cwl_clans(request):
    try:
        clan_tags = await request.app[SHEETS_CLIENT].fetch_cwl_clans()
    except TrinityError as exc:
        return error_response("Failed to fetch CWL clans", exc)
    return web.json_response({"count": len(clan_tags), "clanTags": list(clan_tags)})


@routes.get("/api/sheets/cwl-clans-details")
async def get_cwl_clan_details(request):
    try:
        details = await request.app[SHEETS_CLIENT].fetch_cwl_details()
    except TrinityError as exc:
        return error_response("Failed to fetch CWL clan details", exc)
    return web.json_response({"count": len(details), "clans": [row.to_dict() for row in details]})


@routes.get("/api/sheets/all")
async def get_all_sheets(request):
    try:
        all_data = await request.app[SHEETS_CLIENT].fetch_all()
    except TrinityError as exc:
        return error_response("Failed to fetch sheets data", exc)
    return web.json_response(all_data)
