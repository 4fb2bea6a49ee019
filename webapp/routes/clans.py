from aiohttp import web

from shared.errors import TrinityError
from webapp.context import COC_CLIENT
from webapp.responses import bad_request, error_response

routes = web.RouteTableDef()


@routes.get("/api/clans/{tag}")
async def get_clan(request):
    try:
        clan = await request.app[COC_CLIENT].fetch_one(request.match_info["tag"])
    except TrinityError as exc:
        return error_response("Failed to fetch clan data", exc)
    return web.json_response(clan.to_dict())


@routes.post("/api/clans/multiple")
async def get_multiple_clans(request):
    try:
        body = await request.json()
    except ValueError:
        body = None
    clan_tags = body.get("clanTags") if isinstance(body, dict) else None
    if not isinstance(clan_tags, list):
        return bad_request("clanTags array is required")

    try:
        clans = await request.app[COC_CLIENT].fetch_many(clan_tags)
    except TrinityError as exc:
        return error_response("Failed to fetch clans data", exc)
    return web.json_response([clan.to_dict() for clan in clans])


@routes.get("/api/clans/{tag}/war")
async def get_current_war(request):
    try:
        war = await request.app[COC_CLIENT].get_current_war(request.match_info["tag"])
    except TrinityError as exc:
        return error_response("Failed to fetch war data", exc)
    return web.json_response(war.to_dict())


@routes.get("/api/clans/{tag}/warlog")
async def get_war_log(request):
    try:
        war_log = await request.app[COC_CLIENT].get_war_log(request.match_info["tag"])
    except TrinityError as exc:
        return error_response("Failed to fetch war log", exc)
    return web.json_response([entry.to_dict() for entry in war_log])


@routes.get("/api/clans/{tag}/capitalraids")
async def get_capital_raids(request):
    try:
        raid_seasons = await request.app[COC_CLIENT].get_capital_raid_seasons(request.match_info["tag"])
    except TrinityError as exc:
        return error_response("Failed to fetch capital raid seasons", exc)
    return web.json_response(raid_seasons)
