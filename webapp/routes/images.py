from aiohttp import web

from shared.errors import TrinityError
from webapp.context import COC_CLIENT
from webapp.responses import error_response

routes = web.RouteTableDef()

BADGE_SIZES = ("small", "medium", "large")


def _badge_not_found(message):
    return web.json_response({"error": "Badge not found", "message": message}, status=404)


@routes.get("/api/images/badge/{tag}")
async def get_badge_urls(request):
    try:
        clan = await request.app[COC_CLIENT].fetch_one(request.match_info["tag"])
    except TrinityError as exc:
        return error_response("Failed to fetch badge URLs", exc)
    if not any(clan.badge_urls.to_dict().values()):
        return _badge_not_found("Clan badge URLs not available")
    return web.json_response({
        "clanTag": clan.tag,
        "clanName": clan.name,
        "badgeUrls": clan.badge_urls.to_dict(),
    })


@routes.get("/api/images/badge/{tag}/{size}")
async def redirect_to_badge(request):
    """Redirect to the CDN badge image; unknown sizes fall back to medium."""
    size = request.match_info["size"]
    if size not in BADGE_SIZES:
        size = "medium"
    try:
        clan = await request.app[COC_CLIENT].fetch_one(request.match_info["tag"])
    except TrinityError as exc:
        return error_response("Failed to fetch badge", exc)
    url = clan.badge_urls.get(size)
    if not url:
        return _badge_not_found("Clan badge URL not available")
    raise web.HTTPFound(url)
