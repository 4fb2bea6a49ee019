from aiohttp import web

from sheets.models import RosterRequirement
from shared.errors import TrinityError
from webapp.context import CWL_SERVICE
from webapp.responses import bad_request, error_response

routes = web.RouteTableDef()


@routes.get("/api/cwl/clans")
async def get_cwl_clans(request):
    """Filtered CWL clans; ``?all=true`` skips the capacity filter."""
    service = request.app[CWL_SERVICE]
    show_all = request.query.get("all") == "true"
    try:
        if show_all:
            clans = await service.get_all_merged_clans()
        else:
            clans = await service.get_filtered_clans()
    except TrinityError as exc:
        return error_response("Failed to fetch CWL clans", exc)
    return web.json_response({
        "count": len(clans),
        "clans": [clan.to_dict() for clan in clans],
        "filtered": not show_all,
    })


@routes.post("/api/cwl/clans/{tag}/eligible")
async def get_clan_eligible_members(request):
    tag = request.match_info["tag"]
    try:
        body = await request.json()
    except ValueError:
        return bad_request("Request body must be valid JSON")

    sheet_data = body.get("sheetData") if isinstance(body, dict) else None
    if not isinstance(sheet_data, dict):
        return bad_request("sheetData is required in request body")

    requirement = RosterRequirement.from_payload(sheet_data, tag=tag)
    try:
        eligibility = await request.app[CWL_SERVICE].get_clan_eligibility(tag, requirement)
    except TrinityError as exc:
        return error_response("Failed to calculate eligible members", exc)
    return web.json_response(eligibility)
