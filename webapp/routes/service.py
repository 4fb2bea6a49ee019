import time
from datetime import datetime, timezone

from aiohttp import web

from webapp.context import CACHE, STARTED_AT

routes = web.RouteTableDef()

API_NAME = "Trinity Backend API"
API_VERSION = "2.0.0"


@routes.get("/")
async def index(request):
    return web.json_response({
        "name": API_NAME,
        "version": API_VERSION,
        "endpoints": {
            "health": "/api/health",
            "clans": "/api/clans",
            "sheets": "/api/sheets",
            "cwl": "/api/cwl",
            "stats": "/api/stats",
            "images": "/api/images",
            "cache": "/api/cache",
        },
    })


@routes.get("/api/health")
async def health(request):
    return web.json_response({
        "status": "ok",
        "message": "Server is running",
        "cache": request.app[CACHE].stats(),
        "uptime": round(time.monotonic() - request.app[STARTED_AT], 3),
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    })
