from aiohttp import web

from webapp.context import CACHE

routes = web.RouteTableDef()


@routes.get("/api/cache/stats")
async def get_cache_stats(request):
    return web.json_response({"success": True, "stats": request.app[CACHE].stats()})


@routes.get("/api/cache/keys")
async def get_cache_keys(request):
    keys = request.app[CACHE].keys()
    return web.json_response({"success": True, "count": len(keys), "keys": keys})


@routes.delete("/api/cache/keys/{key:.+}")
async def delete_cache_key(request):
    key = request.match_info["key"]
    deleted = request.app[CACHE].delete(key)
    return web.json_response({"success": True, "deleted": deleted > 0, "key": key})


@routes.delete("/api/cache/pattern/{pattern:.+}")
async def delete_cache_pattern(request):
    pattern = request.match_info["pattern"]
    deleted = request.app[CACHE].delete_pattern(pattern)
    return web.json_response({"success": True, "deletedCount": deleted, "pattern": pattern})


@routes.delete("/api/cache/flush")
async def flush_cache(request):
    request.app[CACHE].flush()
    return web.json_response({"success": True, "message": "Cache flushed successfully"})
