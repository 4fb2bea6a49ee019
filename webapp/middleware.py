import logging
import time

from aiohttp import web

from webapp.context import ALLOWED_ORIGIN

logger = logging.getLogger("trinity.web")


@web.middleware
async def request_logger(request, handler):
    start = time.perf_counter()
    status = 500
    try:
        response = await handler(request)
        status = response.status
        return response
    except web.HTTPException as exc:
        status = exc.status
        raise
    finally:
        duration = (time.perf_counter() - start) * 1000
        logger.info("%s %s - %s - %dms", request.method, request.path, status, duration)


@web.middleware
async def error_handler(request, handler):
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception as exc:
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return web.json_response({"error": "Something went wrong!", "message": str(exc)}, status=500)


CORS_METHODS = "GET,HEAD,PUT,PATCH,POST,DELETE"


def _cors_headers(request) -> dict:
    origin = request.app[ALLOWED_ORIGIN]
    headers = {"Access-Control-Allow-Origin": origin}
    if origin != "*":
        headers["Vary"] = "Origin"
    return headers


@web.middleware
async def cors(request, handler):
    '''
    Lets the website frontend call the API from the browser.
    Preflight requests are answered directly; every other response gets the allow-origin header.
    '''
    headers = _cors_headers(request)
    if request.method == "OPTIONS" and "Access-Control-Request-Method" in request.headers:
        headers["Access-Control-Allow-Methods"] = CORS_METHODS
        requested_headers = request.headers.get("Access-Control-Request-Headers")
        if requested_headers:
            headers["Access-Control-Allow-Headers"] = requested_headers
        return web.Response(status=204, headers=headers)
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        exc.headers.update(headers)
        raise
    response.headers.update(headers)
    return response
