import logging

from aiohttp import web

from shared.errors import EmptyResult, SourceUnavailable

logger = logging.getLogger("trinity.web")


def status_for(exc: Exception) -> int:
    if isinstance(exc, EmptyResult):
        return 404
    if getattr(exc, "status", None) == 404:
        return 404
    if isinstance(exc, SourceUnavailable):
        return 502
    return 500


def error_response(title: str, exc: Exception) -> web.Response:
    """JSON error body ``{error, message}`` with a status derived from the exception type."""
    status = status_for(exc)
    logger.error("%s: %s", title, exc)
    return web.json_response({"error": title, "message": str(exc)}, status=status)


def bad_request(message: str) -> web.Response:
    return web.json_response({"error": "Invalid request", "message": message}, status=400)
