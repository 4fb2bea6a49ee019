"""aiohttp web application exposing the clan, sheet, CWL, stats, image and cache routes."""

from webapp.app import create_app

__all__ = ["create_app"]
