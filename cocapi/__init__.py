"""Clash of Clans REST API client: clan, war, war-log and capital-raid retrieval."""

from cocapi.cocapi import CocClient

__all__ = ["CocClient"]
