"""Clan-level and family-level statistics built from live clan data."""

from clanstats.stats import StatsService

__all__ = ["StatsService"]
