import logging
import math
from datetime import datetime, timezone

from shared.config import CACHE_TTL
from shared.errors import EmptyResult
from shared.tags import normalize_tag

logger = logging.getLogger("trinity.stats")

TOP_MEMBERS = 5


def _rounded_average(total, count) -> int:
    # Half-up rounding, so 2.5 -> 3.
    return int(math.floor(total / count + 0.5)) if count > 0 else 0


def _generated_at() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def town_hall_distribution(members) -> dict:
    distribution = {}
    for member in members:
        distribution[member.town_hall_level] = distribution.get(member.town_hall_level, 0) + 1
    return distribution


def top_members(members, attribute, limit=TOP_MEMBERS) -> list:
    ranked = sorted(members, key=lambda member: getattr(member, attribute), reverse=True)[:limit]
    return [
        {
            "name": member.name,
            "tag": member.tag,
            attribute: getattr(member, attribute),
            "townHallLevel": member.town_hall_level,
        }
        for member in ranked
    ]


def clan_stats(clan) -> dict:
    members = clan.member_list
    count = len(members)
    total_trophies = sum(member.trophies for member in members)
    total_donations = sum(member.donations for member in members)
    total_received = sum(member.donations_received for member in members)
    return {
        "tag": clan.tag,
        "name": clan.name,
        "members": count,
        "thDistribution": town_hall_distribution(members),
        "totalTrophies": total_trophies,
        "totalDonations": total_donations,
        "totalReceived": total_received,
        "averages": {
            "trophies": _rounded_average(total_trophies, count),
            "donations": _rounded_average(total_donations, count),
            "received": _rounded_average(total_received, count),
        },
        "topDonors": top_members(members, "donations"),
        "topTrophies": top_members(members, "trophies"),
        "warStats": {
            "wins": clan.war_wins,
            "winStreak": clan.war_win_streak,
            "league": clan.war_league or "Unknown",
        },
        "generatedAt": _generated_at(),
    }


def family_stats(clans) -> dict:
    members = [member for clan in clans for member in clan.member_list]
    total_members = sum(clan.members for clan in clans)
    total_wins = sum(clan.war_wins for clan in clans)
    clan_count = len(clans)
    return {
        "totalClans": clan_count,
        "totalMembers": total_members,
        "totalWins": total_wins,
        "totalTrophies": sum(member.trophies for member in members),
        "totalDonations": sum(member.donations for member in members),
        "totalClanPoints": sum(clan.clan_points for clan in clans),
        "averages": {
            "clanLevel": _rounded_average(sum(clan.clan_level for clan in clans), clan_count),
            "membersPerClan": _rounded_average(total_members, clan_count),
            "winsPerClan": _rounded_average(total_wins, clan_count),
        },
        "thDistribution": town_hall_distribution(members),
        "clans": [
            {
                "tag": clan.tag,
                "name": clan.name,
                "members": clan.members,
                "level": clan.clan_level,
                "wins": clan.war_wins,
                "points": clan.clan_points,
            }
            for clan in clans
        ],
        "generatedAt": _generated_at(),
    }


def th_distribution_summary(clan) -> dict:
    distribution = town_hall_distribution(clan.member_list)
    return {
        "clanTag": clan.tag,
        "clanName": clan.name,
        "totalMembers": len(clan.member_list),
        "distribution": distribution,
        "distributionArray": [
            {"townHall": level, "count": count}
            for level, count in sorted(distribution.items(), reverse=True)
        ],
    }


class StatsService:
    """Cached statistics endpoints over the clan API and the family roster."""

    def __init__(self, coc_client, sheets_client, cache, ttl=None):
        self.coc = coc_client
        self.sheets = sheets_client
        self.cache = cache
        self.ttl = CACHE_TTL["STATS"] if ttl is None else ttl

    async def _cached(self, key, build):
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        value = await build()
        self.cache.set(key, value, self.ttl)
        return value

    async def get_clan_stats(self, tag) -> dict:
        tag = normalize_tag(tag)

        async def build():
            return clan_stats(await self.coc.fetch_one(tag))

        return await self._cached(f"stats:clan:{tag}", build)

    async def get_th_distribution(self, tag) -> dict:
        tag = normalize_tag(tag)

        async def build():
            return th_distribution_summary(await self.coc.fetch_one(tag))

        return await self._cached(f"stats:th-distribution:{tag}", build)

    async def get_family_stats(self) -> dict:
        async def build():
            tags = await self.sheets.fetch_trinity_clans()
            if not tags:
                raise EmptyResult("No Trinity clans found")
            clans = await self.coc.fetch_many(tags)
            stats = family_stats(clans)
            logger.info(
                "Generated Trinity family stats: %d clans, %d members",
                stats["totalClans"], stats["totalMembers"],
            )
            return stats

        return await self._cached("stats:trinity-family", build)
