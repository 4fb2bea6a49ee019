"""Typed records for Clash of Clans API payloads.

Every optional field is defaulted here, at the deserialization boundary, so the
rest of the code can read attributes without guarding against missing keys.
``to_dict()`` produces the camelCase JSON shape the website consumes.
"""

from dataclasses import dataclass, field
from typing import Optional


def _name_of(value, default=None):
    # The API nests names as {"id": ..., "name": ...}.
    if isinstance(value, dict):
        return value.get("name") or default
    return value or default


@dataclass(frozen=True)
class BadgeUrls:
    small: str = ""
    medium: str = ""
    large: str = ""

    @classmethod
    def from_payload(cls, payload) -> "BadgeUrls":
        payload = payload or {}
        return cls(
            small=payload.get("small") or "",
            medium=payload.get("medium") or "",
            large=payload.get("large") or "",
        )

    def get(self, size: str) -> str:
        return getattr(self, size, "") if size in ("small", "medium", "large") else ""

    def to_dict(self) -> dict:
        return {"small": self.small, "medium": self.medium, "large": self.large}


@dataclass(frozen=True)
class MemberRecord:
    name: str
    tag: str
    role: str = ""
    exp_level: int = 0
    town_hall_level: int = 0
    trophies: int = 0
    clan_rank: int = 0
    donations: int = 0
    donations_received: int = 0

    @classmethod
    def from_payload(cls, payload: dict) -> "MemberRecord":
        return cls(
            name=payload.get("name") or "",
            tag=payload.get("tag") or "",
            role=payload.get("role") or "",
            exp_level=payload.get("expLevel") or 0,
            town_hall_level=payload.get("townHallLevel") or 0,
            trophies=payload.get("trophies") or 0,
            clan_rank=payload.get("clanRank") or 0,
            donations=payload.get("donations") or 0,
            donations_received=payload.get("donationsReceived") or 0,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "tag": self.tag,
            "role": self.role,
            "expLevel": self.exp_level,
            "townHallLevel": self.town_hall_level,
            "trophies": self.trophies,
            "clanRank": self.clan_rank,
            "donations": self.donations,
            "donationsReceived": self.donations_received,
        }


@dataclass(frozen=True)
class ClanRecord:
    tag: str
    name: str
    description: str = "No description available"
    type: Optional[str] = None
    location: str = "International"
    badge_urls: BadgeUrls = field(default_factory=BadgeUrls)
    clan_level: int = 0
    clan_capital_level: int = 0
    clan_points: int = 0
    clan_versus_points: int = 0
    war_wins: int = 0
    war_win_streak: int = 0
    war_league: Optional[str] = None
    members: int = 0
    member_list: tuple = ()
    required_trophies: int = 0
    required_town_hall_level: int = 1
    war_frequency: str = "unknown"
    is_war_log_public: bool = False

    @classmethod
    def from_payload(cls, payload: dict) -> "ClanRecord":
        capital = payload.get("clanCapital") or {}
        return cls(
            tag=payload.get("tag") or "",
            name=payload.get("name") or "",
            description=payload.get("description") or "No description available",
            type=payload.get("type"),
            location=_name_of(payload.get("location"), "International"),
            badge_urls=BadgeUrls.from_payload(payload.get("badgeUrls")),
            clan_level=payload.get("clanLevel") or 0,
            clan_capital_level=capital.get("capitalHallLevel") or 0,
            clan_points=payload.get("clanPoints") or 0,
            clan_versus_points=payload.get("clanBuilderBasePoints") or payload.get("clanVersusPoints") or 0,
            war_wins=payload.get("warWins") or 0,
            war_win_streak=payload.get("warWinStreak") or 0,
            war_league=_name_of(payload.get("warLeague")),
            members=payload.get("members") or 0,
            member_list=tuple(MemberRecord.from_payload(m) for m in payload.get("memberList") or []),
            required_trophies=payload.get("requiredTrophies") or 0,
            required_town_hall_level=payload.get("requiredTownhallLevel") or 1,
            war_frequency=payload.get("warFrequency") or "unknown",
            is_war_log_public=bool(payload.get("isWarLogPublic")),
        )

    @property
    def leader(self) -> Optional[MemberRecord]:
        return next((m for m in self.member_list if m.role == "leader"), None)

    def to_dict(self) -> dict:
        leader = self.leader
        return {
            "tag": self.tag,
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "location": self.location,
            "badgeUrls": self.badge_urls.to_dict(),
            "clanLevel": self.clan_level,
            "clanCapitalLevel": self.clan_capital_level,
            "clanPoints": self.clan_points,
            "clanVersusPoints": self.clan_versus_points,
            "warWins": self.war_wins,
            "warWinStreak": self.war_win_streak,
            "warLeague": self.war_league or "Unranked",
            "members": self.members,
            "memberList": [m.to_dict() for m in self.member_list],
            "leader": {
                "name": leader.name,
                "tag": leader.tag,
                "trophies": leader.trophies,
                "townHallLevel": leader.town_hall_level,
                "expLevel": leader.exp_level,
            } if leader else None,
            "requiredTrophies": self.required_trophies,
            "requiredTownHallLevel": self.required_town_hall_level,
            "warFrequency": self.war_frequency,
            "isWarLogPublic": self.is_war_log_public,
        }


## <------------------------------------- Wars -------------------------------------> ##

@dataclass(frozen=True)
class WarClan:
    tag: str = ""
    name: str = "Unknown"
    badge_urls: BadgeUrls = field(default_factory=BadgeUrls)
    clan_level: int = 0
    attacks: int = 0
    stars: int = 0
    destruction_percentage: float = 0
    members: tuple = ()

    @classmethod
    def from_payload(cls, payload) -> Optional["WarClan"]:
        if not payload:
            return None
        return cls(
            tag=payload.get("tag") or "",
            name=payload.get("name") or "Unknown",
            badge_urls=BadgeUrls.from_payload(payload.get("badgeUrls")),
            clan_level=payload.get("clanLevel") or 0,
            attacks=payload.get("attacks") or 0,
            stars=payload.get("stars") or 0,
            destruction_percentage=payload.get("destructionPercentage") or 0,
            members=tuple(payload.get("members") or ()),
        )

    def to_dict(self) -> dict:
        return {
            "tag": self.tag,
            "name": self.name,
            "badgeUrls": self.badge_urls.to_dict(),
            "clanLevel": self.clan_level,
            "attacks": self.attacks,
            "stars": self.stars,
            "destructionPercentage": self.destruction_percentage,
            "members": list(self.members),
        }


@dataclass(frozen=True)
class CurrentWar:
    state: str = "unknown"
    team_size: int = 0
    preparation_start_time: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    clan: Optional[WarClan] = None
    opponent: Optional[WarClan] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "CurrentWar":
        if payload.get("state") == "notInWar":
            return cls(state="notInWar")
        return cls(
            state=payload.get("state") or "unknown",
            team_size=payload.get("teamSize") or 0,
            preparation_start_time=payload.get("preparationStartTime"),
            start_time=payload.get("startTime"),
            end_time=payload.get("endTime"),
            clan=WarClan.from_payload(payload.get("clan")),
            opponent=WarClan.from_payload(payload.get("opponent")),
        )

    def to_dict(self) -> dict:
        if self.state == "notInWar":
            return {"state": "notInWar"}
        return {
            "state": self.state,
            "teamSize": self.team_size,
            "preparationStartTime": self.preparation_start_time,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "clan": self.clan.to_dict() if self.clan else None,
            "opponent": self.opponent.to_dict() if self.opponent else None,
        }


@dataclass(frozen=True)
class WarLogClan:
    name: str = "Unknown"
    tag: str = ""
    badge_urls: BadgeUrls = field(default_factory=BadgeUrls)
    level: int = 0
    stars: int = 0
    destruction: float = 0
    exp_earned: int = 0
    attack_count: int = 0

    @classmethod
    def from_payload(cls, payload) -> Optional["WarLogClan"]:
        if not payload:
            return None
        return cls(
            name=payload.get("name") or "Unknown",
            tag=payload.get("tag") or "",
            badge_urls=BadgeUrls.from_payload(payload.get("badgeUrls")),
            level=payload.get("clanLevel") or 0,
            stars=payload.get("stars") or 0,
            destruction=payload.get("destructionPercentage") or 0,
            exp_earned=payload.get("expEarned") or 0,
            attack_count=payload.get("attacks") or 0,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "tag": self.tag,
            "badgeUrls": self.badge_urls.to_dict(),
            "level": self.level,
            "stars": self.stars,
            "destruction": self.destruction,
            "expEarned": self.exp_earned,
            "attackCount": self.attack_count,
        }


@dataclass(frozen=True)
class WarLogEntry:
    result: str = "unknown"
    end_time: Optional[str] = None
    team_size: int = 0
    clan: Optional[WarLogClan] = None
    opponent: Optional[WarLogClan] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "WarLogEntry":
        return cls(
            result=payload.get("result") or "unknown",
            end_time=payload.get("endTime"),
            team_size=payload.get("teamSize") or 0,
            clan=WarLogClan.from_payload(payload.get("clan")),
            opponent=WarLogClan.from_payload(payload.get("opponent")),
        )

    def to_dict(self) -> dict:
        return {
            "result": self.result,
            "endTime": self.end_time,
            "teamSize": self.team_size,
            "clan": self.clan.to_dict() if self.clan else None,
            "opponent": self.opponent.to_dict() if self.opponent else None,
        }
