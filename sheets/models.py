import re
from dataclasses import dataclass
from typing import Optional

from shared.tags import normalize_tag

UNRANKED = 999
FORMATS = ("serious", "lazy")

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(value, default=None):
    """Parse the leading integer of a free-text cell ("10 members" -> 10), else ``default``."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT.match(str(value or ""))
    return int(match.group(1)) if match else default


def normalize_format(value) -> str:
    fmt = str(value or "").strip().lower()
    return fmt if fmt in FORMATS else "unknown"


@dataclass(frozen=True)
class RosterRequirement:
    """One roster row: what a CWL clan needs and where it sits in its league."""

    tag: str
    occupancy_rank: Optional[int] = None
    name: str = ""
    format: str = ""
    required_members: int = 0
    town_hall_rule: str = ""
    weight: str = ""
    league: str = ""

    @property
    def format_kind(self) -> str:
        return normalize_format(self.format)

    @property
    def sort_rank(self) -> int:
        return UNRANKED if self.occupancy_rank is None else self.occupancy_rank

    @classmethod
    def from_row(cls, row: dict) -> "RosterRequirement":
        """Build from a CSV row keyed by the sheet's column headers."""
        return cls(
            tag=normalize_tag(row.get("Clan Tag")),
            occupancy_rank=parse_int(row.get("In Use")),
            name=row.get("Clan Name") or "",
            format=row.get("Format") or "",
            required_members=parse_int(row.get("Members"), 0),
            town_hall_rule=row.get("TownHall") or "",
            weight=row.get("Weight") or "",
            league=row.get("League") or "",
        )

    @classmethod
    def from_payload(cls, payload: dict, tag=None) -> "RosterRequirement":
        """Build from the JSON ``sheetData`` shape produced by ``to_dict``."""
        return cls(
            tag=normalize_tag(payload.get("tag") or tag),
            occupancy_rank=parse_int(payload.get("inUse")),
            name=str(payload.get("name") or ""),
            format=str(payload.get("format") or ""),
            required_members=parse_int(payload.get("members"), 0),
            town_hall_rule=str(payload.get("townHall") or ""),
            weight=str(payload.get("weight") or ""),
            league=str(payload.get("league") or ""),
        )

    def to_dict(self) -> dict:
        return {
            "inUse": self.occupancy_rank,
            "tag": self.tag,
            "name": self.name,
            "format": self.format,
            "members": self.required_members,
            "townHall": self.town_hall_rule,
            "weight": self.weight,
            "league": self.league,
        }
