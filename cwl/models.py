from dataclasses import dataclass
from typing import Optional

from cocapi.models import ClanRecord
from sheets.models import UNRANKED, RosterRequirement


@dataclass(frozen=True)
class MergedClan:
    """A live clan record joined with its roster row and its eligible-member count."""

    clan: ClanRecord
    requirement: Optional[RosterRequirement] = None
    eligible_members: int = 0

    @property
    def tag(self) -> str:
        return self.clan.tag

    @property
    def league_name(self) -> str:
        # The sheet's league wins over the live war league.
        if self.requirement is not None and self.requirement.league:
            return self.requirement.league
        return self.clan.war_league or "Unknown"

    @property
    def occupancy_rank(self) -> int:
        return self.requirement.sort_rank if self.requirement is not None else UNRANKED

    @property
    def format_kind(self) -> str:
        return self.requirement.format_kind if self.requirement is not None else "unknown"

    @property
    def required_members(self) -> int:
        return self.requirement.required_members if self.requirement is not None else 0

    @property
    def is_full(self) -> bool:
        return self.eligible_members >= self.required_members

    def to_dict(self) -> dict:
        data = self.clan.to_dict()
        data["sheetData"] = self.requirement.to_dict() if self.requirement is not None else None
        data["eligibleMembers"] = self.eligible_members
        return data
