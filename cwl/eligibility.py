"""Town-hall eligibility: how many members of a clan satisfy a roster's TH requirement."""

import re
from dataclasses import dataclass
from typing import Iterable

_TH_LEVEL = re.compile(r"th\s*(\d+)", re.IGNORECASE)


@dataclass(frozen=True)
class TownHallRule:
    """Parsed form of a requirement such as "TH17, TH16 and below"."""

    levels: tuple = ()
    and_below: bool = False

    def matches(self, level: int) -> bool:
        if not self.levels:
            return False
        if self.and_below:
            return level <= max(self.levels)
        if len(self.levels) == 1:
            return level == self.levels[0]
        return min(self.levels) <= level <= max(self.levels)


def parse_town_hall_rule(text) -> TownHallRule:
    text = str(text or "")
    levels = tuple(int(number) for number in _TH_LEVEL.findall(text))
    return TownHallRule(levels=levels, and_below="below" in text.lower())


def compute_eligible(rule: TownHallRule, levels: Iterable[int]) -> int:
    """Count the town-hall levels that satisfy ``rule``. A rule without levels admits nobody."""
    if not rule.levels:
        return 0
    return sum(1 for level in levels if rule.matches(level))


def calculate_eligible_members(requirement, members) -> int:
    '''
    Counts the members of a clan that meet the roster requirement's town-hall rule.

    :param requirement: RosterRequirement or None (a clan without a roster row has no eligible members).
    :param members: Iterable of MemberRecord.
    '''
    if requirement is None or not requirement.town_hall_rule or members is None:
        return 0
    rule = parse_town_hall_rule(requirement.town_hall_rule)
    return compute_eligible(rule, (member.town_hall_level for member in members))
