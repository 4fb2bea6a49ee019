"""Capacity filter deciding which CWL clans are advertised.

Within a league, "serious" clans are always shown. "lazy" clans form a waiting
chain ordered by their "In Use" rank: the next lazy clan is only revealed once
the previous visible lazy clan has enough eligible members to be full. Clans
with any other format are shown and do not take part in the chain.

Example: Master 2 with lazy clans ranked 4, 5 and 6. Clan 4 is always shown,
clan 5 only once clan 4 is full, clan 6 only once clan 5 is full.
"""

from collections import defaultdict


def _rank(clan) -> int:
    return clan.occupancy_rank


def group_by_league(clans) -> dict:
    """Clans keyed by league name, leagues in order of first appearance."""
    groups = defaultdict(list)
    for clan in clans:
        groups[clan.league_name].append(clan)
    return dict(groups)


def visible_in_league(league_clans) -> list:
    visible = []
    last_visible_lazy = None
    for clan in sorted(league_clans, key=_rank):
        fmt = clan.format_kind
        if fmt == "lazy":
            if last_visible_lazy is not None and not last_visible_lazy.is_full:
                continue
            last_visible_lazy = clan
        visible.append(clan)
    return visible


def filter_visible(clans) -> list:
    '''
    Returns the clans that should be shown, ordered by "In Use" rank (unranked last).
    The input is left untouched; ties keep their relative order.
    '''
    visible = []
    for league_clans in group_by_league(clans).values():
        visible.extend(visible_in_league(league_clans))
    return sorted(visible, key=_rank)
