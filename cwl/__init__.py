"""Clan War League listing: town-hall eligibility, the capacity filter and the merge service."""

from cwl.capacity import filter_visible
from cwl.eligibility import calculate_eligible_members, compute_eligible, parse_town_hall_rule
from cwl.models import MergedClan
from cwl.service import CwlService

__all__ = [
    "CwlService",
    "MergedClan",
    "calculate_eligible_members",
    "compute_eligible",
    "filter_visible",
    "parse_town_hall_rule",
]
