import logging

from cwl.capacity import filter_visible
from cwl.eligibility import calculate_eligible_members
from cwl.models import MergedClan
from shared.config import CACHE_TTL
from shared.errors import EmptyResult

logger = logging.getLogger("trinity.cwl")

FILTERED_CACHE_KEY = "cwl:filtered-clans"
MERGED_CACHE_KEY = "cwl:merged-clans"


def merge_clans(requirements, clans) -> tuple:
    """Join each live clan with the first roster row carrying its tag."""
    by_tag = {}
    for requirement in requirements:
        by_tag.setdefault(requirement.tag, requirement)

    merged = []
    for clan in clans:
        requirement = by_tag.get(clan.tag)
        merged.append(MergedClan(
            clan=clan,
            requirement=requirement,
            eligible_members=calculate_eligible_members(requirement, clan.member_list),
        ))
    return tuple(merged)


class CwlService:
    """Builds the CWL clan listing from the roster sheet and the live clan data."""

    def __init__(self, coc_client, sheets_client, cache, ttl=None):
        self.coc = coc_client
        self.sheets = sheets_client
        self.cache = cache
        self.ttl = CACHE_TTL["CWL_FILTERED"] if ttl is None else ttl

    async def _load_merged(self):
        # Returns (merged, fresh); fresh is False when served from the cache.
        cached = self.cache.get(MERGED_CACHE_KEY)
        if cached is not None:
            return cached, False

        requirements = await self.sheets.fetch_cwl_details()
        if not requirements:
            raise EmptyResult("No CWL clans found in Google Sheets")

        clans = await self.coc.fetch_many([requirement.tag for requirement in requirements])
        if not clans:
            raise EmptyResult("No clan data could be fetched from CoC API")

        merged = merge_clans(requirements, clans)
        logger.info("Merged %d of %d CWL clans with live data", len(merged), len(requirements))
        self.cache.set(MERGED_CACHE_KEY, merged, self.ttl)
        return merged, True

    async def get_all_merged_clans(self) -> tuple:
        '''
        Every roster clan that could be fetched, merged with its roster row, unfiltered.
        Raises EmptyResult when the roster or the live data comes back empty.
        '''
        merged, _ = await self._load_merged()
        return merged

    async def get_filtered_clans(self) -> tuple:
        '''
        The merged clans after the capacity filter.
        The filtered list is only cached alongside a freshly merged snapshot, so both entries
        expire together and neither outlives the data it was built from.
        '''
        cached = self.cache.get(FILTERED_CACHE_KEY)
        if cached is not None:
            return cached

        merged, fresh = await self._load_merged()
        filtered = tuple(filter_visible(merged))
        if fresh:
            self.cache.set(FILTERED_CACHE_KEY, filtered, self.ttl)
        return filtered

    async def get_clan_eligibility(self, tag, requirement) -> dict:
        clan = await self.coc.fetch_one(tag)
        eligible = calculate_eligible_members(requirement, clan.member_list)
        required = requirement.required_members if requirement is not None else 0
        return {
            "clanTag": clan.tag,
            "clanName": clan.name,
            "eligibleMembers": eligible,
            "requiredMembers": required,
            "isFull": eligible >= required,
            "remainingSlots": max(0, required - eligible),
        }
