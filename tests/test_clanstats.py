import pytest

from clanstats.stats import StatsService, _rounded_average, clan_stats, family_stats, th_distribution_summary, top_members
from cocapi.models import MemberRecord
from factories import FakeCocClient, FakeSheetsClient, make_clan
from shared.errors import EmptyResult


def member(index, th, trophies=0, donations=0, received=0):
    return MemberRecord(
        name=f"Player {index}",
        tag=f"#M{index}",
        town_hall_level=th,
        trophies=trophies,
        donations=donations,
        donations_received=received,
    )


def sample_clan(tag="#AAA", **kwargs):
    members = (
        member(1, 17, trophies=5000, donations=100, received=10),
        member(2, 16, trophies=4000, donations=300, received=20),
        member(3, 16, trophies=3001, donations=0, received=5),
        member(4, 15, trophies=4500, donations=50, received=0),
    )
    return make_clan(tag, member_list=members, war_wins=120, war_win_streak=3, **kwargs)


def test_rounded_average_rounds_half_up():
    assert _rounded_average(5, 2) == 3
    assert _rounded_average(7, 3) == 2
    assert _rounded_average(10, 0) == 0


def test_top_members_orders_by_attribute():
    top = top_members(sample_clan().member_list, "donations", limit=2)
    assert [entry["tag"] for entry in top] == ["#M2", "#M1"]
    assert top[0] == {"name": "Player 2", "tag": "#M2", "donations": 300, "townHallLevel": 16}


def test_clan_stats_totals_and_averages():
    stats = clan_stats(sample_clan(war_league="Master League I"))

    assert stats["members"] == 4
    assert stats["thDistribution"] == {17: 1, 16: 2, 15: 1}
    assert stats["totalTrophies"] == 16501
    assert stats["averages"] == {"trophies": 4125, "donations": 113, "received": 9}
    assert [entry["tag"] for entry in stats["topTrophies"]] == ["#M1", "#M4", "#M2", "#M3"]
    assert stats["warStats"] == {"wins": 120, "winStreak": 3, "league": "Master League I"}
    assert stats["generatedAt"].endswith("Z")


def test_clan_stats_for_empty_clan():
    stats = clan_stats(make_clan("#EMPTY"))
    assert stats["members"] == 0
    assert stats["averages"] == {"trophies": 0, "donations": 0, "received": 0}
    assert stats["warStats"]["league"] == "Unknown"


def test_th_distribution_summary_sorted_descending():
    summary = th_distribution_summary(sample_clan())
    assert summary["totalMembers"] == 4
    assert summary["distributionArray"] == [
        {"townHall": 17, "count": 1},
        {"townHall": 16, "count": 2},
        {"townHall": 15, "count": 1},
    ]


def test_family_stats_aggregates_clans():
    clans = [sample_clan("#AAA", clan_level=20, clan_points=40000), make_clan("#BBB", levels=[14, 14], clan_level=11)]
    stats = family_stats(clans)

    assert stats["totalClans"] == 2
    assert stats["totalMembers"] == 6
    assert stats["totalWins"] == 120
    assert stats["totalClanPoints"] == 40000
    assert stats["averages"] == {"clanLevel": 16, "membersPerClan": 3, "winsPerClan": 60}
    assert stats["thDistribution"][14] == 2
    assert [clan["tag"] for clan in stats["clans"]] == ["#AAA", "#BBB"]


async def test_service_caches_clan_stats(cache):
    coc = FakeCocClient(clans=[sample_clan()])
    service = StatsService(coc, FakeSheetsClient(), cache)

    first = await service.get_clan_stats("aaa")
    assert cache.has("stats:clan:#AAA")
    coc.clans.clear()
    assert await service.get_clan_stats("#AAA") is first


async def test_family_stats_requires_trinity_clans(cache):
    service = StatsService(FakeCocClient(), FakeSheetsClient(trinity_tags=()), cache)
    with pytest.raises(EmptyResult, match="No Trinity clans found"):
        await service.get_family_stats()


async def test_family_stats_skips_clans_that_fail(cache):
    coc = FakeCocClient(clans=[sample_clan("#AAA"), make_clan("#BBB", levels=[14])], failing={"#BBB"})
    service = StatsService(coc, FakeSheetsClient(trinity_tags=("#AAA", "#BBB")), cache)
    stats = await service.get_family_stats()
    assert stats["totalClans"] == 1
    assert cache.has("stats:trinity-family")
