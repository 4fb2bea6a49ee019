import pytest
from aiohttp import web

from sheets.models import RosterRequirement, normalize_format, parse_int
from sheets.sheets import SheetsClient, is_active_trinity_row, is_cwl_row, parse_csv, roster_from_rows
from shared.errors import SourceUnavailable

CWL_CSV = '''In Use,Clan Tag,Clan Name,Format,Members,TownHall,Weight,League
3,#CCC,"Trinity, Three",Lazy,15 members,"TH16, TH15",,Master 2
1,aaa,Trinity One,Serious,30,TH17,heavy,Champion 1

x,#SKIP,Not in use,Lazy,15,TH16,,Master 2
2,#VALUE!,Broken,Lazy,15,TH16,,Master 2
2,#BBB,"Say ""hi""",lazy,abc,TH14 and below,,
'''

TRINITY_CSV = """Clan Tag,Clan Name,Status
#AAA,One,Active
bbb,Two, active
#CCC,Three,Inactive
// #DDD,Commented,Active
,Empty,Active
"""


def test_parse_csv_handles_quotes_and_blank_lines():
    rows = parse_csv(CWL_CSV)
    assert len(rows) == 5
    assert rows[0]["Clan Name"] == "Trinity, Three"
    assert rows[0]["TownHall"] == "TH16, TH15"
    assert rows[-1]["Clan Name"] == 'Say "hi"'
    assert rows[-1]["League"] == ""


def test_parse_csv_pads_short_rows_and_needs_a_header():
    assert parse_csv("A,B\n1\n") == [{"A": "1", "B": ""}]
    assert parse_csv("A,B\n") == []
    assert parse_csv("") == []


def test_parse_int_reads_leading_integer():
    assert parse_int("15 members") == 15
    assert parse_int(" 7") == 7
    assert parse_int(12) == 12
    assert parse_int("abc") is None
    assert parse_int("", 0) == 0
    assert parse_int(None, 0) == 0


def test_normalize_format():
    assert normalize_format(" Serious ") == "serious"
    assert normalize_format("LAZY") == "lazy"
    assert normalize_format("") == "unknown"
    assert normalize_format("casual") == "unknown"


def test_cwl_and_trinity_row_filters():
    assert is_cwl_row({"In Use": "1", "Clan Tag": "#A"})
    assert not is_cwl_row({"In Use": "", "Clan Tag": "#A"})
    assert not is_cwl_row({"In Use": "1", "Clan Tag": " "})
    assert not is_cwl_row({"In Use": "1", "Clan Tag": "#VALUE!"})
    assert is_active_trinity_row({"Clan Tag": "#A", "status": "ACTIVE"})
    assert not is_active_trinity_row({"Clan Tag": "//#A", "Status": "Active"})
    assert not is_active_trinity_row({"Clan Tag": "#A", "Status": "Active soon"})


def test_roster_from_rows_builds_sorted_requirements():
    roster = roster_from_rows(parse_csv(CWL_CSV))

    assert [row.tag for row in roster] == ["#AAA", "#BBB", "#CCC"]
    first, second, third = roster
    assert first == RosterRequirement(
        tag="#AAA",
        occupancy_rank=1,
        name="Trinity One",
        format="Serious",
        required_members=30,
        town_hall_rule="TH17",
        weight="heavy",
        league="Champion 1",
    )
    assert second.required_members == 0
    assert second.format_kind == "lazy"
    assert third.required_members == 15


def test_requirement_from_payload_uses_route_tag_when_missing():
    requirement = RosterRequirement.from_payload({"members": "20", "townHall": "TH15", "format": "Lazy"}, tag="abc")
    assert requirement.tag == "#ABC"
    assert requirement.required_members == 20
    assert requirement.occupancy_rank is None
    assert requirement.sort_rank == 999
    assert requirement.to_dict()["townHall"] == "TH15"


@pytest.fixture
async def sheet_server(aiohttp_server):
    hits = {"cwl": 0, "trinity": 0}

    async def cwl(request):
        hits["cwl"] += 1
        assert "_" in request.query
        return web.Response(text=CWL_CSV, content_type="text/csv")

    async def trinity(request):
        hits["trinity"] += 1
        return web.Response(text=TRINITY_CSV, content_type="text/csv")

    async def broken(request):
        return web.Response(status=500, text="nope")

    app = web.Application()
    app.router.add_get("/cwl.csv", cwl)
    app.router.add_get("/trinity.csv", trinity)
    app.router.add_get("/broken.csv", broken)
    server = await aiohttp_server(app)
    server.hits = hits
    return server


def make_client(server, cache=None, cwl_path="/cwl.csv?gid=1&output=csv"):
    return SheetsClient(
        cwl_url=str(server.make_url(cwl_path)),
        trinity_url=str(server.make_url("/trinity.csv")),
        cache=cache,
    )


async def test_fetch_cwl_details_and_tags(sheet_server):
    client = make_client(sheet_server)

    details = await client.fetch_cwl_details()
    tags = await client.fetch_cwl_clans()

    assert [row.tag for row in details] == ["#AAA", "#BBB", "#CCC"]
    assert tags == ("#CCC", "#AAA", "#BBB")


async def test_fetch_trinity_clans_keeps_active_rows(sheet_server):
    client = make_client(sheet_server)
    assert await client.fetch_trinity_clans() == ("#AAA", "#BBB")


async def test_results_are_cached(sheet_server, cache):
    client = make_client(sheet_server, cache=cache)

    await client.fetch_cwl_details()
    await client.fetch_cwl_details()

    assert sheet_server.hits["cwl"] == 1
    assert cache.has("sheets:cwl-clans-details")


async def test_fetch_all_combines_every_tab(sheet_server):
    data = await make_client(sheet_server).fetch_all()
    assert data["trinityClans"] == ["#AAA", "#BBB"]
    assert len(data["cwlClans"]) == 3
    assert data["cwlDetails"][0]["inUse"] == 1


async def test_http_error_is_source_unavailable(sheet_server):
    client = make_client(sheet_server, cwl_path="/broken.csv")
    with pytest.raises(SourceUnavailable, match="500"):
        await client.fetch_cwl_details()
