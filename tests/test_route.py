import pytest

from transitkit.registry import Timetable, read_agencies
from transitkit.route import Clasz, read_routes, to_clasz, to_color

AGENCIES = "agency_id,agency_name,agency_timezone\nDTA,Demo Transit,Europe/Berlin\n"

ROUTES = (
    "route_id,agency_id,route_short_name,route_long_name,route_desc,route_type,"
    "route_color,route_text_color\n"
    "A,DTA,17,Mission,The A route,3,FF0000,FFFFFF\n"
    "B,MISSING,,Other,,2,,\n"
    "C,,X,Ferry,,1000,zzzzzz,\n"
)


@pytest.mark.parametrize(
    "route_type, expected",
    [
        (0, Clasz.TRAM),
        (1, Clasz.SUBWAY),
        (2, Clasz.REGIONAL_FAST),
        (3, Clasz.BUS),
        (4, Clasz.SHIP),
        (7, Clasz.OTHER),
        (101, Clasz.HIGH_SPEED),
        (105, Clasz.NIGHT),
        (109, Clasz.METRO),
        (205, Clasz.COACH),
        (714, Clasz.BUS),
        (906, Clasz.TRAM),
        (1100, Clasz.AIR),
        (1305, Clasz.OTHER),
    ],
)
def test_to_clasz_table(route_type, expected):
    assert to_clasz(route_type) is expected


@pytest.mark.parametrize(
    "route_type, expected",
    [(1050, Clasz.SHIP), (1150, Clasz.AIR), (1250, Clasz.SHIP), (9999, Clasz.OTHER), (-1, Clasz.OTHER)],
)
def test_to_clasz_ranges(route_type, expected):
    assert to_clasz(route_type) is expected


def test_to_color_valid():
    assert to_color("FF0000") == 0xFFFF0000
    assert to_color("000000") == 0xFF000000


@pytest.mark.parametrize("value", ["", "FFF", "GGGGGG", "FF00000", "#FF000"])
def test_to_color_invalid(value):
    assert to_color(value) == 0


@pytest.mark.parametrize("rgb", [0x123456, 0xABCDEF, 0x0, 0xFFFFFF])
def test_to_color_round_trip(rgb):
    c = to_color(f"{rgb:06X}")
    assert c & 0xFFFFFF == rgb
    assert c >> 24 == 0xFF
    assert to_color(f"{rgb:06x}") == c


def _load():
    tt = Timetable()
    timezones: dict[str, int] = {}
    agencies = read_agencies(tt, timezones, AGENCIES)
    routes = read_routes(tt, timezones, agencies, ROUTES, "Europe/Berlin")
    return tt, timezones, agencies, routes


def test_read_routes_known_agency():
    tt, _, agencies, routes = _load()
    a = routes["A"]
    assert a.agency == agencies["DTA"]
    assert a.short_name == "17"
    assert a.long_name == "Mission"
    assert a.desc == "The A route"
    assert a.clasz is Clasz.BUS
    assert a.color == to_color("FF0000")
    assert a.text_color == to_color("FFFFFF")


def test_read_routes_unknown_agency_registered():
    tt, timezones, agencies, routes = _load()
    b = routes["B"]
    assert "MISSING" in agencies
    assert b.agency == agencies["MISSING"]
    provider = tt.providers[b.agency]
    assert provider.short_name == "MISSING"
    assert provider.long_name == "UNKNOWN_AGENCY"
    assert tt.timezones[provider.tz][0] == "Europe/Berlin"
    assert b.color == 0
    assert b.clasz is Clasz.REGIONAL_FAST


def test_read_routes_empty_agency_uses_ukn():
    tt, _, agencies, routes = _load()
    c = routes["C"]
    assert tt.providers[c.agency].short_name == "UKN"
    assert agencies[""] == c.agency
    assert c.clasz is Clasz.SHIP
    assert c.color == 0


def test_read_routes_reuses_timezone():
    tt, timezones, _, _ = _load()
    assert list(timezones) == ["Europe/Berlin"]
    assert len(tt.timezones) == 1