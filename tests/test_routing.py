"""Tests for marriage and parent-child connector routing."""

import pytest

from config import DEFAULT_MARRIAGE_COLORS, EdgeStyle, LayoutConfig
from layout import GenogramLayout
from models import MarriageStatus, Orientation, Point
from routing import ConnectionPoint, ConnectionRouter, ConnectorKind, marriage_key


def route(people, schema, **kwargs):
    config = kwargs.pop("config", None)
    layout = GenogramLayout(people, schema, config)
    router = ConnectionRouter(layout, marriage_status=schema.marriage_status, **kwargs)
    return layout, router, router.route()


def of_kind(requests, kind):
    return [r for r in requests if r.kind == kind]


def test_marriage_key():
    assert marriage_key("M", "S1") == "M|S1"


def test_marriage_colors_follow_sorted_keys(three_generations, schema):
    _, router, _ = route(three_generations, schema)
    assert router.marriage_colors == {
        "A|B": DEFAULT_MARRIAGE_COLORS[0],
        "B2|W": DEFAULT_MARRIAGE_COLORS[1],
        "G1|G2": DEFAULT_MARRIAGE_COLORS[2],
        "H1|H2": DEFAULT_MARRIAGE_COLORS[3],
    }


def test_marriage_colors_ignore_input_order(three_generations, schema):
    _, forward, _ = route(three_generations, schema)
    _, backward, _ = route(list(reversed(three_generations)), schema)
    assert forward.marriage_colors == backward.marriage_colors


def test_palette_wraps_around(make_person, schema):
    people = [make_person("M", "M", spouses=["W1", "W2", "W3"])]
    people += [make_person(f"W{i}", "F") for i in (1, 2, 3)]
    style = EdgeStyle(marriage_colors=("red", "blue"))
    _, router, _ = route(people, schema, style=style)
    assert router.marriage_colors == {"M|W1": "red", "M|W2": "blue", "M|W3": "red"}


def test_request_counts(three_generations, schema):
    _, router, requests = route(three_generations, schema)

    assert len(router.marriages) == 4
    assert len(of_kind(requests, ConnectorKind.JUNCTION)) == 4
    assert len(of_kind(requests, ConnectorKind.DIRECT)) == 4 * 3
    # A, A2, B, B2, K1, K2 and K3 all hang from a marriage point
    assert len(of_kind(requests, ConnectorKind.ROUTED)) == 7


def test_marriage_geometry(scenario_a, schema):
    _, router, requests = route(scenario_a, schema)

    first = router.marriages["M|S1"]
    assert first.spouse_index == 0
    assert first.husband_anchor == Point(135, 150)
    assert first.wife_anchor == Point(315, 150)
    assert first.marriage_point.x == pytest.approx(225)
    assert first.marriage_point.y == pytest.approx(174 + 16 * 0.95)

    second = router.marriages["M|S2"]
    assert second.spouse_index == 1
    assert second.marriage_point.x == pytest.approx(459)
    assert second.marriage_point.y == pytest.approx(189.2)

    stubs_and_bridges = [r for r in of_kind(requests, ConnectorKind.DIRECT) if r.color == first.color]
    assert stubs_and_bridges[0].start == Point(135, 150)
    assert stubs_and_bridges[0].end == Point(135, 174)
    assert stubs_and_bridges[1].end == Point(315, 174)
    # the bridge overlaps both stubs by half a stroke
    assert stubs_and_bridges[2].start == Point(134, 174)
    assert stubs_and_bridges[2].end == Point(316, 174)


def test_junction_marker(scenario_a, schema):
    _, router, requests = route(scenario_a, schema)
    junction = of_kind(requests, ConnectorKind.JUNCTION)[0]

    assert junction.start == Point(225, 174)
    assert junction.filled
    assert junction.color == "#ff9800"
    assert junction.points == (Point(241, 174), Point(225, 190), Point(209, 174), Point(225, 158))


def test_children_hang_from_marriage_point(scenario_a, schema):
    _, router, requests = route(scenario_a, schema)
    routed = {r.end: r for r in of_kind(requests, ConnectorKind.ROUTED)}

    c3 = routed[Point(495, 210)]
    record = router.marriages["M|S2"]
    assert c3.start == record.marriage_point
    assert c3.color == record.color
    assert c3.stroke_width == 2.0
    assert len(c3.points) == 4
    assert c3.points[0] == c3.start
    assert c3.points[-1] == c3.end
    assert c3.points[1].x == pytest.approx(459)
    assert c3.points[1].y == pytest.approx((189.2 + 210) / 2)
    assert c3.points[2].x == pytest.approx(495)

    assert routed[Point(135, 210)].start == router.marriages["M|S1"].marriage_point
    assert routed[Point(315, 210)].start == router.marriages["M|S1"].marriage_point


def test_unmarried_parents_get_direct_lines(make_person, schema):
    people = [
        make_person("F", "M"),
        make_person("Mo", "F"),
        make_person("K", "M", fathers=["F"], mothers=["Mo"]),
    ]
    layout, router, requests = route(people, schema)

    assert router.marriages == {}
    direct = of_kind(requests, ConnectorKind.DIRECT)
    assert len(direct) == 2
    child_top = router.connection_point(layout.node("K"), ConnectionPoint.TOP)
    assert {r.end for r in direct} == {child_top}
    assert {r.start for r in direct} == {
        router.connection_point(layout.node("F"), ConnectionPoint.BOTTOM),
        router.connection_point(layout.node("Mo"), ConnectionPoint.BOTTOM),
    }
    assert all(r.color == "#9e9e9e" and r.stroke_width == 1.5 for r in direct)


def test_single_parent(make_person, schema):
    people = [make_person("Mo", "F"), make_person("K", "F", mothers=["Mo"])]
    _, _, requests = route(people, schema)

    assert len(requests) == 1
    assert requests[0].kind == ConnectorKind.DIRECT
    assert requests[0].start == Point(135, 150)
    assert requests[0].end == Point(135, 210)


def test_compat_anchors_share_bottom_center(scenario_a, schema):
    layout, router, _ = route(scenario_a, schema)
    m = layout.node("M")

    bottom = router.connection_point(m, ConnectionPoint.BOTTOM)
    assert bottom == Point(135, 150)
    assert router.connection_point(m, ConnectionPoint.RIGHT) == bottom
    assert router.connection_point(m, ConnectionPoint.LEFT) == bottom
    assert router.connection_point(m, ConnectionPoint.TOP) == Point(135, 0)
    assert router.connection_point(m, ConnectionPoint.CENTER) == Point(135, 75)


def test_exact_anchors(scenario_a, schema):
    layout, router, _ = route(scenario_a, schema, exact_anchors=True)
    m = layout.node("M")

    assert router.connection_point(m, ConnectionPoint.RIGHT) == Point(210, 75)
    assert router.connection_point(m, ConnectionPoint.LEFT) == Point(60, 75)
    assert router.connection_point(m, ConnectionPoint.BOTTOM) == Point(135, 150)
    assert router.marriages["M|S1"].husband_anchor == Point(210, 75)
    assert router.marriages["M|S1"].wife_anchor == Point(240, 75)


def test_divorced_marriage_is_dashed(make_person, schema):
    husband = make_person("H", "M", spouses=["W"])
    husband.marriage_statuses["W"] = MarriageStatus.DIVORCED
    people = [husband, make_person("W", "F")]
    _, router, requests = route(people, schema)

    assert router.marriages["H|W"].status == MarriageStatus.DIVORCED
    lines = of_kind(requests, ConnectorKind.DIRECT)
    assert [r.line_style for r in lines] == ["dashed"] * 3


def test_status_declared_by_wife(make_person, schema):
    wife = make_person("W", "F")
    wife.marriage_statuses["H"] = MarriageStatus.SEPARATED
    people = [make_person("H", "M", spouses=["W"]), wife]
    _, router, requests = route(people, schema)

    assert router.marriages["H|W"].status == MarriageStatus.SEPARATED
    assert {r.stroke_width for r in of_kind(requests, ConnectorKind.DIRECT)} == {1.0}


def test_without_status_callback_everything_is_married(make_person, schema):
    husband = make_person("H", "M", spouses=["W"])
    husband.marriage_statuses["W"] = MarriageStatus.DIVORCED
    layout = GenogramLayout([husband, make_person("W", "F")], schema)
    router = ConnectionRouter(layout)
    router.route()
    assert router.marriages["H|W"].status == MarriageStatus.MARRIED


def test_left_to_right_stubs_run_along_x(scenario_a, schema):
    config = LayoutConfig(orientation=Orientation.LEFT_TO_RIGHT)
    _, router, requests = route(scenario_a, schema, config=config)

    first = router.marriages["M|S1"]
    stubs = [r for r in of_kind(requests, ConnectorKind.DIRECT) if r.color == first.color][:2]
    for stub in stubs:
        assert stub.end.y == stub.start.y
        assert stub.end.x - stub.start.x == 24


def test_route_is_repeatable(three_generations, schema):
    _, router, first = route(three_generations, schema)
    second = router.route()

    assert first == second
    assert len(router.marriages) == 4
