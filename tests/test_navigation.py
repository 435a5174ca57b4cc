from sales_portal.constants import (
    Role, DASHBOARD_ROUTE, LEADS_ROUTE, ADD_LEAD_ROUTE, USERS_ROUTE, REPORTS_ROUTE, ORDERS_ROUTE,
)
from sales_portal.core.navigation import (
    RouteNode, BreadcrumbItem, build_route_table, resolve_trail, compress_trail, breadcrumbs_for,
    visible_navigation_items, role_display_name, title_for, FALLBACK_ROOT_LABEL, FALLBACK_PAGE_LABEL,
)
import pytest


def test_add_lead_trail():
    trail = resolve_trail(ADD_LEAD_ROUTE)
    assert trail == [
        BreadcrumbItem("Dashboard", href=DASHBOARD_ROUTE),
        BreadcrumbItem("Lead Management", href=LEADS_ROUTE),
        BreadcrumbItem("Add New Lead", current=True),
    ]


def test_resolving_twice_gives_identical_trail():
    assert resolve_trail(ADD_LEAD_ROUTE) == resolve_trail(ADD_LEAD_ROUTE)
    assert breadcrumbs_for(USERS_ROUTE) == breadcrumbs_for(USERS_ROUTE)


def test_unknown_path_returns_two_item_fallback():
    trail = resolve_trail("/no/such/page")
    assert trail == [
        BreadcrumbItem(FALLBACK_ROOT_LABEL, href=DASHBOARD_ROUTE),
        BreadcrumbItem(FALLBACK_PAGE_LABEL, current=True),
    ]


def test_root_has_no_breadcrumbs():
    assert resolve_trail(DASHBOARD_ROUTE) == [BreadcrumbItem("Dashboard", current=True)]
    assert breadcrumbs_for(DASHBOARD_ROUTE) is None


def test_short_trail_is_not_compressed():
    display = breadcrumbs_for(ADD_LEAD_ROUTE)
    assert not display.has_collapsed_marker
    assert [item.label for item in display.visible_items] == ["Dashboard", "Lead Management", "Add New Lead"]


def _deep_table(depth):
    nodes = [RouteNode("/l0", "Level 0")]
    nodes += [RouteNode(f"/l{i}", f"Level {i}", f"/l{i - 1}") for i in range(1, depth)]
    return build_route_table(nodes)


@pytest.mark.parametrize("depth", [4, 5, 8])
def test_long_trail_keeps_first_and_last_two(depth):
    table = _deep_table(depth)
    display = breadcrumbs_for(f"/l{depth - 1}", table)
    assert display.has_collapsed_marker
    assert [item.label for item in display.leading] == ["Level 0"]
    assert [item.label for item in display.trailing] == [f"Level {depth - 2}", f"Level {depth - 1}"]
    assert len(display.collapsed) == depth - 3
    assert display.trailing[-1].current


def test_missing_parent_stops_ascent():
    table = build_route_table([RouteNode("/orphan", "Orphan", "/gone")])
    assert resolve_trail("/orphan", table) == [BreadcrumbItem("Orphan", current=True)]


def test_cycle_stops_ascent():
    table = build_route_table([
        RouteNode("/a", "A", "/b"),
        RouteNode("/b", "B", "/a"),
    ])
    trail = resolve_trail("/a", table)
    assert [item.label for item in trail] == ["B", "A"]


def test_max_depth_truncates_chain():
    trail = resolve_trail("/l9", _deep_table(10), max_depth=3)
    assert [item.label for item in trail] == ["Level 6", "Level 7", "Level 8", "Level 9"]


def test_duplicate_route_paths_rejected():
    with pytest.raises(ValueError):
        build_route_table([RouteNode("/x", "X"), RouteNode("/x", "Again")])


def test_compress_trail_of_one_item_is_none():
    assert compress_trail([BreadcrumbItem("Only", current=True)]) is None


def test_navigation_items_filtered_by_role():
    sales_titles = [item.title for item in visible_navigation_items(Role.SALES)]
    assert "Lead Management" in sales_titles
    assert "User Management" not in sales_titles
    admin_hrefs = [item.href for item in visible_navigation_items(Role.ADMIN)]
    assert USERS_ROUTE in admin_hrefs and REPORTS_ROUTE in admin_hrefs
    retailer_hrefs = [item.href for item in visible_navigation_items(Role.RETAILER)]
    assert ORDERS_ROUTE in retailer_hrefs and LEADS_ROUTE not in retailer_hrefs


def test_role_display_names():
    assert role_display_name(Role.SALES) == "Sales Staff"
    assert role_display_name("admin") == "Administrator"
    assert role_display_name("unknown") == "unknown"


def test_title_for():
    assert title_for(REPORTS_ROUTE) == "Reports"
    assert title_for("/nowhere") == FALLBACK_PAGE_LABEL
