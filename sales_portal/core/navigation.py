"""
Breadcrumb resolution over a static route table, plus the role-filtered
navigation menu.

The route table maps each path to a label and an optional parent path. A trail
is built by walking parents up to the root and is displayed root first, with
the current page last and without a link.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from sales_portal.config import BREADCRUMB_MAX_DEPTH
from sales_portal.constants import (
    Role, ROLE_DISPLAY_NAMES,
    DASHBOARD_ROUTE, LEADS_ROUTE, ADD_LEAD_ROUTE, ORDERS_ROUTE, NEW_ORDER_ROUTE,
    USERS_ROUTE, ADD_USER_ROUTE, REPORTS_ROUTE, SETTINGS_ROUTE,
)

logger = logging.getLogger(__name__)

FALLBACK_ROOT_LABEL = "Dashboard"
FALLBACK_PAGE_LABEL = "Page"
COLLAPSE_THRESHOLD = 3


@dataclass(frozen=True)
class RouteNode:
    path: str
    label: str
    parent: Optional[str] = None


@dataclass(frozen=True)
class BreadcrumbItem:
    label: str
    href: Optional[str] = None
    current: bool = False


@dataclass(frozen=True)
class BreadcrumbDisplay:
    """
    What the breadcrumb bar renders.

    `collapsed` holds the middle items hidden behind the ellipsis marker; it is
    empty when the trail is short enough to show in full.
    """
    leading: Tuple[BreadcrumbItem, ...]
    collapsed: Tuple[BreadcrumbItem, ...]
    trailing: Tuple[BreadcrumbItem, ...]

    @property
    def has_collapsed_marker(self) -> bool:
        return bool(self.collapsed)

    @property
    def visible_items(self) -> Tuple[BreadcrumbItem, ...]:
        return self.leading + self.trailing


ROUTE_NODES: Tuple[RouteNode, ...] = (
    RouteNode(DASHBOARD_ROUTE, "Dashboard"),
    RouteNode(LEADS_ROUTE, "Lead Management", DASHBOARD_ROUTE),
    RouteNode(ADD_LEAD_ROUTE, "Add New Lead", LEADS_ROUTE),
    RouteNode(ORDERS_ROUTE, "Order Management", DASHBOARD_ROUTE),
    RouteNode(NEW_ORDER_ROUTE, "New Order", ORDERS_ROUTE),
    RouteNode(USERS_ROUTE, "User Management", DASHBOARD_ROUTE),
    RouteNode(ADD_USER_ROUTE, "Add User", USERS_ROUTE),
    RouteNode(REPORTS_ROUTE, "Reports", DASHBOARD_ROUTE),
    RouteNode(SETTINGS_ROUTE, "Settings", DASHBOARD_ROUTE),
)


def build_route_table(nodes: Iterable[RouteNode]) -> Dict[str, RouteNode]:
    table: Dict[str, RouteNode] = {}
    for node in nodes:
        if node.path in table:
            raise ValueError(f"Duplicate route path in navigation table: {node.path}")
        table[node.path] = node
    return table


ROUTE_TABLE: Dict[str, RouteNode] = build_route_table(ROUTE_NODES)


def title_for(path: str) -> str:
    node = ROUTE_TABLE.get(path)
    return node.label if node else FALLBACK_PAGE_LABEL


def resolve_trail(
        current_path: str,
        route_table: Optional[Dict[str, RouteNode]] = None,
        max_depth: int = BREADCRUMB_MAX_DEPTH,
) -> List[BreadcrumbItem]:
    """
    Returns the breadcrumb trail for `current_path`, root first.

    Unknown paths get a two item fallback trail. A parent that is missing from
    the table, a revisited path, or a chain longer than `max_depth` stops the
    ascent and the trail is simply shorter.
    """
    table = ROUTE_TABLE if route_table is None else route_table
    current_node = table.get(current_path)
    if current_node is None:
        return [
            BreadcrumbItem(FALLBACK_ROOT_LABEL, href=DASHBOARD_ROUTE),
            BreadcrumbItem(FALLBACK_PAGE_LABEL, current=True),
        ]

    ancestors: List[RouteNode] = []
    visited = {current_node.path}
    parent_path = current_node.parent
    while parent_path is not None:
        if len(ancestors) >= max_depth:
            logger.warning(f"Breadcrumb chain for '{current_path}' exceeds {max_depth} levels; truncating.")
            break
        if parent_path in visited:
            logger.warning(f"Breadcrumb cycle detected at '{parent_path}' while resolving '{current_path}'.")
            break
        parent_node = table.get(parent_path)
        if parent_node is None:
            break
        visited.add(parent_path)
        ancestors.append(parent_node)
        parent_path = parent_node.parent

    trail = [BreadcrumbItem(node.label, href=node.path) for node in reversed(ancestors)]
    trail.append(BreadcrumbItem(current_node.label, current=True))
    return trail


def compress_trail(trail: List[BreadcrumbItem]) -> Optional[BreadcrumbDisplay]:
    """None for trails of one item or less; first + marker + last two for trails over three items."""
    if len(trail) <= 1:
        return None
    if len(trail) > COLLAPSE_THRESHOLD:
        return BreadcrumbDisplay(
            leading=(trail[0],),
            collapsed=tuple(trail[1:-2]),
            trailing=tuple(trail[-2:]),
        )
    return BreadcrumbDisplay(leading=tuple(trail), collapsed=(), trailing=())


def breadcrumbs_for(current_path: str, route_table: Optional[Dict[str, RouteNode]] = None) -> Optional[BreadcrumbDisplay]:
    return compress_trail(resolve_trail(current_path, route_table))


@dataclass(frozen=True)
class NavigationItem:
    title: str
    href: str
    icon: str
    roles: Tuple[Role, ...]
    badge: Optional[str] = None


NAVIGATION_ITEMS: Tuple[NavigationItem, ...] = (
    NavigationItem("Dashboard", DASHBOARD_ROUTE, "dashboard_rounded",
                   (Role.ADMIN, Role.DISTRIBUTOR, Role.RETAILER, Role.SALES)),
    NavigationItem("Lead Management", LEADS_ROUTE, "person_add_alt_1_rounded", (Role.ADMIN, Role.SALES)),
    NavigationItem("Order Management", ORDERS_ROUTE, "inventory_2_rounded",
                   (Role.ADMIN, Role.DISTRIBUTOR, Role.RETAILER), badge="Soon"),
    NavigationItem("User Management", USERS_ROUTE, "people_alt_rounded", (Role.ADMIN,)),
    NavigationItem("Reports", REPORTS_ROUTE, "bar_chart_rounded", (Role.ADMIN, Role.DISTRIBUTOR)),
    NavigationItem("Settings", SETTINGS_ROUTE, "settings_rounded",
                   (Role.ADMIN, Role.DISTRIBUTOR, Role.RETAILER, Role.SALES)),
)


def visible_navigation_items(role: Role) -> List[NavigationItem]:
    return [item for item in NAVIGATION_ITEMS if role in item.roles]


def role_display_name(role) -> str:
    try:
        return ROLE_DISPLAY_NAMES[Role(role)]
    except ValueError:
        return str(role)
