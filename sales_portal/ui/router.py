import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import flet as ft

from sales_portal.constants import (
    FIRST_RUN_SETUP_ROUTE, LOGIN_ROUTE, DASHBOARD_ROUTE, LEADS_ROUTE, ADD_LEAD_ROUTE,
    ORDERS_ROUTE, NEW_ORDER_ROUTE, USERS_ROUTE, ADD_USER_ROUTE, REPORTS_ROUTE, SETTINGS_ROUTE,
    Role, PERM_LEADS_READ, PERM_LEADS_CREATE, PERM_ORDERS_READ, PERM_REPORTS_READ,
)
from sales_portal.core.access_guard import (
    AUTHENTICATED_ONLY, AccessDecision, AccessState, RouteRequirement, evaluate_access,
)
from sales_portal.core.navigation import title_for
from sales_portal.ui.components.common.access_panels import create_denial_panel, create_loading_panel
from sales_portal.ui.components.common.appbar_factory import create_appbar
from sales_portal.ui.views.add_lead_view import AddLeadView
from sales_portal.ui.views.add_user_view import AddUserView
from sales_portal.ui.views.dashboard_view import DashboardView
from sales_portal.ui.views.first_run_setup_view import FirstRunSetupView
from sales_portal.ui.views.leads_view import LeadsView
from sales_portal.ui.views.login_view import LoginView
from sales_portal.ui.views.placeholder_view import PlaceholderView
from sales_portal.ui.views.reports_view import ReportsView
from sales_portal.ui.views.user_management_view import UserManagementView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteSpec:
    view_class: Any
    requirement: RouteRequirement = AUTHENTICATED_ONLY
    public: bool = False
    default_params: Dict[str, Any] = field(default_factory=dict)


ROUTES: Dict[str, RouteSpec] = {
    FIRST_RUN_SETUP_ROUTE: RouteSpec(FirstRunSetupView, public=True),
    LOGIN_ROUTE: RouteSpec(LoginView, public=True),
    DASHBOARD_ROUTE: RouteSpec(DashboardView),
    LEADS_ROUTE: RouteSpec(LeadsView, RouteRequirement.of(permissions=[PERM_LEADS_READ])),
    ADD_LEAD_ROUTE: RouteSpec(AddLeadView, RouteRequirement.of(permissions=[PERM_LEADS_READ, PERM_LEADS_CREATE])),
    ORDERS_ROUTE: RouteSpec(PlaceholderView, RouteRequirement.of(permissions=[PERM_ORDERS_READ]),
                            default_params={"route_path": ORDERS_ROUTE}),
    NEW_ORDER_ROUTE: RouteSpec(PlaceholderView, RouteRequirement.of(permissions=[PERM_ORDERS_READ]),
                               default_params={"route_path": NEW_ORDER_ROUTE}),
    USERS_ROUTE: RouteSpec(UserManagementView, RouteRequirement.of(role=Role.ADMIN)),
    ADD_USER_ROUTE: RouteSpec(AddUserView, RouteRequirement.of(role=Role.ADMIN)),
    REPORTS_ROUTE: RouteSpec(ReportsView, RouteRequirement.of(permissions=[PERM_REPORTS_READ])),
    SETTINGS_ROUTE: RouteSpec(PlaceholderView, default_params={"route_path": SETTINGS_ROUTE}),
}


class Router:
    """
    Swaps the page content between views. Protected routes go through the access
    guard on every navigation and again whenever the session changes, so signing
    out or losing a permission takes effect on the screen that is already open.
    """
    def __init__(self, page: ft.Page, session, routes: Optional[Dict[str, RouteSpec]] = None):
        self.page = page
        self.session = session
        self.routes = routes if routes is not None else ROUTES
        self.current_view_instance = None
        self.current_route_name: Optional[str] = None
        self.current_params: Dict[str, Any] = {}
        self.session.subscribe(self._on_session_changed)

    def _on_session_changed(self):
        spec = self.routes.get(self.current_route_name) if self.current_route_name else None
        if spec is None or spec.public:
            return
        logger.debug(f"Session changed; re-checking access for '{self.current_route_name}'.")
        self.navigate_to(self.current_route_name, **self.current_params)

    def _clear_page(self):
        self.page.controls.clear()
        self.page.appbar = None  # Views are responsible for their own AppBars
        self.page.banner = None

    def _render_guard_state(self, route_name: str, decision: AccessDecision):
        if decision.state is AccessState.LOADING:
            self.page.add(create_loading_panel("Checking your session..."))
            return
        self.page.appbar = create_appbar(
            page=self.page, router=self, session=self.session, title_text=title_for(route_name),
        )
        self.page.add(create_denial_panel(decision, self, self.session))

    def navigate_to(self, route_name: str, **params):
        spec = self.routes.get(route_name)
        if spec is None:
            logger.error(f"Route '{route_name}' not found. Falling back to dashboard.")
            route_name, params = DASHBOARD_ROUTE, {}
            spec = self.routes[DASHBOARD_ROUTE]

        if not spec.public:
            decision = evaluate_access(
                self.session.current_identity,
                spec.requirement,
                loading=self.session.is_loading,
                requested_path=route_name,
                login_route=LOGIN_ROUTE,
            )
            if decision.state is AccessState.UNAUTHENTICATED:
                logger.info(f"No session for '{route_name}'. Redirecting to login.")
                self.navigate_to(decision.redirect_to, return_to=decision.return_to)
                return
            if not decision.is_authorized:
                if decision.is_denied:
                    logger.warning(f"Access to '{route_name}' denied: {decision.state.value}.")
                self._clear_page()
                self.current_route_name = route_name
                self.current_params = dict(params)
                self._render_guard_state(route_name, decision)
                self.page.update()
                return

        self._clear_page()
        self.current_route_name = route_name
        self.current_params = dict(params)
        view_params = {**spec.default_params, **params}
        try:
            self.current_view_instance = spec.view_class(page=self.page, router=self, session=self.session, **view_params)
            self.page.add(self.current_view_instance)
        except Exception as e:
            logger.error(f"Error instantiating view for route '{route_name}': {e}", exc_info=True)
            self.page.controls.clear()
            self.page.add(ft.Text(f"Error loading page: {route_name}. Details: {e}", color=ft.Colors.RED))
            # Avoid looping if the login or setup view itself fails
            if route_name not in (LOGIN_ROUTE, FIRST_RUN_SETUP_ROUTE):
                self.navigate_to(LOGIN_ROUTE)
                return

        self.page.update()
