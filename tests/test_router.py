import flet as ft
import pytest

from sales_portal.constants import (
    Role, LOGIN_ROUTE, DASHBOARD_ROUTE, LEADS_ROUTE, USERS_ROUTE, PERM_LEADS_READ,
)
from sales_portal.core.access_guard import RouteRequirement, DEACTIVATED_MESSAGE, ROLE_DENIED_MESSAGE
from sales_portal.services.session_manager import SessionManager
from sales_portal.services.session_storage import MemorySessionStorage
from sales_portal.ui.components.common.appbar_factory import create_appbar
from sales_portal.ui.router import Router, RouteSpec
from tests.conftest import make_identity


class StubPage:
    def __init__(self):
        self.controls = []
        self.appbar = None
        self.banner = None
        self.overlay = []
        self.opened = []

    def add(self, *controls):
        self.controls.extend(controls)

    def update(self):
        pass

    def open(self, control):
        self.opened.append(control)

    def close(self, control):
        pass


class RecordingView:
    route = None
    built = None

    def __init__(self, page, router, session, **params):
        self.built.append((self.route, params))


def _texts(control):
    """Every Text value under a control tree."""
    found = []
    if isinstance(control, ft.Text):
        found.append(control.value)
    for child in [getattr(control, "content", None)] + list(getattr(control, "controls", None) or []):
        if isinstance(child, ft.Control):
            found.extend(_texts(child))
    return found


@pytest.fixture
def built():
    return []


@pytest.fixture
def routes(built):
    def view_for(route):
        return type("View", (RecordingView,), {"route": route, "built": built})

    return {
        LOGIN_ROUTE: RouteSpec(view_for(LOGIN_ROUTE), public=True),
        DASHBOARD_ROUTE: RouteSpec(view_for(DASHBOARD_ROUTE)),
        LEADS_ROUTE: RouteSpec(view_for(LEADS_ROUTE), RouteRequirement.of(permissions=[PERM_LEADS_READ])),
        USERS_ROUTE: RouteSpec(view_for(USERS_ROUTE), RouteRequirement.of(role=Role.ADMIN)),
    }


@pytest.fixture
def page():
    return StubPage()


@pytest.fixture
def sales_rep():
    return make_identity(role=Role.SALES, permissions=[PERM_LEADS_READ], login_id="sales001")


@pytest.fixture
def session(sales_rep):
    return SessionManager(MemorySessionStorage(), verifier=lambda login_id, password: sales_rep)


@pytest.fixture
def router(page, session, routes):
    return Router(page, session, routes=routes)


def test_signed_out_user_is_sent_to_login_with_return_path(router, built):
    router.navigate_to(LEADS_ROUTE)
    assert built == [(LOGIN_ROUTE, {"return_to": LEADS_ROUTE})]
    assert router.current_route_name == LOGIN_ROUTE


def test_authorized_route_builds_its_view(router, session, built):
    session.sign_in("sales001", "pw")
    router.navigate_to(LEADS_ROUTE)
    assert built == [(LEADS_ROUTE, {})]
    assert router.current_route_name == LEADS_ROUTE


def test_unknown_route_falls_back_to_dashboard(router, session, built):
    session.sign_in("sales001", "pw")
    router.navigate_to("/nowhere")
    assert built == [(DASHBOARD_ROUTE, {})]


def test_denied_route_renders_panel_and_never_builds_view(router, session, page, built):
    session.sign_in("sales001", "pw")
    router.navigate_to(USERS_ROUTE)
    assert built == []
    assert router.current_route_name == USERS_ROUTE
    assert page.appbar is not None
    assert ROLE_DENIED_MESSAGE in _texts(page.controls[-1])


def test_appbar_logout_returns_to_login_once_keeping_the_page(router, session, page, built):
    session.sign_in("sales001", "pw")
    router.navigate_to(LEADS_ROUTE)
    built.clear()

    appbar = create_appbar(page=page, router=router, session=session, title_text="Leads")
    logout_button = next(a for a in appbar.actions if isinstance(a, ft.IconButton) and a.tooltip == "Logout")
    logout_button.on_click(None)

    assert session.current_identity is None
    assert built == [(LOGIN_ROUTE, {"return_to": LEADS_ROUTE})]


def test_appbar_logout_with_no_open_route_shows_login(page, routes, built, sales_rep):
    session = SessionManager(MemorySessionStorage(sales_rep.to_dict()))
    session.restore()
    router = Router(page, session, routes=routes)

    appbar = create_appbar(page=page, router=router, session=session, title_text="Login")
    logout_button = next(a for a in appbar.actions if isinstance(a, ft.IconButton) and a.tooltip == "Logout")
    logout_button.on_click(None)

    assert built == [(LOGIN_ROUTE, {})]


def test_sign_out_re_checks_open_route(router, session, built):
    session.sign_in("sales001", "pw")
    router.navigate_to(LEADS_ROUTE)
    built.clear()

    session.sign_out()

    assert built == [(LOGIN_ROUTE, {"return_to": LEADS_ROUTE})]


def test_deactivation_replaces_open_view_with_denial(router, session, page, built):
    session.sign_in("sales001", "pw")
    router.navigate_to(LEADS_ROUTE)
    built.clear()

    deactivated = make_identity(role=Role.SALES, permissions=[PERM_LEADS_READ], login_id="sales001", is_active=False)
    session.refresh(loader=lambda login_id: deactivated)

    assert built == []
    assert router.current_route_name == LEADS_ROUTE
    assert not any(isinstance(c, RecordingView) for c in page.controls)
    assert DEACTIVATED_MESSAGE in _texts(page.controls[-1])


def test_loading_state_shows_panel_then_view_after_sign_in(page, routes, built, sales_rep):
    seen_while_loading = []
    holder = {}

    def slow_verifier(login_id, password):
        holder["router"].navigate_to(LEADS_ROUTE)
        seen_while_loading.extend(page.controls)
        return sales_rep

    session = SessionManager(MemorySessionStorage(), verifier=slow_verifier)
    holder["router"] = Router(page, session, routes=routes)

    session.sign_in("sales001", "pw")

    assert len(seen_while_loading) == 1
    assert isinstance(seen_while_loading[0].content.controls[0], ft.ProgressRing)
    assert built == [(LEADS_ROUTE, {})]


def test_public_route_is_not_re_checked_on_session_change(router, session, built):
    router.navigate_to(LOGIN_ROUTE)
    built.clear()
    session.sign_in("sales001", "pw")
    assert built == []
