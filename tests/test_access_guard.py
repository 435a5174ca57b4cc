import pytest

from sales_portal.constants import (
    Role, ALL_PERMISSIONS, PERM_LEADS_READ, PERM_LEADS_CREATE, PERM_REPORTS_READ, LOGIN_ROUTE, USERS_ROUTE,
)
from sales_portal.core.access_guard import (
    AccessState, RouteRequirement, AUTHENTICATED_ONLY, evaluate_access,
    DEACTIVATED_MESSAGE, ROLE_DENIED_MESSAGE, PERMISSION_DENIED_MESSAGE,
)
from sales_portal.core.exceptions import (
    AccessDeniedError, AccountDeactivatedError, RoleDeniedError, PermissionDeniedError,
)
from tests.conftest import make_identity

LEAD_CREATION = RouteRequirement.of(permissions=[PERM_LEADS_READ, PERM_LEADS_CREATE])
ADMIN_ONLY = RouteRequirement.of(role=Role.ADMIN)


def test_loading_wins_over_everything():
    decision = evaluate_access(make_identity(is_active=False), ADMIN_ONLY, loading=True)
    assert decision.state is AccessState.LOADING
    assert not decision.is_authorized
    assert not decision.is_denied


def test_missing_identity_redirects_to_login_with_requested_path():
    decision = evaluate_access(None, AUTHENTICATED_ONLY, requested_path="/leads/add")
    assert decision.state is AccessState.UNAUTHENTICATED
    assert decision.redirect_to == LOGIN_ROUTE
    assert decision.return_to == "/leads/add"


@pytest.mark.parametrize("role", list(Role))
@pytest.mark.parametrize("requirement", [AUTHENTICATED_ONLY, ADMIN_ONLY, LEAD_CREATION])
def test_deactivated_identity_is_denied_regardless_of_role_and_permissions(role, requirement):
    identity = make_identity(role=role, permissions=ALL_PERMISSIONS, is_active=False)
    decision = evaluate_access(identity, requirement)
    assert decision.state is AccessState.DEACTIVATED
    assert decision.message == DEACTIVATED_MESSAGE


@pytest.mark.parametrize("role", [Role.DISTRIBUTOR, Role.RETAILER, Role.SALES])
def test_role_mismatch_denied_even_with_every_permission(role):
    identity = make_identity(role=role, permissions=ALL_PERMISSIONS)
    requirement = RouteRequirement.of(role=Role.ADMIN, permissions=ALL_PERMISSIONS)
    decision = evaluate_access(identity, requirement)
    assert decision.state is AccessState.ROLE_DENIED
    assert decision.message == ROLE_DENIED_MESSAGE


def test_sales_identity_without_permissions_requesting_admin_route():
    identity = make_identity(role=Role.SALES, permissions=[])
    decision = evaluate_access(identity, ADMIN_ONLY, requested_path=USERS_ROUTE)
    assert decision.state is AccessState.ROLE_DENIED


@pytest.mark.parametrize("missing", [PERM_LEADS_READ, PERM_LEADS_CREATE])
def test_missing_any_single_permission_is_denied(missing):
    held = [p for p in (PERM_LEADS_READ, PERM_LEADS_CREATE) if p != missing]
    decision = evaluate_access(make_identity(permissions=held), LEAD_CREATION)
    assert decision.state is AccessState.PERMISSION_DENIED
    assert decision.message == PERMISSION_DENIED_MESSAGE
    assert decision.missing_permissions == (missing,)


def test_exact_permission_set_is_authorized():
    decision = evaluate_access(make_identity(permissions=[PERM_LEADS_READ, PERM_LEADS_CREATE]), LEAD_CREATION)
    assert decision.state is AccessState.AUTHORIZED
    assert decision.is_authorized


def test_permission_superset_is_authorized():
    decision = evaluate_access(make_identity(permissions=ALL_PERMISSIONS), LEAD_CREATION)
    assert decision.is_authorized


def test_matching_role_without_permissions_is_authorized():
    decision = evaluate_access(make_identity(role=Role.ADMIN), ADMIN_ONLY)
    assert decision.is_authorized


def test_authenticated_only_accepts_any_active_identity():
    assert evaluate_access(make_identity(role=Role.RETAILER), AUTHENTICATED_ONLY).is_authorized


@pytest.mark.parametrize("identity, requirement, expected", [
    (make_identity(is_active=False), AUTHENTICATED_ONLY, AccountDeactivatedError),
    (make_identity(role=Role.SALES), ADMIN_ONLY, RoleDeniedError),
    (make_identity(), RouteRequirement.of(permissions=[PERM_REPORTS_READ]), PermissionDeniedError),
    (None, AUTHENTICATED_ONLY, AccessDeniedError),
])
def test_raise_for_denial_raises_matching_error(identity, requirement, expected):
    with pytest.raises(expected):
        evaluate_access(identity, requirement).raise_for_denial()


def test_raise_for_denial_is_silent_when_authorized():
    evaluate_access(make_identity(role=Role.ADMIN), ADMIN_ONLY).raise_for_denial()


def test_permission_error_carries_missing_permissions():
    with pytest.raises(PermissionDeniedError) as exc_info:
        evaluate_access(make_identity(), RouteRequirement.of(permissions=[PERM_REPORTS_READ])).raise_for_denial()
    assert exc_info.value.missing_permissions == (PERM_REPORTS_READ,)
