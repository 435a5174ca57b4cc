import datetime

import pytest

from sales_portal.constants import Role, PERM_LEADS_READ
from sales_portal.core.exceptions import SessionDataError
from sales_portal.core.identity import Identity


def _identity():
    return Identity(
        login_id="sales001", display_name="Sam Sales", email="sam@example.com", role=Role.SALES,
        permissions=frozenset([PERM_LEADS_READ]), user_id=7, territory_id="south",
        last_login=datetime.datetime(2024, 5, 1, 9, 30),
    )


def test_to_dict_and_back():
    identity = _identity()
    assert Identity.from_dict(identity.to_dict()) == identity


def test_identity_from_user(sales_user):
    identity = Identity.from_user(sales_user)
    assert identity.login_id == "sales001"
    assert identity.role is Role.SALES
    assert identity.has_permission(PERM_LEADS_READ)
    assert identity.role_display_name == "Sales Staff"
    assert identity.user_id == sales_user.id


@pytest.mark.parametrize("data", [
    "not a mapping",
    {"login_id": "x"},
    {**_identity().to_dict(), "role": "superuser"},
    {**_identity().to_dict(), "permissions": "leads:read"},
    {**_identity().to_dict(), "is_active": "yes"},
    {**_identity().to_dict(), "login_id": ""},
    {**_identity().to_dict(), "last_login": "yesterday"},
    {**_identity().to_dict(), "user_id": "7"},
])
def test_malformed_session_records_are_rejected(data):
    with pytest.raises(SessionDataError):
        Identity.from_dict(data)
