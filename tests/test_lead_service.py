import datetime

import pytest

from sales_portal.constants import Role, PERM_LEADS_READ
from sales_portal.core.exceptions import (
    ValidationError, PermissionDeniedError, RoleDeniedError, LeadNotFoundError, AccountDeactivatedError,
)
from sales_portal.core.lead_filters import filter_leads
from sales_portal.services.lead_service import LeadService
from tests.conftest import make_identity


@pytest.fixture
def lead_service():
    return LeadService()


@pytest.fixture
def sales_lead(db_session, lead_service, sales_identity, valid_lead_data):
    return lead_service.create_lead(db_session, sales_identity, valid_lead_data)


def test_create_lead_stamps_owner_and_defaults(sales_lead, sales_identity):
    assert sales_lead.id is not None
    assert sales_lead.status == "new"
    assert sales_lead.sales_staff_id == sales_identity.login_id
    assert sales_lead.sales_staff_name == "Sam Sales"
    assert sales_lead.created_by == sales_identity.login_id
    assert sales_lead.total_visits == 0
    assert sales_lead.week_off == "sunday"
    assert sales_lead.monthly_volume == 120
    assert sales_lead.current_suppliers == ["Essilor", "Zeiss"]


def test_optional_fields_fall_back_to_defaults(db_session, lead_service, sales_identity, valid_lead_data):
    for key in ("business_type", "source", "priority", "monthly_volume", "current_suppliers", "notes"):
        valid_lead_data.pop(key)
    lead = lead_service.create_lead(db_session, sales_identity, valid_lead_data)
    assert (lead.business_type, lead.source, lead.priority) == ("independent", "cold_call", "medium")
    assert lead.monthly_volume is None
    assert lead.notes is None


@pytest.mark.parametrize("field, value", [
    ("optician_name", "  "),
    ("gst_number", None),
    ("email", "rajesh-at-clearvision"),
    ("phone_number", "12345"),
    ("phone_number", "call me"),
    ("week_off", "funday"),
    ("priority", "urgent"),
    ("source", "billboard"),
    ("business_type", "kiosk"),
    ("monthly_volume", "lots"),
    ("monthly_volume", -5),
])
def test_create_lead_validation(db_session, lead_service, sales_identity, valid_lead_data, field, value):
    valid_lead_data[field] = value
    with pytest.raises(ValidationError):
        lead_service.create_lead(db_session, sales_identity, valid_lead_data)


def test_create_lead_requires_create_permission(db_session, lead_service, valid_lead_data):
    identity = make_identity(role=Role.SALES, permissions=[PERM_LEADS_READ])
    with pytest.raises(PermissionDeniedError):
        lead_service.create_lead(db_session, identity, valid_lead_data)


def test_deactivated_identity_cannot_create(db_session, lead_service, valid_lead_data):
    identity = make_identity(permissions=["leads:read", "leads:create"], is_active=False)
    with pytest.raises(AccountDeactivatedError):
        lead_service.create_lead(db_session, identity, valid_lead_data)


def test_new_lead_appears_in_refetched_list(db_session, lead_service, sales_identity, valid_lead_data):
    assert lead_service.get_leads_for_identity(db_session, sales_identity) == []
    lead = lead_service.create_lead(db_session, sales_identity, valid_lead_data)
    leads = lead_service.get_leads_for_identity(db_session, sales_identity)
    assert [l.id for l in leads] == [lead.id]


def test_visibility_by_role(db_session, lead_service, sales_lead, sales_identity, other_sales_identity,
                            admin_identity, distributor_identity, valid_lead_data):
    valid_lead_data["optician_name"] = "Other Rep Optics"
    other_lead = lead_service.create_lead(db_session, other_sales_identity, valid_lead_data)

    assert [l.id for l in lead_service.get_leads_for_identity(db_session, sales_identity)] == [sales_lead.id]
    assert {l.id for l in lead_service.get_leads_for_identity(db_session, admin_identity)} == {sales_lead.id, other_lead.id}
    assert lead_service.get_leads_for_identity(db_session, distributor_identity) == []


def test_leads_are_newest_first(db_session, lead_service, sales_identity, valid_lead_data):
    first = lead_service.create_lead(db_session, sales_identity, valid_lead_data)
    valid_lead_data["optician_name"] = "Second Sight"
    second = lead_service.create_lead(db_session, sales_identity, valid_lead_data)
    leads = lead_service.get_leads_for_identity(db_session, sales_identity)
    assert [l.id for l in leads] == [second.id, first.id]


def test_filtering_fetched_leads(db_session, lead_service, sales_lead, sales_identity):
    leads = lead_service.get_leads_for_identity(db_session, sales_identity)
    assert filter_leads(leads, "clear", "new") == leads
    assert filter_leads(leads, "clear", "converted") == []


def test_get_lead_hides_other_owners_leads(db_session, lead_service, sales_lead, other_sales_identity, admin_identity):
    with pytest.raises(LeadNotFoundError):
        lead_service.get_lead(db_session, other_sales_identity, sales_lead.id)
    assert lead_service.get_lead(db_session, admin_identity, sales_lead.id).id == sales_lead.id


def test_update_status(db_session, lead_service, sales_lead, sales_identity):
    lead = lead_service.update_lead_status(db_session, sales_identity, sales_lead.id, "converted")
    assert lead.status == "converted"
    assert lead.conversion_date is not None


def test_update_status_rejects_unknown_status(db_session, lead_service, sales_lead, sales_identity):
    with pytest.raises(ValidationError):
        lead_service.update_lead_status(db_session, sales_identity, sales_lead.id, "won")


def test_update_status_by_other_sales_staff_denied(db_session, lead_service, sales_lead, other_sales_identity):
    with pytest.raises(RoleDeniedError):
        lead_service.update_lead_status(db_session, other_sales_identity, sales_lead.id, "qualified")


def test_update_status_unknown_lead(db_session, lead_service, admin_identity):
    with pytest.raises(LeadNotFoundError):
        lead_service.update_lead_status(db_session, admin_identity, 404, "qualified")


def test_record_visit_advances_lead(db_session, lead_service, sales_lead, sales_identity):
    visit_date = datetime.datetime(2024, 6, 3, 11, 0)
    follow_up = visit_date + datetime.timedelta(days=7)
    visit = lead_service.record_visit(db_session, sales_identity, sales_lead.id, {
        "visit_date": visit_date, "notes": " Demo done ", "interest_level": "high",
        "next_action": "proposal", "next_action_date": follow_up,
    })
    lead = lead_service.get_lead(db_session, sales_identity, sales_lead.id)
    assert visit.notes == "Demo done"
    assert visit.sales_staff_id == sales_identity.login_id
    assert lead.status == "visited"
    assert lead.total_visits == 1
    assert lead.last_visit_date == visit_date
    assert lead.next_follow_up_date == follow_up


def test_visit_keeps_later_status(db_session, lead_service, sales_lead, sales_identity):
    lead_service.update_lead_status(db_session, sales_identity, sales_lead.id, "qualified")
    lead_service.record_visit(db_session, sales_identity, sales_lead.id, {})
    assert lead_service.get_lead(db_session, sales_identity, sales_lead.id).status == "qualified"


@pytest.mark.parametrize("visit_data", [
    {"interest_level": "extreme"},
    {"next_action": "party"},
    {"visit_date": datetime.datetime(2024, 6, 3), "next_action_date": datetime.datetime(2024, 6, 1)},
])
def test_record_visit_validation(db_session, lead_service, sales_lead, sales_identity, visit_data):
    with pytest.raises(ValidationError):
        lead_service.record_visit(db_session, sales_identity, sales_lead.id, visit_data)
