import datetime
import logging
import re
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from sales_portal.constants import (
    Role, PERM_LEADS_CREATE, PERM_LEADS_READ, PERM_LEADS_UPDATE,
    ALL_LEAD_STATUSES, LEAD_STATUS_NEW, LEAD_STATUS_CONTACTED, LEAD_STATUS_VISITED,
    LEAD_PRIORITIES, DEFAULT_LEAD_PRIORITY, LEAD_BUSINESS_TYPES, LEAD_SOURCES, WEEK_DAYS,
    VISIT_INTEREST_LEVELS, VISIT_NEXT_ACTIONS,
)
from sales_portal.core.access_guard import RouteRequirement, evaluate_access
from sales_portal.core.exceptions import ValidationError, LeadNotFoundError, RoleDeniedError
from sales_portal.core.identity import Identity
from sales_portal.core.models import Lead, Visit
from sales_portal.data import crud_leads

logger = logging.getLogger("sales_portal")

REQUIRED_LEAD_FIELDS = {
    "optician_name": "Optician name",
    "contact_person_name": "Contact person",
    "phone_number": "Phone number",
    "email": "Email address",
    "address": "Address",
    "gst_number": "GST number",
    "week_off": "Week off day",
}

EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
# Digits with optional leading +, spaces and hyphens; 7 to 15 digits in total.
PHONE_REGEX = re.compile(r"^\+?[0-9][0-9 \-]{5,18}[0-9]$")
MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15

# Statuses a visit moves forward to "visited"
PRE_VISIT_STATUSES = (LEAD_STATUS_NEW, LEAD_STATUS_CONTACTED)


class LeadService:
    def _require(self, identity: Optional[Identity], *permissions: str):
        evaluate_access(identity, RouteRequirement.of(permissions=permissions)).raise_for_denial()

    def _is_visible_to(self, lead: Lead, identity: Identity) -> bool:
        return identity.role == Role.ADMIN or lead.sales_staff_id == identity.login_id

    def get_leads_for_identity(self, db: Session, identity: Identity) -> List[Lead]:
        """
        Leads the identity may see, newest first. Sales staff get their own
        leads, administrators get every lead, all other roles get none.

        Raises:
            FetchError: If the store query fails.
        """
        if identity.role == Role.SALES:
            return crud_leads.get_leads(db, sales_staff_id=identity.login_id)
        if identity.role == Role.ADMIN:
            return crud_leads.get_leads(db)
        return []

    def get_lead(self, db: Session, identity: Identity, lead_id: int) -> Lead:
        lead = crud_leads.get_lead_by_id(db, lead_id)
        if not lead or not self._is_visible_to(lead, identity):
            raise LeadNotFoundError(f"Lead with ID {lead_id} not found.")
        return lead

    def _clean_text(self, lead_data: Dict[str, Any], key: str) -> str:
        value = lead_data.get(key)
        return str(value).strip() if value is not None else ""

    def _validate_lead_data(self, lead_data: Dict[str, Any]) -> Dict[str, Any]:
        cleaned: Dict[str, Any] = {}
        for key, label in REQUIRED_LEAD_FIELDS.items():
            value = self._clean_text(lead_data, key)
            if not value:
                raise ValidationError(f"{label} is required.")
            cleaned[key] = value

        if not EMAIL_REGEX.match(cleaned["email"]):
            raise ValidationError(f"'{cleaned['email']}' is not a valid email address.")

        digits = re.sub(r"\D", "", cleaned["phone_number"])
        if not PHONE_REGEX.match(cleaned["phone_number"]) or not (MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS):
            raise ValidationError(f"'{cleaned['phone_number']}' is not a valid phone number.")

        cleaned["week_off"] = cleaned["week_off"].lower()
        if cleaned["week_off"] not in WEEK_DAYS:
            raise ValidationError(f"Invalid week off day: '{cleaned['week_off']}'.")

        business_type = self._clean_text(lead_data, "business_type") or "independent"
        if business_type not in LEAD_BUSINESS_TYPES:
            raise ValidationError(f"Invalid business type: '{business_type}'.")
        cleaned["business_type"] = business_type

        source = self._clean_text(lead_data, "source") or "cold_call"
        if source not in LEAD_SOURCES:
            raise ValidationError(f"Invalid lead source: '{source}'.")
        cleaned["source"] = source

        priority = self._clean_text(lead_data, "priority") or DEFAULT_LEAD_PRIORITY
        if priority not in LEAD_PRIORITIES:
            raise ValidationError(f"Invalid priority: '{priority}'.")
        cleaned["priority"] = priority

        monthly_volume = lead_data.get("monthly_volume")
        if monthly_volume in (None, ""):
            cleaned["monthly_volume"] = None
        else:
            try:
                cleaned["monthly_volume"] = int(monthly_volume)
            except (TypeError, ValueError):
                raise ValidationError("Monthly volume must be a whole number.")
            if cleaned["monthly_volume"] < 0:
                raise ValidationError("Monthly volume cannot be negative.")

        suppliers = lead_data.get("current_suppliers") or []
        if isinstance(suppliers, str):
            suppliers = suppliers.split(",")
        cleaned["current_suppliers"] = [s.strip() for s in suppliers if s and s.strip()]

        tags = lead_data.get("tags") or []
        cleaned["tags"] = [t.strip() for t in tags if t and t.strip()]
        cleaned["notes"] = self._clean_text(lead_data, "notes") or None
        return cleaned

    def create_lead(self, db: Session, identity: Identity, lead_data: Dict[str, Any]) -> Lead:
        """
        Validates and stores a new lead owned by `identity`.

        Raises:
            AccessDeniedError: If the identity may not create leads.
            ValidationError: For missing or malformed fields.
            WriteError: If the store rejects the insert.
        """
        self._require(identity, PERM_LEADS_READ, PERM_LEADS_CREATE)
        fields = self._validate_lead_data(lead_data)
        fields.update(
            status=LEAD_STATUS_NEW,
            sales_staff_id=identity.login_id,
            sales_staff_name=identity.display_name,
            territory_id=identity.territory_id,
            total_visits=0,
            created_by=identity.login_id,
            updated_by=identity.login_id,
        )
        lead = crud_leads.create_lead(db, fields)
        logger.info(f"Lead '{lead.optician_name}' (ID: {lead.id}) created by '{identity.login_id}'.")
        return lead

    def update_lead_status(self, db: Session, identity: Identity, lead_id: int, status: str) -> Lead:
        self._require(identity, PERM_LEADS_UPDATE)
        if status not in ALL_LEAD_STATUSES:
            raise ValidationError(f"Invalid lead status: '{status}'.")
        lead = crud_leads.get_lead_by_id(db, lead_id)
        if not lead:
            raise LeadNotFoundError(f"Lead with ID {lead_id} not found.")
        if not self._is_visible_to(lead, identity):
            raise RoleDeniedError("Only the owning sales staff or an administrator can update this lead.")
        logger.info(f"Lead {lead_id} status '{lead.status}' -> '{status}' by '{identity.login_id}'.")
        return crud_leads.update_lead_status(db, lead_id, status, identity.login_id)

    def record_visit(self, db: Session, identity: Identity, lead_id: int, visit_data: Dict[str, Any]) -> Visit:
        """
        Stores a visit and advances the lead: visit count and dates are updated
        and a new or contacted lead becomes visited.
        """
        self._require(identity, PERM_LEADS_UPDATE)
        lead = self.get_lead(db, identity, lead_id)

        interest_level = visit_data.get("interest_level") or "medium"
        if interest_level not in VISIT_INTEREST_LEVELS:
            raise ValidationError(f"Invalid interest level: '{interest_level}'.")
        next_action = visit_data.get("next_action") or "follow_up"
        if next_action not in VISIT_NEXT_ACTIONS:
            raise ValidationError(f"Invalid next action: '{next_action}'.")
        visit_date = visit_data.get("visit_date") or datetime.datetime.now()
        next_action_date = visit_data.get("next_action_date")
        if next_action_date is not None and next_action_date < visit_date:
            raise ValidationError("Next action date cannot be before the visit date.")

        visit_fields = {
            "visit_date": visit_date,
            "notes": (visit_data.get("notes") or "").strip(),
            "interest_level": interest_level,
            "next_action": next_action,
            "next_action_date": next_action_date,
            "sales_staff_id": identity.login_id,
            "sales_staff_name": identity.display_name,
        }
        lead_updates = {
            "total_visits": (lead.total_visits or 0) + 1,
            "last_visit_date": visit_date,
            "next_follow_up_date": next_action_date,
            "updated_by": identity.login_id,
        }
        if lead.status in PRE_VISIT_STATUSES:
            lead_updates["status"] = LEAD_STATUS_VISITED

        visit = crud_leads.add_visit(db, lead, visit_fields, lead_updates)
        logger.info(f"Visit recorded for lead {lead.id} by '{identity.login_id}'.")
        return visit
