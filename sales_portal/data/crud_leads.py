import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from sales_portal.constants import LEAD_STATUS_CONVERTED
from sales_portal.core.models import Lead, Visit
from sales_portal.core.exceptions import FetchError, WriteError, LeadNotFoundError


def get_lead_by_id(db: Session, lead_id: int) -> Optional[Lead]:
    try:
        return db.query(Lead).filter(Lead.id == lead_id).first()
    except SQLAlchemyError as e:
        raise FetchError(f"Could not load lead {lead_id}: {e}")


def get_leads(db: Session, sales_staff_id: Optional[str] = None) -> List[Lead]:
    """Newest first. Restricted to one owner when `sales_staff_id` is given."""
    try:
        query = db.query(Lead)
        if sales_staff_id is not None:
            query = query.filter(Lead.sales_staff_id == sales_staff_id)
        return query.order_by(Lead.created_at.desc(), Lead.id.desc()).all()
    except SQLAlchemyError as e:
        raise FetchError(f"Could not load leads: {e}")


def create_lead(db: Session, lead_fields: Dict[str, Any]) -> Lead:
    """Inserts a lead from already validated fields and returns it."""
    try:
        lead = Lead(**lead_fields)
        db.add(lead)
        db.commit()
        db.refresh(lead)
        return lead
    except IntegrityError as e:
        db.rollback()
        raise WriteError(f"Database threw an IntegrityError when adding new lead: {e.orig}")
    except Exception as e:
        db.rollback()
        raise WriteError(f"Could not create lead '{lead_fields.get('optician_name')}': An unexpected error occurred: {e}")


def update_lead_status(db: Session, lead_id: int, status: str, updated_by: str) -> Lead:
    lead = get_lead_by_id(db, lead_id)
    if not lead:
        raise LeadNotFoundError(f"Lead with ID {lead_id} not found.")
    try:
        lead.status = status
        lead.updated_by = updated_by
        if status == LEAD_STATUS_CONVERTED and lead.conversion_date is None:
            lead.conversion_date = datetime.datetime.now()
        db.commit()
        db.refresh(lead)
        return lead
    except Exception as e:
        db.rollback()
        raise WriteError(f"Could not update status of lead {lead_id}: {e}")


def add_visit(db: Session, lead: Lead, visit_fields: Dict[str, Any], lead_updates: Dict[str, Any]) -> Visit:
    """Stores a visit and applies the matching lead progress fields in one commit."""
    try:
        visit = Visit(lead_id=lead.id, **visit_fields)
        db.add(visit)
        for attr, value in lead_updates.items():
            setattr(lead, attr, value)
        db.commit()
        db.refresh(visit)
        db.refresh(lead)
        return visit
    except Exception as e:
        db.rollback()
        raise WriteError(f"Could not record visit for lead {lead.id}: {e}")
