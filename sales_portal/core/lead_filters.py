"""
Client-side refinement of an already authorized lead list.

Works on `Lead` model instances or plain dicts with the same keys.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, TypeVar

from sales_portal.constants import (
    ALL_LEAD_STATUSES, LEAD_STATUS_FILTER_ALL,
    LEAD_STATUS_NEW, LEAD_STATUS_QUALIFIED, LEAD_STATUS_CONVERTED,
)

L = TypeVar("L")

SEARCHABLE_FIELDS = ("optician_name", "contact_person_name", "phone_number")

NO_LEADS_MESSAGE = "No leads found. Add your first lead to get started."
NO_MATCHES_MESSAGE = "No leads match your filters."


def _field(lead: Any, name: str) -> Any:
    if isinstance(lead, dict):
        return lead.get(name)
    return getattr(lead, name, None)


def matches_search(lead: Any, search_term: str) -> bool:
    term = (search_term or "").lower()
    if not term:
        return True
    for name in SEARCHABLE_FIELDS:
        value = _field(lead, name)
        if value and term in str(value).lower():
            return True
    return False


def matches_status(lead: Any, status: Optional[str]) -> bool:
    if status == LEAD_STATUS_FILTER_ALL:
        return True
    return _field(lead, "status") == status


def filter_leads(leads: Sequence[L], search_term: str = "", status: Optional[str] = LEAD_STATUS_FILTER_ALL) -> List[L]:
    """Both predicates must hold. Input order is preserved."""
    return [lead for lead in leads if matches_search(lead, search_term) and matches_status(lead, status)]


def empty_state_message(total_leads: int) -> str:
    """Message for an empty list: nothing stored at all versus nothing left after filtering."""
    if total_leads == 0:
        return NO_LEADS_MESSAGE
    return NO_MATCHES_MESSAGE


@dataclass(frozen=True)
class LeadStats:
    total: int
    new: int
    qualified: int
    converted: int
    by_status: Dict[str, int] = field(default_factory=dict)


def compute_lead_stats(leads: Sequence[Any]) -> LeadStats:
    by_status = {status: 0 for status in ALL_LEAD_STATUSES}
    for lead in leads:
        status = _field(lead, "status")
        if status in by_status:
            by_status[status] += 1
    return LeadStats(
        total=len(leads),
        new=by_status[LEAD_STATUS_NEW],
        qualified=by_status[LEAD_STATUS_QUALIFIED],
        converted=by_status[LEAD_STATUS_CONVERTED],
        by_status=by_status,
    )
