import datetime
import logging
from typing import Any, Callable, Dict, List, Optional
import flet as ft

from sales_portal.constants import (
    ALL_LEAD_STATUSES, LEAD_STATUS_FILTER_ALL, PERM_LEADS_UPDATE,
    VISIT_INTEREST_LEVELS, VISIT_NEXT_ACTIONS,
)
from sales_portal.core.exceptions import AppException
from sales_portal.core.lead_filters import filter_leads, empty_state_message
from sales_portal.core.models import Lead
from sales_portal.data.database import get_db_session
from sales_portal.services.lead_service import LeadService
from sales_portal.ui.components.common.dialog_factory import create_form_dialog
from sales_portal.ui.components.common.paginated_data_table import PaginatedDataTable
from sales_portal.utils.helpers import format_date_for_display

logger = logging.getLogger("sales_portal")

STATUS_COLORS = {
    "new": ft.Colors.BLUE_700,
    "contacted": ft.Colors.AMBER_800,
    "visited": ft.Colors.PURPLE_700,
    "qualified": ft.Colors.GREEN_700,
    "converted": ft.Colors.TEAL_700,
    "rejected": ft.Colors.RED_700,
    "inactive": ft.Colors.GREY_700,
}
PRIORITY_COLORS = {
    "low": ft.Colors.GREY_600,
    "medium": ft.Colors.ORANGE_700,
    "high": ft.Colors.RED_700,
}


def _chip(text: str, color: str) -> ft.Container:
    return ft.Container(
        content=ft.Text(text.upper(), size=11, color=color, weight=ft.FontWeight.BOLD),
        bgcolor=ft.Colors.with_opacity(0.12, color),
        border_radius=10,
        padding=ft.padding.symmetric(horizontal=8, vertical=2),
    )


class LeadsTable(PaginatedDataTable[Lead]):
    def __init__(self, page: ft.Page, session, lead_service: LeadService,
                 on_leads_loaded: Optional[Callable[[List[Lead]], None]] = None):
        self.session = session
        self.lead_service = lead_service
        self.search_term = ""
        self.status_filter = LEAD_STATUS_FILTER_ALL

        column_definitions: List[Dict[str, Any]] = [
            {"key": "optician_name", "label": "Optician", "sortable": True},
            {"key": "contact_person_name", "label": "Contact", "sortable": True},
            {"key": "phone_number", "label": "Phone"},
            {"key": "status", "label": "Status", "sortable": True,
             "display_formatter": lambda val: _chip(val or "", STATUS_COLORS.get(val, ft.Colors.GREY_700))},
            {"key": "priority", "label": "Priority", "sortable": True,
             "display_formatter": lambda val: _chip(val or "", PRIORITY_COLORS.get(val, ft.Colors.GREY_600))},
            {"key": "total_visits", "label": "Visits", "sortable": True, "numeric": True},
            {"key": "created_at", "label": "Added", "sortable": True,
             "display_formatter": lambda val: ft.Text(format_date_for_display(val))},
        ]

        super().__init__(
            page=page,
            fetch_all_data_func=self._fetch_leads,
            column_definitions=column_definitions,
            action_cell_builder=self._build_action_cell if session.has_permission(PERM_LEADS_UPDATE) else None,
            filter_func=self._filter,
            on_data_changed=on_leads_loaded,
            no_data_message=empty_state_message,
            rows_per_page=10,
        )

    def _fetch_leads(self, db) -> List[Lead]:
        return self.lead_service.get_leads_for_identity(db, self.session.current_identity)

    def _filter(self, leads: List[Lead]) -> List[Lead]:
        return filter_leads(leads, self.search_term, self.status_filter)

    def set_filters(self, search_term: Optional[str] = None, status: Optional[str] = None):
        if search_term is not None:
            self.search_term = search_term
        if status is not None:
            self.status_filter = status
        self._current_page_number = 1
        self.apply_filters()

    def _build_action_cell(self, lead: Lead, table_instance: PaginatedDataTable) -> ft.DataCell:
        status_menu = ft.PopupMenuButton(
            icon=ft.Icons.SWAP_HORIZ_ROUNDED,
            tooltip="Change status",
            items=[
                ft.PopupMenuItem(text=status.capitalize(), on_click=lambda e, s=status, l=lead: self._change_status(l, s))
                for status in ALL_LEAD_STATUSES if status != lead.status
            ],
        )
        visit_button = ft.IconButton(
            icon=ft.Icons.EVENT_AVAILABLE_ROUNDED, tooltip="Record visit", icon_color=ft.Colors.PRIMARY,
            on_click=lambda e, l=lead: self._open_record_visit_dialog(l),
        )
        return ft.DataCell(ft.Row([visit_button, status_menu], spacing=0, alignment=ft.MainAxisAlignment.END))

    def _change_status(self, lead: Lead, status: str):
        try:
            with get_db_session() as db:
                self.lead_service.update_lead_status(db, self.session.current_identity, lead.id, status)
            self.close_dialog_and_refresh(success_message=f"'{lead.optician_name}' marked as {status}.")
        except AppException as ex:
            self.show_error_snackbar(ex.message)
        except Exception as ex_general:
            logger.error(f"Unexpected error updating lead {lead.id}: {ex_general}", exc_info=True)
            self.show_error_snackbar(f"An unexpected error: {ex_general}")

    def _open_record_visit_dialog(self, lead: Lead):
        notes_field = ft.TextField(label="Visit Notes", multiline=True, min_lines=2, max_lines=4, border_radius=8)
        interest_dropdown = ft.Dropdown(
            label="Interest Level", value="medium", border_radius=8,
            options=[ft.dropdown.Option(level, level.capitalize()) for level in VISIT_INTEREST_LEVELS],
        )
        next_action_dropdown = ft.Dropdown(
            label="Next Action", value="follow_up", border_radius=8,
            options=[ft.dropdown.Option(key, label) for key, label in VISIT_NEXT_ACTIONS.items()],
        )
        follow_up_days_field = ft.TextField(
            label="Follow up in (days)", value="7", border_radius=8, input_filter=ft.NumbersOnlyInputFilter(),
        )
        error_text = ft.Text(visible=False, color=ft.Colors.RED_700)
        form_column = ft.Column(
            [notes_field, interest_dropdown, next_action_dropdown, follow_up_days_field, error_text],
            tight=True, spacing=15,
        )
        dialog: Optional[ft.AlertDialog] = None

        def _save_visit_handler(e):
            error_text.visible = False
            visit_date = datetime.datetime.now()
            days = int(follow_up_days_field.value) if follow_up_days_field.value else None
            visit_data = {
                "visit_date": visit_date,
                "notes": notes_field.value,
                "interest_level": interest_dropdown.value,
                "next_action": next_action_dropdown.value,
                "next_action_date": visit_date + datetime.timedelta(days=days) if days is not None else None,
            }
            try:
                with get_db_session() as db:
                    self.lead_service.record_visit(db, self.session.current_identity, lead.id, visit_data)
                self.close_dialog_and_refresh(dialog, f"Visit recorded for '{lead.optician_name}'.")
            except AppException as ex:
                error_text.value = ex.message
                error_text.visible = True
                if self.page: self.page.update()

        dialog = create_form_dialog(
            page=self.page,
            title_text=f"Record Visit: {lead.optician_name}",
            form_content_column=form_column,
            on_save_callback=_save_visit_handler,
            on_cancel_callback=lambda e: self.page.close(dialog),
            save_button_text="Save Visit",
        )
        self.page.open(dialog)
