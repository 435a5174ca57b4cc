import logging
from typing import Callable, List, Optional

import flet as ft

from sales_portal.constants import (
    LEAD_BUSINESS_TYPES, LEAD_SOURCES, LEAD_PRIORITIES, DEFAULT_LEAD_PRIORITY, WEEK_DAYS,
)
from sales_portal.core.exceptions import AppException, DuplicateSubmissionError
from sales_portal.core.in_flight import InFlightGuard
from sales_portal.core.models import Lead
from sales_portal.data.database import get_db_session
from sales_portal.services.lead_service import LeadService

logger = logging.getLogger("sales_portal")


class LeadCreationForm(ft.Column):
    """
    Lead capture fields plus the guarded submit. Used full page at the add-lead
    route and inside a dialog on the leads list.

    `on_lead_created` runs after the insert has been committed and while the
    form is still showing; callers re-fetch their list there before closing.
    """
    def __init__(self, page: ft.Page, session, lead_service: LeadService,
                 on_lead_created: Callable[[Lead], None],
                 on_cancel: Optional[Callable[[], None]] = None,
                 show_actions: bool = True):
        super().__init__(spacing=12, tight=True, scroll=ft.ScrollMode.AUTO)
        self.page = page
        self.session = session
        self.lead_service = lead_service
        self.on_lead_created = on_lead_created
        self.on_cancel = on_cancel
        self.submit_guard = InFlightGuard("create lead")
        self.submit_buttons: List[ft.Control] = []

        self.optician_name_field = ft.TextField(label="Optician Name *", autofocus=True, border_radius=8, expand=True)
        self.contact_person_field = ft.TextField(label="Contact Person Name *", border_radius=8, expand=True)
        self.phone_field = ft.TextField(label="Phone Number *", border_radius=8, expand=True, keyboard_type=ft.KeyboardType.PHONE)
        self.email_field = ft.TextField(label="Email Address *", border_radius=8, expand=True, keyboard_type=ft.KeyboardType.EMAIL)
        self.address_field = ft.TextField(label="Complete Address *", border_radius=8, multiline=True, min_lines=2, max_lines=3)
        self.gst_field = ft.TextField(label="GST Number *", border_radius=8, expand=True)
        self.week_off_dropdown = ft.Dropdown(
            label="Week Off Day *", border_radius=8, expand=True,
            options=[ft.dropdown.Option(day, day.capitalize()) for day in WEEK_DAYS],
        )
        self.business_type_dropdown = ft.Dropdown(
            label="Business Type", border_radius=8, expand=True, value="independent",
            options=[ft.dropdown.Option(key, label) for key, label in LEAD_BUSINESS_TYPES.items()],
        )
        self.source_dropdown = ft.Dropdown(
            label="Lead Source", border_radius=8, expand=True, value="cold_call",
            options=[ft.dropdown.Option(key, label) for key, label in LEAD_SOURCES.items()],
        )
        self.priority_dropdown = ft.Dropdown(
            label="Priority", border_radius=8, expand=True, value=DEFAULT_LEAD_PRIORITY,
            options=[ft.dropdown.Option(p, p.capitalize()) for p in LEAD_PRIORITIES],
        )
        self.monthly_volume_field = ft.TextField(
            label="Monthly Volume (Optional)", border_radius=8, expand=True,
            input_filter=ft.NumbersOnlyInputFilter(),
        )
        self.suppliers_field = ft.TextField(label="Current Suppliers (comma separated)", border_radius=8, expand=True)
        self.notes_field = ft.TextField(label="Notes (Optional)", border_radius=8, multiline=True, min_lines=2, max_lines=4)
        self.error_text = ft.Text(visible=False, color=ft.Colors.RED_700, weight=ft.FontWeight.W_500)

        self.controls = [
            ft.Row([self.optician_name_field, self.contact_person_field], spacing=12),
            ft.Row([self.phone_field, self.email_field], spacing=12),
            self.address_field,
            ft.Row([self.gst_field, self.week_off_dropdown], spacing=12),
            ft.Row([self.business_type_dropdown, self.source_dropdown, self.priority_dropdown], spacing=12),
            ft.Row([self.monthly_volume_field, self.suppliers_field], spacing=12),
            self.notes_field,
            self.error_text,
        ]

        if show_actions:
            submit_button = ft.FilledButton("Add Lead", icon=ft.Icons.PERSON_ADD_ALT_1_ROUNDED, on_click=self.handle_submit, height=44)
            self.register_submit_button(submit_button)
            self.controls.append(ft.Row(
                [ft.TextButton("Cancel", on_click=lambda e: self.on_cancel() if self.on_cancel else None), submit_button],
                alignment=ft.MainAxisAlignment.END,
            ))

    def register_submit_button(self, button: ft.Control):
        self.submit_buttons.append(button)

    def collect_data(self) -> dict:
        return {
            "optician_name": self.optician_name_field.value,
            "contact_person_name": self.contact_person_field.value,
            "phone_number": self.phone_field.value,
            "email": self.email_field.value,
            "address": self.address_field.value,
            "gst_number": self.gst_field.value,
            "week_off": self.week_off_dropdown.value,
            "business_type": self.business_type_dropdown.value,
            "source": self.source_dropdown.value,
            "priority": self.priority_dropdown.value,
            "monthly_volume": self.monthly_volume_field.value,
            "current_suppliers": self.suppliers_field.value,
            "notes": self.notes_field.value,
        }

    def _set_busy(self, busy: bool):
        for button in self.submit_buttons:
            button.disabled = busy
        if self.page: self.page.update()

    def _show_error(self, message: str):
        self.error_text.value = message
        self.error_text.visible = True
        if self.page: self.page.update()

    def handle_submit(self, e: Optional[ft.ControlEvent] = None):
        self.error_text.visible = False
        try:
            with self.submit_guard.run():
                self._set_busy(True)
                try:
                    with get_db_session() as db:
                        lead = self.lead_service.create_lead(db, self.session.current_identity, self.collect_data())
                    self.on_lead_created(lead)
                finally:
                    self._set_busy(False)
        except DuplicateSubmissionError:
            return
        except AppException as ex:
            self._show_error(ex.message)
        except Exception as ex_general:
            logger.error(f"Unexpected error creating lead: {ex_general}", exc_info=True)
            self._show_error(f"An unexpected error occurred: {ex_general}")
