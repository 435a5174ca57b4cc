from typing import List, Optional

import flet as ft

from sales_portal.constants import (
    LEADS_ROUTE, ADD_LEAD_ROUTE, DASHBOARD_ROUTE, ALL_LEAD_STATUSES, LEAD_STATUS_FILTER_ALL, PERM_LEADS_CREATE,
)
from sales_portal.core.lead_filters import compute_lead_stats
from sales_portal.core.models import Lead
from sales_portal.services.lead_service import LeadService
from sales_portal.ui.components.common.appbar_factory import create_appbar
from sales_portal.ui.components.common.breadcrumb_bar import BreadcrumbBar
from sales_portal.ui.components.common.dialog_factory import create_form_dialog
from sales_portal.ui.components.common.search_bar_component import SearchBarComponent
from sales_portal.ui.components.forms.lead_creation_form import LeadCreationForm
from sales_portal.ui.components.tables.leads_table import LeadsTable


class LeadsView(ft.Container):
    def __init__(self, page: ft.Page, router, session, **params):
        super().__init__(expand=True)
        self.page = page
        self.router = router
        self.session = session
        self.lead_service = LeadService()

        self.page.appbar = create_appbar(
            page=self.page,
            router=self.router,
            session=self.session,
            title_text="Lead Management",
            leading_widget=ft.IconButton(
                icon=ft.Icons.ARROW_BACK_IOS_NEW_ROUNDED,
                tooltip="Go Back to Dashboard",
                icon_color=ft.Colors.WHITE,
                on_click=lambda e: self.router.navigate_to(DASHBOARD_ROUTE)
            )
        )

        self.stat_texts = {key: ft.Text("0", size=26, weight=ft.FontWeight.BOLD) for key in ("total", "new", "qualified", "converted")}
        self.search_bar = SearchBarComponent(
            on_search_changed=lambda term: self.leads_table.set_filters(search_term=term),
            label="Search leads by name, contact, or phone...",
        )
        self.status_dropdown = ft.Dropdown(
            label="Status", width=200, border_radius=8, value=LEAD_STATUS_FILTER_ALL,
            options=[ft.dropdown.Option(LEAD_STATUS_FILTER_ALL, "All Status")] +
                    [ft.dropdown.Option(status, status.capitalize()) for status in ALL_LEAD_STATUSES],
            on_change=lambda e: self.leads_table.set_filters(status=self.status_dropdown.value),
        )
        self.leads_table = LeadsTable(
            page=self.page, session=self.session, lead_service=self.lead_service,
            on_leads_loaded=self._update_stats,
        )
        self.content = self._build_body()
        self.leads_table.refresh_data_and_ui()

    def _update_stats(self, leads: List[Lead]):
        stats = compute_lead_stats(leads)
        self.stat_texts["total"].value = str(stats.total)
        self.stat_texts["new"].value = str(stats.new)
        self.stat_texts["qualified"].value = str(stats.qualified)
        self.stat_texts["converted"].value = str(stats.converted)

    def _stat_card(self, title: str, key: str, color: str) -> ft.Card:
        return ft.Card(
            content=ft.Container(
                content=ft.Column(
                    [ft.Text(title, color=ft.Colors.ON_SURFACE_VARIANT, size=13), self.stat_texts[key]],
                    spacing=4,
                ),
                padding=15,
                border=ft.border.only(left=ft.BorderSide(4, color)),
            ),
            elevation=2,
            expand=True,
        )

    def _open_quick_add_dialog(self, e):
        dialog: Optional[ft.AlertDialog] = None

        def on_created(lead: Lead):
            # Re-fetches before the dialog goes away
            self.leads_table.close_dialog_and_refresh(dialog, f"Lead '{lead.optician_name}' added.")

        form = LeadCreationForm(
            page=self.page, session=self.session, lead_service=self.lead_service,
            on_lead_created=on_created, show_actions=False,
        )
        dialog = create_form_dialog(
            page=self.page,
            title_text="Add New Lead",
            form_content_column=form,
            on_save_callback=form.handle_submit,
            on_cancel_callback=lambda ev: self.page.close(dialog),
            save_button_text="Add Lead",
            width_ratio=0.55,
            min_width=620,
        )
        form.register_submit_button(dialog.save_button)
        self.page.open(dialog)

    def _build_body(self) -> ft.Column:
        can_create = self.session.has_permission(PERM_LEADS_CREATE)
        header_actions = []
        if can_create:
            header_actions = [
                ft.OutlinedButton("Quick Add", icon=ft.Icons.BOLT_ROUNDED, on_click=self._open_quick_add_dialog, height=44),
                ft.FilledButton("Add New Lead", icon=ft.Icons.ADD_ROUNDED,
                                on_click=lambda e: self.router.navigate_to(ADD_LEAD_ROUTE), height=44),
            ]

        return ft.Column(
            [
                BreadcrumbBar(self.router, LEADS_ROUTE),
                ft.Container(
                    content=ft.Column(
                        [
                            ft.Row(
                                [
                                    ft.Column([
                                        ft.Text("Lead Management", style=ft.TextThemeStyle.HEADLINE_SMALL, weight=ft.FontWeight.BOLD),
                                        ft.Text("Manage and track your optician leads", color=ft.Colors.ON_SURFACE_VARIANT),
                                    ], spacing=2, expand=True),
                                    *header_actions,
                                ],
                                vertical_alignment=ft.CrossAxisAlignment.CENTER,
                            ),
                            ft.Row(
                                [
                                    self._stat_card("Total Leads", "total", ft.Colors.BLUE_700),
                                    self._stat_card("New", "new", ft.Colors.INDIGO_700),
                                    self._stat_card("Qualified", "qualified", ft.Colors.GREEN_700),
                                    self._stat_card("Converted", "converted", ft.Colors.TEAL_700),
                                ],
                                spacing=12,
                            ),
                            ft.Row([self.search_bar, self.status_dropdown], spacing=12),
                            self.leads_table,
                        ],
                        spacing=15,
                        expand=True,
                    ),
                    padding=ft.padding.symmetric(horizontal=20, vertical=5),
                    expand=True,
                ),
            ],
            expand=True,
        )
