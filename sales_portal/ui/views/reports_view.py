import datetime
import logging
from typing import Any, Dict, List

import flet as ft

from sales_portal.constants import ALL_LEAD_STATUSES, DASHBOARD_ROUTE, REPORTS_ROUTE
from sales_portal.core.exceptions import AppException
from sales_portal.data.database import get_db_session
from sales_portal.services.report_service import ReportService
from sales_portal.ui.components.common.appbar_factory import create_appbar
from sales_portal.ui.components.common.breadcrumb_bar import BreadcrumbBar
from sales_portal.ui.components.common.paginated_data_table import PaginatedDataTable

logger = logging.getLogger("sales_portal")


class ReportsView(ft.Container):
    def __init__(self, page: ft.Page, router, session, **params):
        super().__init__(expand=True, padding=0)
        self.page = page
        self.router = router
        self.session = session
        self.report_service = ReportService()
        self.report_data_cache: List[Dict[str, Any]] = []

        self.file_picker = ft.FilePicker(on_result=self._on_file_picker_result)
        if self.file_picker not in self.page.overlay:
            self.page.overlay.append(self.file_picker)

        self.refresh_button = ft.FilledButton("Refresh", icon=ft.Icons.REFRESH_ROUNDED, on_click=self._refresh_report, height=45)
        self.export_pdf_button = ft.FilledButton("Export to PDF", icon=ft.Icons.PICTURE_AS_PDF, on_click=self._export_report_to_pdf, height=45, disabled=True)
        self.summary_total_leads = ft.Text("Total Leads: 0", style=ft.TextThemeStyle.TITLE_MEDIUM, weight=ft.FontWeight.BOLD)

        column_definitions: List[Dict[str, Any]] = [
            {"key": "sales_staff_name", "label": "Sales Staff", "sortable": True},
        ]
        for status in ALL_LEAD_STATUSES:
            column_definitions.append({
                "key": status, "label": status.capitalize(), "numeric": True,
                "display_formatter": lambda val, item, s=status: ft.Text(str(item["counts"].get(s, 0)), size=12.5),
            })
        column_definitions.append({
            "key": "total", "label": "Total", "sortable": True, "numeric": True,
            "display_formatter": lambda val, item: ft.Text(str(val), weight=ft.FontWeight.BOLD, size=12.5),
        })

        self.report_table = PaginatedDataTable[Dict[str, Any]](
            page=self.page,
            fetch_all_data_func=lambda db: self.report_service.get_lead_pipeline_report_data(db, self.session.current_identity),
            column_definitions=column_definitions,
            action_cell_builder=None,
            on_data_changed=self._on_report_loaded,
            rows_per_page=15,
            no_data_message="No leads have been captured yet.",
        )
        self.page.appbar = create_appbar(
            page=self.page, router=self.router, session=self.session, title_text="Reports",
            leading_widget=ft.IconButton(
                ft.Icons.ARROW_BACK_IOS_NEW_ROUNDED, tooltip="Go Back to Dashboard", icon_color=ft.Colors.WHITE,
                on_click=lambda e: self.router.navigate_to(DASHBOARD_ROUTE),
            ),
        )
        self.content = self._build_body()
        self.report_table.refresh_data_and_ui()

    def _on_report_loaded(self, rows: List[Dict[str, Any]]):
        self.report_data_cache = rows
        self.export_pdf_button.disabled = not rows
        self.summary_total_leads.value = f"Total Leads: {sum(row['total'] for row in rows)}"

    def _refresh_report(self, e):
        self.report_table.refresh_data_and_ui()

    def _export_report_to_pdf(self, e: ft.ControlEvent):
        if not self.report_data_cache:
            self.page.open(ft.SnackBar(ft.Text("No data to export."), open=True)); return
        timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        self.file_picker.save_file(
            dialog_title="Save Lead Pipeline Report PDF",
            file_name=f"LeadPipelineReport_{timestamp}.pdf",
            allowed_extensions=["pdf"],
        )

    def _on_file_picker_result(self, e: ft.FilePickerResultEvent):
        if e.path:
            identity = self.session.current_identity
            try:
                with get_db_session() as db:
                    detail_data = self.report_service.get_lead_detail_report_data(db, identity)
            except AppException as ex:
                self.page.open(ft.SnackBar(ft.Text(f"Error loading report data: {ex.message}"), open=True, bgcolor=ft.Colors.ERROR))
                return
            success, msg = self.report_service.generate_lead_pipeline_pdf(
                self.report_data_cache, detail_data, identity.display_name, e.path,
            )
            if success: self.page.open(ft.SnackBar(ft.Text(f"Report saved to: {msg}"), open=True, bgcolor=ft.Colors.GREEN))
            else: self.page.open(ft.SnackBar(ft.Text(f"Error saving PDF: {msg}"), open=True, bgcolor=ft.Colors.ERROR))
        elif e.error:
            self.page.open(ft.SnackBar(ft.Text(f"File picker error: {e.error}"), open=True, bgcolor=ft.Colors.ERROR))

    def _build_body(self) -> ft.Column:
        report_card_content = ft.Column(
            [
                ft.Row(
                    [
                        ft.Text("Lead Pipeline", style=ft.TextThemeStyle.TITLE_LARGE, weight=ft.FontWeight.BOLD, expand=True),
                        self.refresh_button,
                        self.export_pdf_button,
                    ],
                    vertical_alignment=ft.CrossAxisAlignment.CENTER, spacing=10,
                ),
                ft.Text("Leads per sales staff member, broken down by status.", color=ft.Colors.ON_SURFACE_VARIANT),
                ft.Divider(height=15),
                self.report_table,
                ft.Divider(height=10),
                ft.Row([self.summary_total_leads], alignment=ft.MainAxisAlignment.END),
            ],
            spacing=15, expand=True, scroll=ft.ScrollMode.ADAPTIVE,
        )
        report_card = ft.Card(
            content=ft.Container(content=report_card_content, padding=20, border_radius=ft.border_radius.all(10)),
            elevation=2, width=1100,
        )
        return ft.Column(
            [
                BreadcrumbBar(self.router, REPORTS_ROUTE),
                ft.Container(content=report_card, alignment=ft.alignment.top_center, padding=20, expand=True),
            ],
            expand=True,
        )
