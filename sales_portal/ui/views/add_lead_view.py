import flet as ft

from sales_portal.constants import ADD_LEAD_ROUTE, LEADS_ROUTE
from sales_portal.core.models import Lead
from sales_portal.services.lead_service import LeadService
from sales_portal.ui.components.common.appbar_factory import create_appbar
from sales_portal.ui.components.common.breadcrumb_bar import BreadcrumbBar
from sales_portal.ui.components.forms.lead_creation_form import LeadCreationForm


class AddLeadView(ft.Container):
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
            title_text="Add New Lead",
            leading_widget=ft.IconButton(
                icon=ft.Icons.ARROW_BACK_IOS_NEW_ROUNDED,
                tooltip="Back to Lead Management",
                icon_color=ft.Colors.WHITE,
                on_click=lambda e: self.router.navigate_to(LEADS_ROUTE)
            )
        )
        self.form = LeadCreationForm(
            page=self.page, session=self.session, lead_service=self.lead_service,
            on_lead_created=self._handle_lead_created,
            on_cancel=lambda: self.router.navigate_to(LEADS_ROUTE),
        )
        self.content = self._build_body()

    def _handle_lead_created(self, lead: Lead):
        self.page.open(ft.SnackBar(ft.Text(f"Lead '{lead.optician_name}' added."), open=True))
        self.router.navigate_to(LEADS_ROUTE)

    def _build_body(self) -> ft.Column:
        return ft.Column(
            [
                BreadcrumbBar(self.router, ADD_LEAD_ROUTE),
                ft.Container(
                    content=ft.Card(
                        content=ft.Container(
                            content=ft.Column(
                                [
                                    ft.Text("Add New Lead", style=ft.TextThemeStyle.HEADLINE_SMALL, weight=ft.FontWeight.BOLD),
                                    ft.Text("Capture new optician details for follow-up and conversion",
                                            color=ft.Colors.ON_SURFACE_VARIANT),
                                    ft.Divider(height=10),
                                    self.form,
                                ],
                                spacing=8,
                            ),
                            padding=25,
                            width=860,
                        ),
                        elevation=2,
                    ),
                    alignment=ft.alignment.top_center,
                    padding=20,
                ),
            ],
            expand=True,
            scroll=ft.ScrollMode.ADAPTIVE,
        )
