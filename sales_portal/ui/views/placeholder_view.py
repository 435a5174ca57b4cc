import flet as ft

from sales_portal.constants import DASHBOARD_ROUTE
from sales_portal.core.navigation import title_for
from sales_portal.ui.components.common.appbar_factory import create_appbar
from sales_portal.ui.components.common.breadcrumb_bar import BreadcrumbBar


class PlaceholderView(ft.Container):
    """Guarded screen for sections that are routed but not built yet (orders, settings)."""
    def __init__(self, page: ft.Page, router, session, route_path: str = DASHBOARD_ROUTE, **params):
        super().__init__(expand=True)
        self.page = page
        self.router = router
        self.session = session
        title = title_for(route_path)

        self.page.appbar = create_appbar(
            page=self.page,
            router=self.router,
            session=self.session,
            title_text=title,
            leading_widget=ft.IconButton(
                icon=ft.Icons.ARROW_BACK_IOS_NEW_ROUNDED,
                tooltip="Go Back to Dashboard",
                icon_color=ft.Colors.WHITE,
                on_click=lambda e: self.router.navigate_to(DASHBOARD_ROUTE)
            )
        )
        self.content = ft.Column(
            [
                BreadcrumbBar(self.router, route_path),
                ft.Container(
                    content=ft.Column(
                        [
                            ft.Icon(ft.Icons.CONSTRUCTION_ROUNDED, size=56, color=ft.Colors.ON_SURFACE_VARIANT),
                            ft.Text(title, size=22, weight=ft.FontWeight.BOLD),
                            ft.Text("This section is coming soon.", color=ft.Colors.ON_SURFACE_VARIANT),
                        ],
                        horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                        spacing=10,
                    ),
                    alignment=ft.alignment.center,
                    expand=True,
                ),
            ],
            expand=True,
        )
