import flet as ft

from sales_portal.constants import (
    DASHBOARD_ROUTE, LEADS_ROUTE, ORDERS_ROUTE, USERS_ROUTE, REPORTS_ROUTE, SETTINGS_ROUTE,
)
from sales_portal.core.navigation import visible_navigation_items
from sales_portal.ui.components.common.appbar_factory import create_appbar
from sales_portal.ui.components.common.breadcrumb_bar import BreadcrumbBar
from sales_portal.ui.components.widgets.function_button import create_nav_card_button
from sales_portal.utils.helpers import format_datetime_for_display

NAV_CARD_COLORS = {
    LEADS_ROUTE: ft.Colors.TEAL_ACCENT_700,
    ORDERS_ROUTE: ft.Colors.INDIGO_ACCENT_700,
    USERS_ROUTE: ft.Colors.DEEP_ORANGE_ACCENT_700,
    REPORTS_ROUTE: ft.Colors.PURPLE_ACCENT_700,
    SETTINGS_ROUTE: ft.Colors.BLUE_GREY_700,
}


class DashboardView(ft.Container):
    def __init__(self, page: ft.Page, router, session, **params):
        super().__init__(expand=True)
        self.page = page
        self.router = router
        self.session = session
        self.identity = session.current_identity

        self.page.appbar = create_appbar(
            page=self.page,
            router=self.router,
            session=self.session,
            title_text="Dashboard",
        )
        self.content = self._build_body()

    def _build_account_card(self) -> ft.Card:
        identity = self.identity
        rows = [
            ("Role", identity.role_display_name),
            ("Login ID", identity.login_id),
            ("Email", identity.email or "-"),
        ]
        if identity.territory_id:
            rows.append(("Territory", identity.territory_id))
        rows.append(("Last Login", format_datetime_for_display(identity.last_login)))

        return ft.Card(
            content=ft.Container(
                content=ft.Column(
                    [ft.Text("Account", weight=ft.FontWeight.BOLD, size=16)] + [
                        ft.Row([
                            ft.Text(f"{label}:", width=90, color=ft.Colors.ON_SURFACE_VARIANT),
                            ft.Text(value, weight=ft.FontWeight.W_500),
                        ])
                        for label, value in rows
                    ],
                    spacing=6,
                ),
                padding=20,
                width=360,
            ),
            elevation=3,
        )

    def _build_body(self) -> ft.Column:
        nav_cards = [
            create_nav_card_button(
                router=self.router,
                text=item.title,
                icon_name=item.icon,
                accent_color=NAV_CARD_COLORS.get(item.href, ft.Colors.BLUE_ACCENT_700),
                navigate_to_route=item.href,
                badge=item.badge,
                tooltip=f"Open {item.title}",
            )
            for item in visible_navigation_items(self.identity.role)
            if item.href != DASHBOARD_ROUTE
        ]

        return ft.Column(
            [
                BreadcrumbBar(self.router, DASHBOARD_ROUTE),
                ft.Container(
                    content=ft.Column(
                        [
                            ft.Text(f"Welcome back, {self.identity.display_name or self.identity.email}",
                                    style=ft.TextThemeStyle.HEADLINE_SMALL, weight=ft.FontWeight.BOLD),
                            ft.Text(f"Signed in as {self.identity.role_display_name}",
                                    color=ft.Colors.ON_SURFACE_VARIANT),
                            ft.Container(height=10),
                            ft.Row(
                                [
                                    self._build_account_card(),
                                    ft.Row(nav_cards, wrap=True, spacing=15, run_spacing=15, expand=True),
                                ],
                                vertical_alignment=ft.CrossAxisAlignment.START,
                                spacing=25,
                            ),
                        ],
                        spacing=8,
                    ),
                    padding=ft.padding.symmetric(horizontal=25, vertical=10),
                    expand=True,
                ),
            ],
            expand=True,
            scroll=ft.ScrollMode.ADAPTIVE,
        )
