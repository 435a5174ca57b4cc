import flet as ft

from sales_portal.constants import USERS_ROUTE, ADD_USER_ROUTE, DASHBOARD_ROUTE
from sales_portal.services.user_service import UserService
from sales_portal.ui.components.common.search_bar_component import SearchBarComponent
from sales_portal.ui.components.tables.users_table import UsersTable
from sales_portal.ui.components.common.appbar_factory import create_appbar
from sales_portal.ui.components.common.breadcrumb_bar import BreadcrumbBar


class UserManagementView(ft.Container):
    def __init__(self, page: ft.Page, router, session, **params):
        super().__init__(expand=True, padding=0)
        self.page = page
        self.router = router
        self.session = session
        self.user_service = UserService()

        self.search_bar = SearchBarComponent(
            on_search_changed=self._on_search_term_changed,
            label="Search Users (Login ID, Name, Role)",
            expand=True
        )

        self.page.appbar = create_appbar(
            page=self.page,
            router=self.router,
            session=self.session,
            title_text="User Management",
            leading_widget=ft.IconButton(
                icon=ft.Icons.ARROW_BACK_IOS_NEW_ROUNDED,
                tooltip="Go Back to Dashboard",
                icon_color=ft.Colors.WHITE,
                on_click=lambda e: self.router.navigate_to(DASHBOARD_ROUTE)
            )
        )

        self.users_table_component = UsersTable(
            page=self.page,
            user_service=self.user_service,
            acting_identity=self.session.current_identity,
        )

        self.content = self._build_body()
        self.users_table_component.refresh_data_and_ui()

    def _on_search_term_changed(self, search_term: str):
        self.users_table_component.set_search_term(search_term)

    def _build_body(self) -> ft.Column:
        user_management_card_content = ft.Column(
            [
                ft.Row(
                    [
                        ft.Text("Account Management", style=ft.TextThemeStyle.HEADLINE_SMALL, weight=ft.FontWeight.BOLD, expand=True),
                        self.search_bar,
                        ft.FilledButton(
                            "Add New User", icon=ft.Icons.PERSON_ADD_ALT_1_ROUNDED,
                            on_click=lambda e: self.router.navigate_to(ADD_USER_ROUTE),
                            style=ft.ButtonStyle(shape=ft.RoundedRectangleBorder(radius=8)),
                            height=48
                        ),
                    ],
                    alignment=ft.MainAxisAlignment.SPACE_BETWEEN, vertical_alignment=ft.CrossAxisAlignment.CENTER,
                ),
                ft.Divider(height=15),
                self.users_table_component,
            ],
            spacing=15,
            expand=True
        )

        return ft.Column(
            [
                BreadcrumbBar(self.router, USERS_ROUTE),
                ft.Container(
                    content=ft.Card(
                        content=ft.Container(content=user_management_card_content, padding=20, border_radius=ft.border_radius.all(10)),
                        elevation=2,
                    ),
                    padding=ft.padding.symmetric(horizontal=20, vertical=5),
                    expand=True,
                ),
            ],
            expand=True,
        )
