import logging

import flet as ft

from sales_portal.constants import Role, ALL_USER_ROLES, ALL_PERMISSIONS, USERS_ROUTE, ADD_USER_ROUTE
from sales_portal.core.exceptions import ValidationError, DatabaseError
from sales_portal.core.navigation import role_display_name
from sales_portal.data.database import get_db_session
from sales_portal.services.user_service import UserService, default_permissions_for_role
from sales_portal.ui.components.common.appbar_factory import create_appbar
from sales_portal.ui.components.common.breadcrumb_bar import BreadcrumbBar

logger = logging.getLogger("sales_portal")


class AddUserView(ft.Container):
    def __init__(self, page: ft.Page, router, session, **params):
        super().__init__(expand=True)
        self.page = page
        self.router = router
        self.session = session
        self.user_service = UserService()

        self.page.appbar = create_appbar(
            page=self.page,
            router=self.router,
            session=self.session,
            title_text="Add User",
            leading_widget=ft.IconButton(
                icon=ft.Icons.ARROW_BACK_IOS_NEW_ROUNDED,
                tooltip="Back to User Management",
                icon_color=ft.Colors.WHITE,
                on_click=lambda e: self.router.navigate_to(USERS_ROUTE)
            )
        )

        self.login_id_field = ft.TextField(label="Login ID", autofocus=True, border_radius=8)
        self.display_name_field = ft.TextField(label="Full Name", border_radius=8)
        self.email_field = ft.TextField(label="Email", border_radius=8)
        self.territory_field = ft.TextField(label="Territory (Optional)", border_radius=8)
        self.password_field = ft.TextField(label="Password", password=True, can_reveal_password=True, border_radius=8)
        self.confirm_password_field = ft.TextField(label="Confirm Password", password=True, can_reveal_password=True, border_radius=8)
        self.role_dropdown = ft.Dropdown(
            label="Role",
            options=[ft.dropdown.Option(role.value, role_display_name(role)) for role in ALL_USER_ROLES],
            value=Role.SALES.value,
            border_radius=8,
            on_change=self._on_role_changed,
        )
        self.permission_checkboxes = {
            permission: ft.Checkbox(label=permission) for permission in ALL_PERMISSIONS
        }
        self._apply_role_defaults(Role.SALES)
        self.error_text = ft.Text(visible=False, color=ft.Colors.RED_700)
        self.save_button = ft.FilledButton("Create User", icon=ft.Icons.SAVE_ROUNDED, on_click=self._save_new_user_handler, height=44)

        self.content = self._build_body()

    def _apply_role_defaults(self, role: Role):
        granted = set(default_permissions_for_role(role))
        for permission, checkbox in self.permission_checkboxes.items():
            checkbox.value = permission in granted

    def _on_role_changed(self, e):
        self._apply_role_defaults(Role(self.role_dropdown.value))
        self.page.update()

    def _save_new_user_handler(self, e):
        self.error_text.value = ""
        self.error_text.visible = False

        login_id = self.login_id_field.value.strip() if self.login_id_field.value else ""
        password = self.password_field.value or ""
        confirm_password = self.confirm_password_field.value or ""
        permissions = [p for p, checkbox in self.permission_checkboxes.items() if checkbox.value]

        try:
            if password != confirm_password:
                raise ValidationError("Passwords do not match.")

            with get_db_session() as db:
                self.user_service.create_user(
                    db, login_id, password, self.display_name_field.value, self.email_field.value,
                    role=self.role_dropdown.value, permissions=permissions, territory_id=self.territory_field.value,
                )

            self.page.open(ft.SnackBar(ft.Text(f"User '{login_id}' created successfully!"), open=True))
            self.router.navigate_to(USERS_ROUTE)
            return
        except (ValidationError, DatabaseError) as ex:
            self.error_text.value = ex.message
            self.error_text.visible = True
        except Exception as ex_general:
            logger.error(f"Unexpected error creating user '{login_id}': {ex_general}", exc_info=True)
            self.error_text.value = f"An unexpected error occurred: {ex_general}"
            self.error_text.visible = True
        if self.page: self.page.update()

    def _build_body(self) -> ft.Column:
        form = ft.Column(
            [
                ft.Text("New Account", style=ft.TextThemeStyle.HEADLINE_SMALL, weight=ft.FontWeight.BOLD),
                ft.Row([self.login_id_field, self.display_name_field], spacing=15),
                ft.Row([self.email_field, self.territory_field], spacing=15),
                ft.Row([self.password_field, self.confirm_password_field], spacing=15),
                self.role_dropdown,
                ft.Text("Permissions", weight=ft.FontWeight.BOLD),
                ft.Row(list(self.permission_checkboxes.values()), wrap=True, spacing=10),
                self.error_text,
                ft.Row(
                    [
                        ft.TextButton("Cancel", on_click=lambda e: self.router.navigate_to(USERS_ROUTE)),
                        self.save_button,
                    ],
                    alignment=ft.MainAxisAlignment.END,
                ),
            ],
            spacing=15,
        )
        return ft.Column(
            [
                BreadcrumbBar(self.router, ADD_USER_ROUTE),
                ft.Container(
                    content=ft.Card(content=ft.Container(content=form, padding=25, width=720), elevation=2),
                    alignment=ft.alignment.top_center,
                    padding=20,
                ),
            ],
            expand=True,
            scroll=ft.ScrollMode.ADAPTIVE,
        )
