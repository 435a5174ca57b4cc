import flet as ft
from sales_portal.services import UserService
from sales_portal.data.database import get_db_session
from sales_portal.constants import Role, LOGIN_ROUTE
from sales_portal.core.exceptions import ValidationError, DatabaseError
from sales_portal.config import APP_TITLE
from sales_portal.ui.components.common.appbar_factory import create_appbar

import logging
logger = logging.getLogger("sales_portal")

class FirstRunSetupView(ft.Container):
    """Shown only while the user store is empty; creates the first administrator."""
    def __init__(self, page: ft.Page, router, session, **params):
        super().__init__(expand=True, alignment=ft.alignment.center)
        self.page = page
        self.router = router
        self.session = session
        self.user_service = UserService()

        self.page.appbar = create_appbar(
            page=self.page,
            router=self.router,
            session=self.session,
            title_text=f"{APP_TITLE} - Initial Setup",
            show_logout_button=False,
            show_user_info=False,
        )

        self.login_id_field = ft.TextField(
            label="Administrator Login ID",
            autofocus=True,
            border_radius=8,
            prefix_icon=ft.Icons.PERSON_OUTLINE_ROUNDED,
        )
        self.display_name_field = ft.TextField(
            label="Full Name",
            border_radius=8,
            prefix_icon=ft.Icons.BADGE_OUTLINED,
        )
        self.email_field = ft.TextField(
            label="Email (Optional)",
            border_radius=8,
            prefix_icon=ft.Icons.EMAIL_OUTLINED,
        )
        self.password_field = ft.TextField(
            label="Password",
            password=True,
            can_reveal_password=True,
            border_radius=8,
            prefix_icon=ft.Icons.LOCK_OUTLINE_ROUNDED,
        )
        self.confirm_password_field = ft.TextField(
            label="Confirm Password",
            password=True,
            can_reveal_password=True,
            border_radius=8,
            prefix_icon=ft.Icons.LOCK_RESET_ROUNDED,
            on_submit=self._create_initial_user_handler,
        )
        self.error_text = ft.Text(
            visible=False,
            weight=ft.FontWeight.W_500,
            color=ft.Colors.RED_700,
            text_align=ft.TextAlign.CENTER
        )
        self.submit_button = ft.FilledButton(
            text="Create Administrator Account",
            height=48,
            on_click=self._create_initial_user_handler,
            icon=ft.Icons.ADMIN_PANEL_SETTINGS_ROUNDED,
            style=ft.ButtonStyle(shape=ft.RoundedRectangleBorder(radius=8))
        )
        self.content = self._build_layout()

    def _build_layout(self) -> ft.Column:
        return ft.Column(
            [
                ft.Text(
                    "Welcome! Let's set up the administrator account.",
                    style=ft.TextThemeStyle.HEADLINE_SMALL,
                    weight=ft.FontWeight.BOLD,
                    text_align=ft.TextAlign.CENTER
                ),
                ft.Text(
                    "This account manages users and sees every lead.",
                    style=ft.TextThemeStyle.BODY_LARGE,
                    color=ft.Colors.ON_SURFACE_VARIANT,
                    text_align=ft.TextAlign.CENTER
                ),
                ft.Container(height=20),
                self.login_id_field,
                self.display_name_field,
                self.email_field,
                self.password_field,
                self.confirm_password_field,
                self.error_text,
                ft.Container(height=15),
                self.submit_button,
            ],
            horizontal_alignment=ft.CrossAxisAlignment.STRETCH,
            spacing=12,
            width=420,
            alignment=ft.MainAxisAlignment.CENTER,
        )

    def _create_initial_user_handler(self, e: ft.ControlEvent):
        self.error_text.value = ""
        self.error_text.visible = False

        login_id = self.login_id_field.value.strip() if self.login_id_field.value else ""
        password = self.password_field.value or ""
        confirm_password = self.confirm_password_field.value or ""

        try:
            if not confirm_password:
                raise ValidationError("Confirm Password field is required.")
            if password != confirm_password:
                raise ValidationError("Passwords do not match.")

            with get_db_session() as db:
                if self.user_service.any_users_exist(db):
                    raise ValidationError("Setup has already been completed. Please sign in.")
                self.user_service.create_user(
                    db, login_id, password, self.display_name_field.value, self.email_field.value, role=Role.ADMIN,
                )

            self.page.open(ft.SnackBar(
                ft.Text(f"Administrator account '{login_id}' created successfully! Please sign in."),
                open=True,
                duration=4000
            ))
            self.router.navigate_to(LOGIN_ROUTE)

        except (ValidationError, DatabaseError) as ex:
            self.error_text.value = ex.message
            self.error_text.visible = True
            if self.error_text.page: self.error_text.update()
        except Exception as ex_general:
            self.error_text.value = "An unexpected error occurred. Please try again."
            self.error_text.visible = True
            logger.error(f"Unexpected error during first run setup: {ex_general}", exc_info=True)
            if self.error_text.page: self.error_text.update()
