import logging

import flet as ft
from typing import Callable, Optional

from sales_portal.core.exceptions import InvalidCredentialsError, ValidationError, DatabaseError, DuplicateSubmissionError
from sales_portal.core.identity import Identity
from sales_portal.core.in_flight import InFlightGuard

logger = logging.getLogger("sales_portal")

class LoginForm(ft.Container):
    def __init__(self, page: ft.Page, session, on_login_success: Callable[[Identity], None]):
        super().__init__()
        self.page = page
        self.session = session
        self.on_login_success = on_login_success
        self.sign_in_guard = InFlightGuard("sign in")

        self.login_id_field = ft.TextField(
            label="Login ID",
            autofocus=True,
            expand=True,
            border_radius=8,
            prefix_icon=ft.Icons.PERSON_OUTLINE_ROUNDED,
            content_padding=ft.padding.symmetric(vertical=14, horizontal=12),
            on_submit=self._login_clicked_handler,
        )
        self.password_field = ft.TextField(
            label="Password",
            password=True,
            can_reveal_password=True,
            expand=True,
            border_radius=8,
            prefix_icon=ft.Icons.LOCK_OUTLINE_ROUNDED,
            on_submit=self._login_clicked_handler,
            content_padding=ft.padding.symmetric(vertical=14, horizontal=12)
        )
        self.error_text = ft.Text(
            visible=False,
            weight=ft.FontWeight.W_500,
            color=ft.Colors.RED_700,
            text_align=ft.TextAlign.CENTER
        )
        self.login_button = ft.FilledButton(
            text="Sign In",
            expand=True,
            height=48,
            on_click=self._login_clicked_handler,
            icon=ft.Icons.LOGIN_ROUNDED,
            style=ft.ButtonStyle(shape=ft.RoundedRectangleBorder(radius=8))
        )
        self.content = self._build_layout()

    def _build_layout(self) -> ft.Column:
        return ft.Column(
            controls=[
                ft.Text(
                    "Welcome Back!",
                    style=ft.TextThemeStyle.HEADLINE_SMALL,
                    weight=ft.FontWeight.BOLD,
                    text_align=ft.TextAlign.CENTER
                ),
                ft.Text(
                    "Sign in with your login ID and password.",
                    style=ft.TextThemeStyle.BODY_LARGE,
                    color=ft.Colors.ON_SURFACE_VARIANT,
                    text_align=ft.TextAlign.CENTER
                ),
                ft.Container(height=20),
                self.login_id_field,
                self.password_field,
                self.error_text,
                ft.Container(height=15),
                self.login_button,
            ],
            horizontal_alignment=ft.CrossAxisAlignment.STRETCH,
            spacing=12,
        )

    def _set_busy(self, busy: bool):
        self.login_button.disabled = busy
        self.login_button.text = "Signing in..." if busy else "Sign In"
        if self.page: self.page.update()

    def _show_error(self, message: str):
        self.error_text.value = message
        self.error_text.visible = True

    def _login_clicked_handler(self, e: Optional[ft.ControlEvent] = None):
        self.error_text.value = ""
        self.error_text.visible = False

        login_id = self.login_id_field.value.strip() if self.login_id_field.value else ""
        password = self.password_field.value if self.password_field.value else ""

        identity = None
        try:
            with self.sign_in_guard.run():
                self._set_busy(True)
                try:
                    identity = self.session.sign_in(login_id, password)
                finally:
                    self._set_busy(False)
        except DuplicateSubmissionError:
            return
        except (InvalidCredentialsError, ValidationError) as ex:
            self._show_error(ex.message)
        except DatabaseError as ex:
            logger.error(f"Sign-in failed on a store error: {ex.message}")
            self._show_error("Could not reach the account store. Please try again.")
        except Exception as ex_general:
            logger.error(f"Unexpected error in login: {ex_general}", exc_info=True)
            self._show_error("An unexpected error occurred. Please try again.")

        if identity is not None:
            self.password_field.value = ""
            self.on_login_success(identity)
        elif self.page:
            self.page.update()
