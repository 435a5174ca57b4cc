import flet as ft

from sales_portal.ui.components.forms.login_form import LoginForm
from sales_portal.constants import DASHBOARD_ROUTE, LOGIN_ROUTE, FIRST_RUN_SETUP_ROUTE
from sales_portal.core.identity import Identity
from sales_portal.ui.components.common.appbar_factory import create_appbar
from sales_portal.config import APP_TITLE, VERSION, COMPANY_NAME

class LoginView(ft.Container):
    def __init__(self, page: ft.Page, router, session, return_to: str = None, **params):
        super().__init__(expand=True, alignment=ft.alignment.center)
        self.page = page
        self.router = router
        self.session = session
        self.return_to = return_to

        self.page.appbar = create_appbar(
            page=self.page,
            router=self.router,
            session=self.session,
            title_text=APP_TITLE,
            show_logout_button=False,
            show_user_info=False,
        )

        self.login_form_component = LoginForm(page=self.page, session=self.session, on_login_success=self._handle_login_success)
        self.content = self._build_layout()

    def _build_layout(self) -> ft.Column:
        return ft.Column(
            [
                ft.Container(
                    content=ft.Icon(
                        ft.Icons.LOCK_PERSON_OUTLINED,
                        color=ft.Colors.BLUE_GREY_300,
                        size=80,
                    ),
                    padding=ft.padding.only(bottom=20),
                ),
                ft.Container(
                    content=self.login_form_component,
                    padding=30,
                    border_radius=ft.border_radius.all(12),
                    bgcolor=ft.Colors.with_opacity(0.05, ft.Colors.BLACK),
                    shadow=ft.BoxShadow(
                        spread_radius=1, blur_radius=15,
                        color=ft.Colors.with_opacity(0.1, ft.Colors.BLACK26),
                        offset=ft.Offset(0, 5),
                    ),
                    width=400,
                ),
                ft.Container(
                    content=ft.Text(
                        f"{COMPANY_NAME} · Built using Python and Flet · Version: {VERSION}",
                        size=12,
                        color=ft.Colors.GREY_500,
                        text_align=ft.TextAlign.CENTER,
                    ),
                    alignment=ft.alignment.center,
                    padding=10,
                    margin=ft.margin.only(top=30),
                ),
            ],
            alignment=ft.MainAxisAlignment.CENTER,
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            spacing=20,
            expand=True,
        )

    def _handle_login_success(self, identity: Identity):
        # Never bounce back to a public page after signing in
        target = self.return_to if self.return_to and self.return_to not in (LOGIN_ROUTE, FIRST_RUN_SETUP_ROUTE) else DASHBOARD_ROUTE
        self.router.navigate_to(target)
