from typing import List, Optional
import flet as ft

from sales_portal.constants import LOGIN_ROUTE
from sales_portal.utils.helpers import initials

def create_appbar(
        page: ft.Page,
        router: any,
        session: any,
        title_text: str,
        leading_widget: Optional[ft.Control] = None,
        custom_actions: Optional[List[ft.Control]] = None,
        show_logout_button: bool = True,
        show_user_info: bool = True,
) -> ft.AppBar:
    """
    Factory function to create a standardized AppBar.
    Logging out ends the session and returns to the login screen, keeping the
    page the user was on as the login's return target.
    """
    actions = []
    identity = session.current_identity if session else None

    if show_user_info and identity:
        actions.append(ft.CircleAvatar(content=ft.Text(initials(identity.display_name), size=12), radius=16))
        actions.append(ft.Container(width=6))
        actions.append(ft.Column(
            [
                ft.Text(identity.display_name, weight=ft.FontWeight.BOLD, color=ft.Colors.WHITE, size=13),
                ft.Text(identity.role_display_name, color=ft.Colors.WHITE70, size=11),
            ],
            spacing=0, alignment=ft.MainAxisAlignment.CENTER,
        ))
        actions.append(ft.Container(width=10))

    if custom_actions:
        actions.extend(custom_actions)

    if show_logout_button:
        def logout(e):
            # The router redirects protected routes itself when the session changes
            session.sign_out()
            if router.current_route_name != LOGIN_ROUTE:
                router.navigate_to(LOGIN_ROUTE)

        actions.append(
            ft.IconButton(
                icon=ft.Icons.LOGOUT,
                tooltip="Logout",
                icon_color=ft.Colors.WHITE,
                on_click=logout,
            )
        )

    return ft.AppBar(
        leading=leading_widget,
        leading_width=70 if leading_widget else None,
        title=ft.Text(title_text),
        bgcolor=ft.Colors.BLUE_700, # Consistent AppBar color
        color=ft.Colors.WHITE,
        actions=actions if actions else None,
    )
