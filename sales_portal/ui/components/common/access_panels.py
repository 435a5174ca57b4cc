from typing import Any
import flet as ft

from sales_portal.constants import DASHBOARD_ROUTE
from sales_portal.core.access_guard import AccessDecision, AccessState


def create_loading_panel(message: str = "Loading...") -> ft.Container:
    return ft.Container(
        content=ft.Column(
            [ft.ProgressRing(width=40, height=40), ft.Text(message, color=ft.Colors.ON_SURFACE_VARIANT)],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            alignment=ft.MainAxisAlignment.CENTER,
            spacing=15,
        ),
        alignment=ft.alignment.center,
        expand=True,
    )


def create_denial_panel(decision: AccessDecision, router: Any, session: Any) -> ft.Container:
    """
    Blocking message for a denied route. A deactivated account can only sign
    out; the other denials offer a way back to the dashboard.
    """
    deactivated = decision.state is AccessState.DEACTIVATED
    icon = ft.Icons.BLOCK_ROUNDED if deactivated else ft.Icons.LOCK_OUTLINE_ROUNDED

    details = []
    if decision.missing_permissions:
        details.append(ft.Text(
            f"Missing: {', '.join(decision.missing_permissions)}",
            size=12, color=ft.Colors.ON_SURFACE_VARIANT,
        ))

    def sign_out(e):
        session.sign_out()

    if deactivated:
        action = ft.FilledButton("Sign Out", icon=ft.Icons.LOGOUT, on_click=sign_out)
    else:
        action = ft.FilledButton(
            "Back to Dashboard", icon=ft.Icons.DASHBOARD_ROUNDED,
            on_click=lambda e: router.navigate_to(DASHBOARD_ROUTE),
        )

    return ft.Container(
        content=ft.Card(
            content=ft.Container(
                content=ft.Column(
                    [
                        ft.Icon(icon, size=56, color=ft.Colors.RED_ACCENT_700),
                        ft.Text(decision.message, size=18, weight=ft.FontWeight.BOLD, text_align=ft.TextAlign.CENTER),
                        *details,
                        ft.Container(height=10),
                        action,
                    ],
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                    spacing=10,
                    tight=True,
                ),
                padding=30,
                width=460,
            ),
            elevation=6,
        ),
        alignment=ft.alignment.center,
        expand=True,
    )
