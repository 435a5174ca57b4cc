from typing import Any, Optional
import flet as ft

def create_nav_card_button(
        router: Any,
        text: str,
        icon_name: str,
        accent_color: str,
        navigate_to_route: str,
        badge: Optional[str] = None,
        icon_size: int = 40,
        border_radius: int = 12,
        background_opacity: float = 0.15,
        shadow_opacity: float = 0.25,
        tooltip: Optional[str] = None,
        height: float = 150,
        width: float = 150,
) -> ft.Card:

    def handle_click(e: ft.ControlEvent):
        router.navigate_to(navigate_to_route)

    label_controls = [
        ft.Text(
            text,
            weight=ft.FontWeight.W_500,
            size=14,
            text_align=ft.TextAlign.CENTER,
            color=ft.Colors.with_opacity(0.85, accent_color),
        ),
    ]
    if badge:
        label_controls.append(ft.Container(
            content=ft.Text(badge, size=10, color=ft.Colors.WHITE),
            bgcolor=accent_color,
            border_radius=8,
            padding=ft.padding.symmetric(horizontal=6, vertical=1),
        ))

    button_internal_content = ft.Column(
        [
            ft.Icon(
                name=icon_name,
                size=icon_size,
                color=ft.Colors.with_opacity(0.9, accent_color),
            ),
            ft.Container(height=5),
            *label_controls,
        ],
        alignment=ft.MainAxisAlignment.CENTER,
        horizontal_alignment=ft.CrossAxisAlignment.CENTER,
        spacing=4,
    )

    clickable_area = ft.Container(
        content=button_internal_content,
        alignment=ft.alignment.center,
        padding=15,
        border_radius=ft.border_radius.all(border_radius),
        ink=True,
        on_click=handle_click,
        bgcolor=ft.Colors.with_opacity(background_opacity, accent_color),
        tooltip=tooltip,
        height=height,
        width=width,
    )

    return ft.Card(
        content=clickable_area,
        elevation=5,
        shadow_color=ft.Colors.with_opacity(shadow_opacity, accent_color),
    )
