from typing import Callable, Optional
import flet as ft

def create_confirmation_dialog(
        title_text: str,
        content_control: ft.Control,
        on_confirm: Callable,
        on_cancel: Callable,
        confirm_button_text: str = "Confirm",
        cancel_button_text: str = "Cancel",
        confirm_button_style: Optional[ft.ButtonStyle] = None,
        modal: bool = True,
        title_color: Optional[str] = None,
) -> ft.AlertDialog:
    """
    Creates a standardized confirmation dialog.
    The caller is responsible for opening it with page.open().
    """
    if confirm_button_style is None or confirm_button_style.bgcolor is None:
        # Critical confirmations stay visually distinct
        confirm_button_style = ft.ButtonStyle(bgcolor=ft.Colors.RED_700, color=ft.Colors.WHITE)

    return ft.AlertDialog(
        modal=modal,
        title=ft.Text(title_text, color=title_color),
        content=content_control,
        actions=[
            ft.TextButton(cancel_button_text, on_click=on_cancel),
            ft.FilledButton(
                confirm_button_text,
                on_click=on_confirm,
                style=confirm_button_style
            ),
        ],
        actions_alignment=ft.MainAxisAlignment.END,
    )

def create_form_dialog(
        page: ft.Page,
        title_text: str,
        form_content_column: ft.Column,
        on_save_callback: Callable,
        on_cancel_callback: Callable,
        save_button_text: str = "Save",
        cancel_button_text: str = "Cancel",
        width_ratio: float = 0.35,
        min_width: int = 400
) -> ft.AlertDialog:
    """
    Creates a dialog for forms. `on_save_callback` validates and saves; it is
    also responsible for closing the dialog once the save has gone through.
    The returned dialog exposes the save button as `save_button` so callers can
    disable it while a save is running.
    """
    dialog_width = max(min_width, page.width * width_ratio if page.width else min_width)
    save_button = ft.FilledButton(save_button_text, on_click=on_save_callback)

    dialog = ft.AlertDialog(
        modal=True,
        title=ft.Text(title_text),
        content=ft.Container(
            content=form_content_column,
            padding=ft.padding.symmetric(horizontal=24, vertical=20),
            border_radius=8,
            width=dialog_width,
        ),
        actions=[
            ft.TextButton(cancel_button_text, on_click=on_cancel_callback, style=ft.ButtonStyle(color=ft.Colors.BLUE_GREY)),
            save_button,
        ],
        actions_alignment=ft.MainAxisAlignment.END,
    )
    dialog.save_button = save_button
    return dialog
