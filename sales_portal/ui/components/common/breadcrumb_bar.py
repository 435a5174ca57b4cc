from typing import Any, List
import flet as ft

from sales_portal.core.navigation import BreadcrumbItem, breadcrumbs_for


class BreadcrumbBar(ft.Container):
    """
    Renders the trail for `current_path`. Hidden entirely for top-level pages;
    long trails show the omitted middle entries behind an ellipsis menu.
    """
    def __init__(self, router: Any, current_path: str, **kwargs):
        super().__init__(padding=ft.padding.symmetric(horizontal=20, vertical=8), **kwargs)
        self.router = router
        self.display = breadcrumbs_for(current_path)
        self.visible = self.display is not None
        self.content = self._build() if self.display else None

    def _separator(self) -> ft.Control:
        return ft.Icon(ft.Icons.CHEVRON_RIGHT_ROUNDED, size=16, color=ft.Colors.ON_SURFACE_VARIANT)

    def _item_control(self, item: BreadcrumbItem) -> ft.Control:
        if item.current or not item.href:
            return ft.Text(item.label, weight=ft.FontWeight.BOLD, size=13)
        return ft.TextButton(
            item.label,
            on_click=lambda e, href=item.href: self.router.navigate_to(href),
            style=ft.ButtonStyle(padding=ft.padding.symmetric(horizontal=4)),
        )

    def _collapsed_marker(self) -> ft.Control:
        return ft.PopupMenuButton(
            content=ft.Text("...", size=13, weight=ft.FontWeight.BOLD),
            tooltip="Show hidden pages",
            items=[
                ft.PopupMenuItem(text=item.label, on_click=lambda e, href=item.href: self.router.navigate_to(href))
                for item in self.display.collapsed
            ],
        )

    def _build(self) -> ft.Row:
        controls: List[ft.Control] = []
        for item in self.display.leading:
            if controls:
                controls.append(self._separator())
            controls.append(self._item_control(item))
        if self.display.has_collapsed_marker:
            controls.append(self._separator())
            controls.append(self._collapsed_marker())
        for item in self.display.trailing:
            controls.append(self._separator())
            controls.append(self._item_control(item))
        return ft.Row(controls, spacing=2, vertical_alignment=ft.CrossAxisAlignment.CENTER)
