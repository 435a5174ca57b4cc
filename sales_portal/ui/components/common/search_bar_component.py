from typing import Callable
import flet as ft

class SearchBarComponent(ft.Container):
    """Text field that reports every edit. Filtering is in-memory, so no debounce."""
    def __init__(
            self,
            on_search_changed: Callable[[str], None],
            label: str = "Search...",
            hint_text: str = "Type to search...",
            expand: bool = True,
            **kwargs
    ):
        super().__init__(expand=expand, **kwargs)
        self.on_search_changed = on_search_changed

        self.search_field = ft.TextField(
            label=label,
            hint_text=hint_text,
            on_change=self._handle_on_change,
            prefix_icon=ft.Icons.SEARCH,
            border_radius=8,
            expand=True,
        )
        self.content = self.search_field

    def _handle_on_change(self, e: ft.ControlEvent):
        self.on_search_changed(e.control.value or "")
