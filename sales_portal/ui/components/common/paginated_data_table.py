import logging
from math import ceil
from typing import List, Callable, Optional, Any, Dict, TypeVar, Generic
import flet as ft
import datetime
import inspect

from sales_portal.core.exceptions import AppException
from sales_portal.data.database import get_db_session

logger = logging.getLogger("sales_portal")

T = TypeVar('T')

class PaginatedDataTable(ft.Container, Generic[T]):
    """
    Card-wrapped DataTable with column sorting and paging.

    Rows come from `fetch_all_data_func(db)`. Narrowing is delegated to
    `filter_func(items)` so each table decides what a search means; without one
    every fetched row is shown. `no_data_message` may be a callable taking the
    unfiltered row count, so an empty store and an over-narrow filter can say
    different things.
    """
    def __init__(
            self,
            page: ft.Page,
            fetch_all_data_func: Callable[[Any], List[T]],
            column_definitions: List[Dict[str, Any]],
            action_cell_builder: Optional[Callable[[T, 'PaginatedDataTable[T]'], ft.DataCell]],
            filter_func: Optional[Callable[[List[T]], List[T]]] = None,
            rows_per_page: int = 10,
            initial_sort_key: Optional[str] = None,
            initial_sort_ascending: bool = True,
            on_data_changed: Optional[Callable[[List[T]], None]] = None,
            no_data_message: Any = "No data available.",
            card_elevation: float = 2,
            card_padding: int = 15,
            heading_row_height: int = 40,
            data_row_max_height: int = 48,
            **kwargs
    ):
        super().__init__(expand=True, padding=ft.padding.symmetric(horizontal=5), **kwargs)
        self.page = page
        self.fetch_all_data_func = fetch_all_data_func
        self.column_definitions = column_definitions
        self.action_cell_builder = action_cell_builder
        self.filter_func = filter_func
        self.rows_per_page = rows_per_page
        self.on_data_changed = on_data_changed
        self.no_data_message = no_data_message

        self._all_unfiltered_data: List[T] = []
        self._load_error: Optional[str] = None
        self._displayed_data: List[T] = []

        self._current_sort_column_key: Optional[str] = initial_sort_key
        self._current_sort_ascending: bool = initial_sort_ascending
        self._current_page_number: int = 1

        self.datatable = ft.DataTable(
            columns=[],
            rows=[],
            column_spacing=20,
            vertical_lines=ft.BorderSide(width=0.5, color=ft.Colors.with_opacity(0.15, ft.Colors.ON_SURFACE)),
            horizontal_lines=ft.BorderSide(width=0.5, color=ft.Colors.with_opacity(0.1, ft.Colors.ON_SURFACE)),
            sort_ascending=self._current_sort_ascending,
            heading_row_height=heading_row_height,
            data_row_max_height=data_row_max_height,
        )
        scrollable_table_row = ft.Row(
            [self.datatable],
            scroll=ft.ScrollMode.ADAPTIVE, # Allows horizontal scrolling for the DataTable
            expand=True,
            vertical_alignment=ft.CrossAxisAlignment.START,
        )

        self._initialize_columns()

        self.prev_button = ft.IconButton(
            ft.Icons.KEYBOARD_ARROW_LEFT_ROUNDED, on_click=self._prev_page, tooltip="Previous Page", disabled=True
        )
        self.next_button = ft.IconButton(
            ft.Icons.KEYBOARD_ARROW_RIGHT_ROUNDED, on_click=self._next_page, tooltip="Next Page", disabled=True
        )
        self.page_info_text = ft.Text(
            f"Page {self._current_page_number} of 1",
            weight=ft.FontWeight.W_500, color=ft.Colors.ON_SURFACE_VARIANT
        )

        pagination_controls_row = ft.Row(
            [self.prev_button, self.page_info_text, self.next_button],
            alignment=ft.MainAxisAlignment.CENTER,
            vertical_alignment=ft.CrossAxisAlignment.CENTER,
            spacing=10,
        )

        self.content = ft.Card(
            content=ft.Container(
                content=ft.Column(
                    [
                        ft.Container(content=scrollable_table_row, expand=True, padding=ft.padding.only(bottom=10)),
                        pagination_controls_row
                    ],
                    expand=True, spacing=5
                ),
                padding=card_padding,
                border_radius=8
            ),
            elevation=card_elevation,
        )

    @property
    def all_items(self) -> List[T]:
        return list(self._all_unfiltered_data)

    def _initialize_columns(self):
        ft_columns: List[ft.DataColumn] = []
        for col_def in self.column_definitions:
            ft_columns.append(
                ft.DataColumn(
                    ft.Text(col_def['label'], weight=ft.FontWeight.BOLD, size=13),
                    numeric=col_def.get('numeric', False),
                    on_sort=self._handle_column_sort if col_def.get('sortable', False) else None,
                )
            )
        if self.action_cell_builder:
            ft_columns.append(ft.DataColumn(ft.Text("Actions", weight=ft.FontWeight.BOLD, size=13), numeric=True))

        self.datatable.columns = ft_columns

        if self._current_sort_column_key:
            keys = [cd['key'] for cd in self.column_definitions]
            if self._current_sort_column_key in keys:
                self.datatable.sort_column_index = keys.index(self._current_sort_column_key)
            else:
                self._current_sort_column_key = None

    def _handle_column_sort(self, e: ft.DataColumnSortEvent):
        col_def = self.column_definitions[e.column_index]
        if self._current_sort_column_key == col_def['key']:
            self._current_sort_ascending = not self._current_sort_ascending
        else:
            self._current_sort_column_key = col_def['key']
            self._current_sort_ascending = True

        self.datatable.sort_column_index = e.column_index
        self.datatable.sort_ascending = self._current_sort_ascending
        self._current_page_number = 1
        self.apply_filters()

    def _raw_value(self, item: T, key: str) -> Any:
        if isinstance(item, dict):
            return item.get(key)
        return getattr(item, key, None)

    def _get_sort_value_for_item(self, item: T, sort_key: str) -> Any:
        """Case-insensitive for strings; None sorts first when ascending."""
        raw_value = self._raw_value(item, sort_key)
        if isinstance(raw_value, str):
            return (1, raw_value.lower())
        if raw_value is None:
            return (0, 0)
        if isinstance(raw_value, datetime.datetime):
            return (1, raw_value.timestamp())
        return (1, raw_value)

    def apply_filters(self):
        """Re-applies `filter_func` and the current sort to the already fetched rows."""
        if self.filter_func:
            self._displayed_data = self.filter_func(list(self._all_unfiltered_data))
        else:
            self._displayed_data = list(self._all_unfiltered_data)

        if self._current_sort_column_key:
            sort_key_attr = self._current_sort_column_key
            self._displayed_data.sort(
                key=lambda item_to_sort: self._get_sort_value_for_item(item_to_sort, sort_key_attr),
                reverse=not self._current_sort_ascending
            )
        total_pages = max(1, ceil(len(self._displayed_data) / self.rows_per_page))
        self._current_page_number = min(self._current_page_number, total_pages)
        self._update_datatable_rows()

    def _format_cell(self, col_def: Dict[str, Any], raw_value: Any, item: T) -> ft.Control:
        formatter = col_def.get('display_formatter')
        if formatter and callable(formatter):
            if len(inspect.signature(formatter).parameters) == 2:
                return formatter(raw_value, item)
            return formatter(raw_value)
        return ft.Text(str(raw_value) if raw_value is not None else "", size=12.5)

    def _build_datarow(self, item: T) -> ft.DataRow:
        cells: List[ft.DataCell] = []
        for col_def in self.column_definitions:
            raw_value = self._raw_value(item, col_def['key'])
            cells.append(ft.DataCell(self._format_cell(col_def, raw_value, item)))

        if self.action_cell_builder:
            cells.append(self.action_cell_builder(item, self))

        return ft.DataRow(cells=cells, color={"hovered": ft.Colors.with_opacity(0.05, ft.Colors.PRIMARY)})

    def _current_no_data_message(self) -> str:
        if self._load_error:
            return self._load_error
        if callable(self.no_data_message):
            return self.no_data_message(len(self._all_unfiltered_data))
        return self.no_data_message

    def _update_datatable_rows(self):
        num_defined_columns = len(self.datatable.columns) if self.datatable.columns else 0

        if not self._displayed_data:
            if num_defined_columns > 0:
                # DataTable has no colspan; the message goes in the first cell and the rest stay empty
                first_cell = ft.DataCell(ft.Text(self._current_no_data_message(), italic=True))
                cells_for_no_data_row = [first_cell] + [ft.DataCell(ft.Text("")) for _ in range(1, num_defined_columns)]
                self.datatable.rows = [ft.DataRow(cells=cells_for_no_data_row)]
            else:
                self.datatable.rows = []
        else:
            start_index = (self._current_page_number - 1) * self.rows_per_page
            end_index = start_index + self.rows_per_page
            paginated_items = self._displayed_data[start_index:end_index]
            self.datatable.rows = [self._build_datarow(item) for item in paginated_items]

        self._update_pagination_controls()
        if self.page and self.page.controls:
            self.page.update()

    def _update_pagination_controls(self):
        total_rows = len(self._displayed_data)
        total_pages = max(1, ceil(total_rows / self.rows_per_page))

        self.page_info_text.value = f"Page {self._current_page_number} of {total_pages}"
        self.prev_button.disabled = self._current_page_number == 1
        self.next_button.disabled = self._current_page_number == total_pages

    def _prev_page(self, e):
        if self._current_page_number > 1:
            self._current_page_number -= 1
            self._update_datatable_rows()

    def _next_page(self, e):
        total_pages = max(1, ceil(len(self._displayed_data) / self.rows_per_page))
        if self._current_page_number < total_pages:
            self._current_page_number += 1
            self._update_datatable_rows()

    def refresh_data_and_ui(self):
        """
        Fetches every row again. A failed fetch leaves the table empty, shows
        the failure in the empty row instead of the no-data text, and reports it
        in a snack bar.
        """
        self._load_error = None
        try:
            with get_db_session() as db:
                self._all_unfiltered_data = self.fetch_all_data_func(db)
        except AppException as e:
            logger.error(f"Error refreshing table data: {e.message}")
            self._all_unfiltered_data = []
            self._load_error = f"Error loading data: {e.message}"
            self.show_error_snackbar(self._load_error)
        except Exception as e:
            logger.error(f"Unexpected error refreshing table data: {e}", exc_info=True)
            self._all_unfiltered_data = []
            self._load_error = f"Error loading data: {type(e).__name__}"
            self.show_error_snackbar(self._load_error)

        if self.on_data_changed:
            self.on_data_changed(self.all_items)
        self._current_page_number = 1
        self.apply_filters()

    def close_dialog_and_refresh(self, dialog_to_close: Optional[ft.AlertDialog] = None, success_message: Optional[str] = None):
        self.refresh_data_and_ui()
        if dialog_to_close:
            self.page.close(dialog_to_close)
        if success_message and self.page:
            self.page.open(ft.SnackBar(ft.Text(success_message), open=True))

    def show_error_snackbar(self, message: str):
        if self.page:
            self.page.open(ft.SnackBar(ft.Text(message), open=True, bgcolor=ft.Colors.ERROR))
