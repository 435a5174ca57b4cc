from contextlib import contextmanager

import flet as ft
import pytest

from sales_portal.core.exceptions import FetchError
from sales_portal.ui.components.common import paginated_data_table
from sales_portal.ui.components.common.paginated_data_table import PaginatedDataTable


class EventPage:
    def __init__(self, events):
        self.controls = []
        self.events = events

    def update(self):
        pass

    def open(self, control):
        self.events.append(("open", control))

    def close(self, control):
        self.events.append(("close", control))


@pytest.fixture(autouse=True)
def fake_db_session(monkeypatch):
    @contextmanager
    def fake_session():
        yield object()

    monkeypatch.setattr(paginated_data_table, "get_db_session", fake_session)


@pytest.fixture
def events():
    return []


def _table(page, fetch, no_data_message="Nothing here."):
    return PaginatedDataTable(
        page=page,
        fetch_all_data_func=fetch,
        column_definitions=[{"key": "name", "label": "Name", "sortable": True}],
        action_cell_builder=None,
        no_data_message=no_data_message,
    )


def _first_cell_text(table):
    return table.datatable.rows[0].cells[0].content.value


def test_refresh_happens_before_dialog_closes(events):
    rows = [{"name": "Acme Optics"}]

    def fetch(db):
        events.append(("fetch", len(rows)))
        return list(rows)

    table = _table(EventPage(events), fetch)
    dialog = ft.AlertDialog(title=ft.Text("Quick Add"))
    rows.append({"name": "Bright Eyes"})

    table.close_dialog_and_refresh(dialog, "Lead added.")

    assert [kind for kind, _ in events] == ["fetch", "close", "open"]
    assert events[0] == ("fetch", 2)
    assert events[1][1] is dialog
    assert [item["name"] for item in table.all_items] == ["Acme Optics", "Bright Eyes"]


def test_failed_fetch_shows_error_instead_of_empty_message(events):
    def fetch(db):
        raise FetchError("store offline")

    table = _table(EventPage(events), fetch, no_data_message=lambda total: "No leads found.")
    table.refresh_data_and_ui()

    assert _first_cell_text(table) == "Error loading data: store offline"
    assert [kind for kind, _ in events] == ["open"]


def test_error_message_clears_after_successful_fetch(events):
    responses = [FetchError("store offline"), []]

    def fetch(db):
        response = responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    table = _table(EventPage(events), fetch, no_data_message=lambda total: f"No leads found ({total}).")
    table.refresh_data_and_ui()
    table.refresh_data_and_ui()

    assert _first_cell_text(table) == "No leads found (0)."


def test_filter_func_narrows_rows_and_callable_message_sees_unfiltered_count(events):
    table = PaginatedDataTable(
        page=EventPage(events),
        fetch_all_data_func=lambda db: [{"name": "Acme Optics"}, {"name": "Focus Point"}],
        column_definitions=[{"key": "name", "label": "Name"}],
        action_cell_builder=None,
        filter_func=lambda items: [],
        no_data_message=lambda total: f"{total} hidden by filters",
    )
    table.refresh_data_and_ui()

    assert _first_cell_text(table) == "2 hidden by filters"
