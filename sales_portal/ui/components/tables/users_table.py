import logging
from typing import List, Optional, Dict, Any
import flet as ft

from sales_portal.core.exceptions import AppException
from sales_portal.core.identity import Identity
from sales_portal.core.models import User
from sales_portal.core.navigation import role_display_name
from sales_portal.services.user_service import UserService
from sales_portal.data.database import get_db_session
from sales_portal.ui.components.common.paginated_data_table import PaginatedDataTable
from sales_portal.ui.components.common.dialog_factory import create_confirmation_dialog

logger = logging.getLogger("sales_portal")

class UsersTable(PaginatedDataTable[User]):
    def __init__(self, page: ft.Page, user_service: UserService, acting_identity: Identity):
        self.user_service = user_service
        self.acting_identity = acting_identity
        self.search_term = ""

        column_definitions: List[Dict[str, Any]] = [
            {"key": "login_id", "label": "Login ID", "sortable": True},
            {"key": "display_name", "label": "Name", "sortable": True},
            {"key": "role", "label": "Role", "sortable": True,
             "display_formatter": lambda val: ft.Text(role_display_name(val))},
            {"key": "territory_id", "label": "Territory", "sortable": True},
            {"key": "last_login", "label": "Last Login", "sortable": True,
             "display_formatter": lambda val_date: ft.Text(val_date.strftime("%Y-%m-%d %H:%M") if val_date else "Never")},
            {"key": "is_active", "label": "Is Active?", "sortable": True,
             "display_formatter": lambda val_bool: ft.Text("Yes" if val_bool else "No", color=ft.Colors.GREEN if val_bool else ft.Colors.RED)},
        ]

        super().__init__(
            page=page,
            fetch_all_data_func=self.user_service.get_all_users,
            column_definitions=column_definitions,
            action_cell_builder=self._build_action_cell,
            filter_func=self._filter_users,
            rows_per_page=10,
            initial_sort_key="login_id",
            initial_sort_ascending=True,
            no_data_message="No users found.",
        )

    def set_search_term(self, search_term: str):
        self.search_term = search_term
        self.apply_filters()

    def _filter_users(self, users: List[User]) -> List[User]:
        term = self.search_term.strip().lower()
        if not term:
            return users
        return [
            u for u in users
            if term in (u.login_id or "").lower()
            or term in (u.display_name or "").lower()
            or term in role_display_name(u.role).lower()
        ]

    def _build_action_cell(self, user: User, table_instance: PaginatedDataTable) -> ft.DataCell:
        actions_controls = []
        if user.id != self.acting_identity.user_id: # No self-deactivation
            if user.is_active:
                actions_controls.append(ft.IconButton(
                    icon=ft.Icons.DESKTOP_ACCESS_DISABLED_OUTLINED, tooltip="Deactivate user", icon_color=ft.Colors.RED_ACCENT_700,
                    on_click=lambda e, u=user: self._confirm_status_change_dialog(u, activate=False)
                ))
            else:
                actions_controls.append(ft.IconButton(
                    icon=ft.Icons.DESKTOP_WINDOWS_ROUNDED, tooltip="Reactivate user", icon_color=ft.Colors.GREEN_ACCENT_700,
                    on_click=lambda e, u=user: self._confirm_status_change_dialog(u, activate=True)
                ))
        return ft.DataCell(ft.Row(actions_controls, spacing=0, alignment=ft.MainAxisAlignment.END))

    def _confirm_status_change_dialog(self, user: User, activate: bool):
        verb = "reactivate" if activate else "deactivate"
        color = ft.Colors.GREEN_700 if activate else ft.Colors.RED_700
        dialog: Optional[ft.AlertDialog] = None

        def on_confirm(e):
            self._handle_status_change_confirmed(user, activate, dialog)

        dialog = create_confirmation_dialog(
            title_text=f"Confirm {verb.capitalize()}", title_color=color,
            content_control=ft.Text(f"Are you sure you want to {verb} user '{user.login_id}'?"),
            on_confirm=on_confirm,
            on_cancel=lambda e: self.page.close(dialog),
            confirm_button_text=f"{verb.capitalize()} User",
            confirm_button_style=ft.ButtonStyle(bgcolor=color, color=ft.Colors.WHITE)
        )
        self.page.open(dialog)

    def _handle_status_change_confirmed(self, user: User, activate: bool, dialog: ft.AlertDialog):
        try:
            with get_db_session() as db:
                if activate:
                    self.user_service.reactivate_user(db, user.id)
                else:
                    self.user_service.deactivate_user(db, user.id, current_acting_user_id=self.acting_identity.user_id)
            self.close_dialog_and_refresh(dialog, f"User '{user.login_id}' {'reactivated' if activate else 'deactivated'}.")
        except AppException as ex:
            self.page.close(dialog)
            self.show_error_snackbar(ex.message)
        except Exception as ex_general:
            logger.error(f"Unexpected error changing status of '{user.login_id}': {ex_general}", exc_info=True)
            self.page.close(dialog)
            self.show_error_snackbar(f"An unexpected error: {ex_general}")
