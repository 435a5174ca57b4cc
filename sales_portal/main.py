import flet as ft
from sqlalchemy.exc import OperationalError
import logging
import logging.handlers
import sys

from sales_portal.ui.router import Router
from sales_portal.data.database import init_db, get_db_session
from sales_portal.constants import DASHBOARD_ROUTE, FIRST_RUN_SETUP_ROUTE
from sales_portal.config import APP_TITLE, DEFAULT_THEME_MODE, DB_BASE_DIR, VERSION, LOGS_BASE_DIR, LOG_BACKUP_COUNT
from sales_portal.services import UserService, SessionManager, ClientSessionStorage
from sales_portal.core.exceptions import DatabaseError

logger = logging.getLogger("sales_portal")

LOG_FILENAME = f"{APP_TITLE.lower().replace(' ', '_')}.log"


def setup_logging():
    """Configures logging for the application with daily rotation."""
    logger.setLevel(logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    console_handler.setLevel(logging.DEBUG)

    try:
        LOGS_BASE_DIR.mkdir(parents=True, exist_ok=True)
    except Exception as e:
        print(f"ERROR: Could not create logs directory at {LOGS_BASE_DIR.resolve()}. Error: {e}")
        logger.addHandler(console_handler)
        logger.warning("Logging directory creation failed. Using console-only logging.")
        return

    log_file_path = LOGS_BASE_DIR.joinpath(LOG_FILENAME)
    file_logging = True
    try:
        timed_file_handler = logging.handlers.TimedRotatingFileHandler(
            log_file_path,
            when='midnight',
            interval=1,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8',
            delay=False,
            utc=False
        )
        timed_file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s'
        ))
        logger.addHandler(timed_file_handler)
    except Exception as e:
        print(f"ERROR: Could not create log file handler. Error: {e}")
        file_logging = False

    logger.addHandler(console_handler)

    logger.info(f"--- Logging initialized for {APP_TITLE} v{VERSION} ---")
    if file_logging:
        logger.info(f"Log file: {log_file_path.resolve()} (rotates daily, keeps {LOG_BACKUP_COUNT} backups)")
    else:
        logger.warning("File logging unavailable - using console logging only")

    def handle_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.critical("Unhandled exception:", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = handle_exception


def _show_startup_error(page: ft.Page, headline: str):
    page.controls.clear(); page.appbar = None
    page.add(ft.Column([
        ft.Icon(ft.Icons.ERROR_OUTLINE_ROUNDED, color=ft.Colors.RED_ACCENT_700, size=60),
        ft.Text(APP_TITLE, size=24, weight=ft.FontWeight.BOLD, text_align=ft.TextAlign.CENTER),
        ft.Text(headline, size=18, weight=ft.FontWeight.BOLD, color=ft.Colors.RED_700, text_align=ft.TextAlign.CENTER),
        ft.Container(height=10),
        ft.Text(f"Please check logs at '{LOGS_BASE_DIR.joinpath(LOG_FILENAME)}' for details.", text_align=ft.TextAlign.CENTER, size=12),
    ], horizontal_alignment=ft.CrossAxisAlignment.CENTER, alignment=ft.MainAxisAlignment.CENTER, spacing=10, expand=True))
    page.update()


def main(page: ft.Page):
    try:
        DB_BASE_DIR.mkdir(parents=True, exist_ok=True)
    except Exception as e:
        initial_error_message = f"CRITICAL ERROR: Could not create data directory at {DB_BASE_DIR.resolve()}. Error: {e}. Logging might be affected."
        print(initial_error_message)
        page.add(ft.Column([
            ft.Text(APP_TITLE, size=24, weight=ft.FontWeight.BOLD),
            ft.Text(initial_error_message, color=ft.Colors.RED, size=16)
        ], horizontal_alignment=ft.CrossAxisAlignment.CENTER, alignment=ft.MainAxisAlignment.CENTER, expand=True))
        page.update()
        return

    try:
        setup_logging()
    except Exception as e:
        print(f"CRITICAL ERROR: Failed to initialize logging system: {e}")

    logger.info("Application starting...")

    page.title = APP_TITLE
    page.window.maximized = True
    page.theme = ft.Theme(color_scheme_seed=ft.Colors.BLUE_GREY, use_material3=True)
    page.theme_mode = ft.ThemeMode.DARK if DEFAULT_THEME_MODE.lower() == "dark" else ft.ThemeMode.LIGHT

    initial_route = DASHBOARD_ROUTE

    try:
        init_db()
        session = SessionManager(ClientSessionStorage(page))
        session.restore()
        session.refresh()
        router = Router(page, session)
        with get_db_session() as db:
            if not UserService().any_users_exist(db):
                initial_route = FIRST_RUN_SETUP_ROUTE
                logger.info(f"No users found. Navigating to First Run Setup: {initial_route}")
    except (DatabaseError, OperationalError):
        logger.critical("A critical database error occurred during application startup.", exc_info=True)
        _show_startup_error(page, "Application Startup Failed: Database Error")
        return
    except Exception:
        logger.critical("An unexpected critical error occurred during application startup.", exc_info=True)
        _show_startup_error(page, "Application Startup Failed: Unexpected Error")
        return

    logger.info(f"Navigating to initial route: {initial_route}")
    router.navigate_to(initial_route)
    logger.info("Application main function completed setup.")


def run():
    ft.app(target=main)


if __name__ == "__main__":
    run()
