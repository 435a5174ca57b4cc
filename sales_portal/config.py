from pathlib import Path
import os

# Database Configuration
DB_FILENAME = "sales_portal.db"
DEFAULT_DB_BASE_DIR_NAME = "db_data"
DB_BASE_DIR_STR = os.environ.get("SALES_PORTAL_DB_DIR", DEFAULT_DB_BASE_DIR_NAME)
DB_BASE_DIR = Path(DB_BASE_DIR_STR)

SQLALCHEMY_DATABASE_URL = os.environ.get(
    "SALES_PORTAL_DATABASE_URL", f"sqlite:///{DB_BASE_DIR.joinpath(DB_FILENAME)}"
)

# Logging
LOGS_BASE_DIR = Path(os.environ.get("SALES_PORTAL_LOG_DIR", str(DB_BASE_DIR.joinpath("logs"))))
LOG_BACKUP_COUNT = int(os.environ.get("SALES_PORTAL_LOG_BACKUPS", "15"))

# Session persistence (Flet client storage key)
SESSION_STORAGE_KEY = os.environ.get("SALES_PORTAL_SESSION_KEY", "sales_portal.current_user")

# Upper bound on parent hops when building breadcrumbs
BREADCRUMB_MAX_DEPTH = int(os.environ.get("SALES_PORTAL_BREADCRUMB_MAX_DEPTH", "16"))

VERSION = "0.1"

# Application Settings
APP_TITLE = "Sales Portal"
COMPANY_NAME = os.environ.get("SALES_PORTAL_COMPANY_NAME", "Sales Portal")
DEFAULT_THEME_MODE = "light" # "light" or "dark"
