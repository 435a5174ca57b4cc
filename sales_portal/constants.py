from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    DISTRIBUTOR = "distributor"
    RETAILER = "retailer"
    SALES = "sales"


ALL_USER_ROLES = [Role.ADMIN, Role.DISTRIBUTOR, Role.RETAILER, Role.SALES]

ROLE_DISPLAY_NAMES = {
    Role.ADMIN: "Administrator",
    Role.DISTRIBUTOR: "Distributor",
    Role.RETAILER: "Retailer",
    Role.SALES: "Sales Staff",
}

# Permission strings
PERM_LEADS_READ = "leads:read"
PERM_LEADS_CREATE = "leads:create"
PERM_LEADS_UPDATE = "leads:update"
PERM_ORDERS_READ = "orders:read"
PERM_ORDERS_CREATE = "orders:create"
PERM_USERS_MANAGE = "users:manage"
PERM_REPORTS_READ = "reports:read"

ALL_PERMISSIONS = [
    PERM_LEADS_READ, PERM_LEADS_CREATE, PERM_LEADS_UPDATE,
    PERM_ORDERS_READ, PERM_ORDERS_CREATE,
    PERM_USERS_MANAGE, PERM_REPORTS_READ,
]

# Granted when an account is created without an explicit permission list
DEFAULT_ROLE_PERMISSIONS = {
    Role.ADMIN: list(ALL_PERMISSIONS),
    Role.DISTRIBUTOR: [PERM_ORDERS_READ, PERM_REPORTS_READ],
    Role.RETAILER: [PERM_ORDERS_READ, PERM_ORDERS_CREATE],
    Role.SALES: [PERM_LEADS_READ, PERM_LEADS_CREATE, PERM_LEADS_UPDATE],
}

# Route paths
LOGIN_ROUTE = "/login"
FIRST_RUN_SETUP_ROUTE = "/setup"
DASHBOARD_ROUTE = "/dashboard"
LEADS_ROUTE = "/leads"
ADD_LEAD_ROUTE = "/leads/add"
ORDERS_ROUTE = "/orders"
NEW_ORDER_ROUTE = "/orders/new"
USERS_ROUTE = "/users"
ADD_USER_ROUTE = "/users/add"
REPORTS_ROUTE = "/reports"
SETTINGS_ROUTE = "/settings"

# Lead status lifecycle
LEAD_STATUS_NEW = "new"
LEAD_STATUS_CONTACTED = "contacted"
LEAD_STATUS_VISITED = "visited"
LEAD_STATUS_QUALIFIED = "qualified"
LEAD_STATUS_CONVERTED = "converted"
LEAD_STATUS_REJECTED = "rejected"
LEAD_STATUS_INACTIVE = "inactive"

ALL_LEAD_STATUSES = [
    LEAD_STATUS_NEW, LEAD_STATUS_CONTACTED, LEAD_STATUS_VISITED, LEAD_STATUS_QUALIFIED,
    LEAD_STATUS_CONVERTED, LEAD_STATUS_REJECTED, LEAD_STATUS_INACTIVE,
]
# Sentinel used by the status dropdown
LEAD_STATUS_FILTER_ALL = "all"

LEAD_PRIORITIES = ["low", "medium", "high"]
DEFAULT_LEAD_PRIORITY = "medium"

LEAD_BUSINESS_TYPES = {
    "independent": "Independent Store",
    "chain": "Chain Store",
    "hospital": "Hospital",
    "clinic": "Eye Clinic",
}

LEAD_SOURCES = {
    "cold_call": "Cold Call",
    "referral": "Referral",
    "website": "Website",
    "exhibition": "Exhibition",
    "walk_in": "Walk-in",
    "social_media": "Social Media",
}

WEEK_DAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

# Visit capture
VISIT_INTEREST_LEVELS = ["low", "medium", "high"]
VISIT_NEXT_ACTIONS = {
    "follow_up": "Follow Up",
    "proposal": "Send Proposal",
    "convert": "Convert",
    "close": "Close",
    "schedule_demo": "Schedule Demo",
}
