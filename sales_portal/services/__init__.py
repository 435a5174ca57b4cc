from .auth_service import AuthService
from .lead_service import LeadService
from .report_service import ReportService
from .user_service import UserService, default_permissions_for_role
from .session_manager import SessionManager
from .session_storage import ClientSessionStorage, MemorySessionStorage
