"""
Owner of the signed-in identity.

One `SessionManager` is built in `main` and handed to the router and to every
view. It is the only writer of the current identity; everything else reads it
through the accessors below and listens for changes with `subscribe`.
"""
import logging
import threading
from typing import Callable, List, Optional

from sales_portal.constants import Role
from sales_portal.core.identity import Identity
from sales_portal.core.exceptions import SessionDataError
from sales_portal.data.database import get_db_session
from sales_portal.services.auth_service import AuthService

logger = logging.getLogger("sales_portal")

Verifier = Callable[[str, str], Identity]
IdentityLoader = Callable[[str], Optional[Identity]]
SessionListener = Callable[[], None]


def verify_with_store(login_id: str, password: str) -> Identity:
    with get_db_session() as db:
        return AuthService.authenticate_user(db, login_id, password)


def load_from_store(login_id: str) -> Optional[Identity]:
    with get_db_session() as db:
        return AuthService.load_identity(db, login_id)


class SessionManager:
    def __init__(self, storage, verifier: Verifier = verify_with_store):
        self._storage = storage
        self._verifier = verifier
        self._identity: Optional[Identity] = None
        self._loading = False
        self._listeners: List[SessionListener] = []
        self._lock = threading.RLock()

    @property
    def current_identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    def has_permission(self, capability: str) -> bool:
        identity = self._identity
        if identity is None:
            return False
        return identity.has_permission(capability)

    def has_role(self, role: Role) -> bool:
        identity = self._identity
        if identity is None:
            return False
        return identity.has_role(role)

    def subscribe(self, listener: SessionListener):
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: SessionListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self):
        for listener in list(self._listeners):
            try:
                listener()
            except Exception as e:
                logger.error(f"Session listener {listener!r} failed: {e}", exc_info=True)

    def _set_loading(self, loading: bool):
        with self._lock:
            self._loading = loading
        self._notify()

    def restore(self) -> Optional[Identity]:
        """
        Loads a persisted identity at startup. Anything that cannot be read back
        is discarded and the session starts signed out; this never raises.
        """
        self._set_loading(True)
        restored: Optional[Identity] = None
        try:
            stored = self._storage.load()
            if stored is not None:
                restored = Identity.from_dict(stored)
                logger.info(f"Restored session for '{restored.login_id}'.")
        except SessionDataError as e:
            logger.warning(f"Discarding stored session: {e.message}")
            self._discard_stored_session()
        except Exception as e:
            logger.error(f"Unexpected error while restoring session: {e}", exc_info=True)
            self._discard_stored_session()
        with self._lock:
            self._identity = restored
            self._loading = False
        self._notify()
        return restored

    def _discard_stored_session(self):
        try:
            self._storage.clear()
        except Exception as e:
            logger.error(f"Could not clear stored session: {e}", exc_info=True)

    def refresh(self, loader: IdentityLoader = load_from_store) -> Optional[Identity]:
        """
        Re-reads the current account from the store so a restored session picks
        up deactivation or permission changes. A deleted account signs out.
        Store failures keep the restored identity.
        """
        identity = self._identity
        if identity is None:
            return None
        try:
            fresh = loader(identity.login_id)
        except Exception as e:
            logger.error(f"Could not refresh session for '{identity.login_id}': {e}", exc_info=True)
            return identity

        if fresh is None:
            logger.warning(f"Account '{identity.login_id}' no longer exists. Signing out.")
            self.sign_out()
            return None

        with self._lock:
            self._identity = fresh
        self._save(fresh)
        self._notify()
        return fresh

    def sign_in(self, login_id: str, password: str) -> Identity:
        """
        Raises:
            ValidationError: If login ID or password is empty.
            InvalidCredentialsError: For unknown login ID, wrong password or deactivated account.
        """
        self._set_loading(True)
        try:
            identity = self._verifier(login_id, password)
        except Exception:
            self._set_loading(False)
            raise

        with self._lock:
            self._identity = identity
            self._loading = False
        self._save(identity)
        logger.info(f"Session started for '{identity.login_id}'.")
        self._notify()
        return identity

    def _save(self, identity: Identity):
        try:
            self._storage.save(identity.to_dict())
        except Exception as e:
            # The session still works for this run; it just won't survive a restart
            logger.error(f"Could not persist session for '{identity.login_id}': {e}", exc_info=True)

    def sign_out(self):
        """Clears the identity and the stored record. Safe to call when already signed out."""
        with self._lock:
            previous = self._identity
            self._identity = None
        self._discard_stored_session()
        if previous is not None:
            logger.info(f"Session ended for '{previous.login_id}'.")
        self._notify()
