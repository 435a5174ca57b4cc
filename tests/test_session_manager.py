import pytest

from sales_portal.constants import Role
from sales_portal.core.exceptions import InvalidCredentialsError
from sales_portal.services.session_manager import SessionManager
from sales_portal.services.session_storage import MemorySessionStorage
from tests.conftest import make_identity


class StubVerifier:
    def __init__(self, identity=None, error=None):
        self.identity = identity
        self.error = error
        self.loading_seen = []
        self.manager = None

    def __call__(self, login_id, password):
        if self.manager is not None:
            self.loading_seen.append(self.manager.is_loading)
        if self.error:
            raise self.error
        return self.identity


def test_sign_in_stores_identity_and_notifies():
    identity = make_identity(role=Role.SALES, login_id="sales001")
    storage = MemorySessionStorage()
    verifier = StubVerifier(identity)
    manager = SessionManager(storage, verifier=verifier)
    verifier.manager = manager
    events = []
    manager.subscribe(lambda: events.append(manager.current_identity))

    assert manager.sign_in("sales001", "pw") == identity
    assert manager.current_identity == identity
    assert manager.is_authenticated
    assert not manager.is_loading
    assert verifier.loading_seen == [True]
    assert storage.load() == identity.to_dict()
    assert events[-1] == identity


def test_failed_sign_in_leaves_session_empty():
    storage = MemorySessionStorage()
    manager = SessionManager(storage, verifier=StubVerifier(error=InvalidCredentialsError()))
    with pytest.raises(InvalidCredentialsError):
        manager.sign_in("sales001", "wrong")
    assert manager.current_identity is None
    assert not manager.is_loading
    assert storage.load() is None


def test_sign_out_clears_storage_and_is_idempotent():
    identity = make_identity()
    storage = MemorySessionStorage(identity.to_dict())
    manager = SessionManager(storage)
    manager.restore()
    manager.sign_out()
    manager.sign_out()
    assert manager.current_identity is None
    assert storage.load() is None


def test_restore_reads_persisted_identity():
    identity = make_identity(role=Role.ADMIN, login_id="admin001")
    manager = SessionManager(MemorySessionStorage(identity.to_dict()))
    assert manager.restore() == identity
    assert manager.has_role(Role.ADMIN)
    assert not manager.is_loading


@pytest.mark.parametrize("stored", ["garbage", {"login_id": "x"}, {**make_identity().to_dict(), "role": "root"}])
def test_restore_discards_malformed_record(stored):
    storage = MemorySessionStorage(stored)
    manager = SessionManager(storage)
    assert manager.restore() is None
    assert manager.current_identity is None
    assert storage.load() is None


def test_refresh_picks_up_deactivation():
    identity = make_identity(login_id="sales001")
    storage = MemorySessionStorage(identity.to_dict())
    manager = SessionManager(storage)
    manager.restore()
    deactivated = make_identity(login_id="sales001", is_active=False)
    assert manager.refresh(loader=lambda login_id: deactivated) == deactivated
    assert storage.load()["is_active"] is False


def test_refresh_signs_out_deleted_account():
    manager = SessionManager(MemorySessionStorage(make_identity().to_dict()))
    manager.restore()
    assert manager.refresh(loader=lambda login_id: None) is None
    assert manager.current_identity is None


def test_refresh_keeps_identity_when_store_fails():
    identity = make_identity()
    manager = SessionManager(MemorySessionStorage(identity.to_dict()))
    manager.restore()

    def failing_loader(login_id):
        raise RuntimeError("store offline")

    assert manager.refresh(loader=failing_loader) == identity


def test_failing_listener_does_not_block_others():
    manager = SessionManager(MemorySessionStorage(), verifier=StubVerifier(make_identity()))
    calls = []

    def broken():
        raise RuntimeError("boom")

    manager.subscribe(broken)
    manager.subscribe(lambda: calls.append(1))
    manager.sign_in("user001", "pw")
    assert calls


def test_unsubscribe_stops_notifications():
    manager = SessionManager(MemorySessionStorage(), verifier=StubVerifier(make_identity()))
    calls = []
    listener = lambda: calls.append(1)
    manager.subscribe(listener)
    manager.unsubscribe(listener)
    manager.sign_in("user001", "pw")
    assert calls == []
