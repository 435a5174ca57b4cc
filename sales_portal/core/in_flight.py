import logging
import threading
from contextlib import contextmanager

from sales_portal.core.exceptions import DuplicateSubmissionError

logger = logging.getLogger(__name__)


class InFlightGuard:
    """
    Allows one run of an action at a time.

    Flet delivers event handlers on worker threads, so a fast double click can
    enter the same handler twice; the second entry is rejected rather than
    queued.
    """
    def __init__(self, action_name: str):
        self.action_name = action_name
        self._lock = threading.Lock()

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def run(self):
        if not self._lock.acquire(blocking=False):
            logger.warning(f"Ignoring repeated '{self.action_name}' while the previous one is still running.")
            raise DuplicateSubmissionError(f"'{self.action_name}' is already in progress. Please wait.")
        try:
            yield
        finally:
            self._lock.release()
