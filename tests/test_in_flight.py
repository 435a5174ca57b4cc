import pytest

from sales_portal.core.exceptions import DuplicateSubmissionError
from sales_portal.core.in_flight import InFlightGuard


def test_second_run_while_first_in_flight_is_rejected():
    guard = InFlightGuard("create lead")
    with guard.run():
        assert guard.in_flight
        with pytest.raises(DuplicateSubmissionError):
            with guard.run():
                pass
    assert not guard.in_flight


def test_guard_is_released_after_an_error():
    guard = InFlightGuard("create lead")
    with pytest.raises(RuntimeError):
        with guard.run():
            raise RuntimeError("store down")
    with guard.run():
        assert guard.in_flight
