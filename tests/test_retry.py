import time

import pytest

from chnative.errors import ConnectError, DriverError
from chnative.retry import retry_guard


class _Script:
    """Async callable that fails according to a list of outcomes."""

    def __init__(self, outcomes, default=None):
        self.outcomes = list(outcomes)
        self.default = default
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        outcome = self.outcomes.pop(0) if self.outcomes else self.default
        if outcome is not None:
            raise outcome


@pytest.mark.asyncio
async def test_healthy_connection_is_not_reconnected():
    check = _Script([])
    reconnect = _Script([])
    await retry_guard(check, reconnect, 3, 0)
    assert check.calls == 1
    assert reconnect.calls == 0


@pytest.mark.asyncio
async def test_failed_check_then_successful_reconnect():
    check = _Script([DriverError("Timeout error.")])
    reconnect = _Script([])
    await retry_guard(check, reconnect, 3, 0)
    assert reconnect.calls == 1
    assert check.calls == 2


@pytest.mark.asyncio
async def test_no_attempts_left_raises_check_error():
    failure = DriverError("Timeout error.")
    check = _Script([], default=failure)
    reconnect = _Script([])
    with pytest.raises(DriverError) as info:
        await retry_guard(check, reconnect, 0, 0)
    assert info.value is failure
    assert reconnect.calls == 0


@pytest.mark.asyncio
async def test_reconnect_failures_exhaust_attempts():
    failure = ConnectError("refused")
    check = _Script([], default=DriverError("Timeout error."))
    reconnect = _Script([], default=failure)
    with pytest.raises(ConnectError) as info:
        await retry_guard(check, reconnect, 2, 0)
    assert info.value is failure
    assert check.calls == 1
    assert reconnect.calls == 3


@pytest.mark.asyncio
async def test_recovers_after_reconnect_failure():
    check = _Script([DriverError("Timeout error.")])
    reconnect = _Script([ConnectError("refused")])
    await retry_guard(check, reconnect, 2, 0)
    assert reconnect.calls == 2
    assert check.calls == 2


@pytest.mark.asyncio
async def test_os_errors_are_retried():
    check = _Script([ConnectionResetError("reset")])
    reconnect = _Script([])
    await retry_guard(check, reconnect, 1, 0)
    assert reconnect.calls == 1
    assert check.calls == 2


@pytest.mark.asyncio
async def test_unrelated_errors_propagate_immediately():
    check = _Script([ValueError("bug")])
    reconnect = _Script([])
    with pytest.raises(ValueError):
        await retry_guard(check, reconnect, 5, 0)
    assert reconnect.calls == 0


@pytest.mark.asyncio
async def test_waits_between_failed_reconnects():
    check = _Script([DriverError("Timeout error.")])
    reconnect = _Script([ConnectError("refused"), ConnectError("refused")])
    start = time.monotonic()
    await retry_guard(check, reconnect, 3, 0.02)
    elapsed = time.monotonic() - start
    assert elapsed >= 0.04
    assert check.calls == 2