from __future__ import annotations

import pytest

from rigol_mso import Transport, TransportError


class FakeTransport(Transport):
    """Scripted transport: records writes, replays canned reads."""

    def __init__(self, responses=None, short_write_on=None, fail_write_on=None):
        self.responses = list(responses or [])
        self.written: list[bytes] = []
        self.read_sizes: list[int] = []
        self.short_write_on = short_write_on
        self.fail_write_on = fail_write_on
        self.closed = False

    @property
    def commands(self) -> list[str]:
        return [w.decode("ascii") for w in self.written]

    def write(self, data: bytes) -> int:
        command = data.decode("ascii")
        if command == self.fail_write_on:
            raise TransportError("link down")
        self.written.append(data)
        if command == self.short_write_on:
            return len(data) - 1
        return len(data)

    def read(self, max_bytes: int) -> bytes:
        self.read_sizes.append(max_bytes)
        if not self.responses:
            raise TransportError("no response scripted")
        return self.responses.pop(0)[:max_bytes]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def no_sleep(monkeypatch):
    """Replace time.sleep and record requested intervals."""
    calls = []
    monkeypatch.setattr("rigol_mso.time.sleep", calls.append)
    return calls
