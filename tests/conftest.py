# Shared pytest fixtures
from __future__ import annotations

import pytest

from core.records import MaintenanceRecord


SAMPLE_CSV = (
    "Ruangan,Item,Komplain,Tgl Komplain,Status,Tgl Perbaikan,Kendala,Hambatan,Catatan\r\n"
    "ICU,Bed,Rem macet,01/02/2024,Proses,,,,\r\n"
    "ICU,Bed,Rem macet,02/02/2024,Selesai,03/02/2024,,-,Ganti rem\r\n"
    ",,,,,,,,\r\n"
    "IGD,Chair,\"Roda lepas, patah\",05/02/2024,Proses,-,Sparepart,Tunggu sparepart,\r\n"
    ",Lampu,-,06/02/2024,,0,,null,\r\n"
)


class FakeResponse:
    def __init__(self, text: str = "", status_error: Exception | None = None):
        self.text = text
        self._status_error = status_error

    def raise_for_status(self):
        if self._status_error is not None:
            raise self._status_error


class FakeSession:
    """Stands in for requests.Session; replays queued responses or errors."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append({"url": url, "timeout": timeout})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture()
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture()
def make_record():
    counter = {"n": 1}

    def _make(**kwargs) -> MaintenanceRecord:
        counter["n"] += 1
        kwargs.setdefault("id", f"row-{counter['n']}")
        return MaintenanceRecord(**kwargs)

    return _make


@pytest.fixture()
def fake_session_factory():
    return FakeSession


@pytest.fixture()
def fake_response_factory():
    return FakeResponse
