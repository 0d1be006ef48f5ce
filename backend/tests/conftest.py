from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from vacation_engine.main import app
from vacation_engine.services.records import InMemoryVacationRecordService, set_record_service

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator


@pytest.fixture
def records() -> Iterator[InMemoryVacationRecordService]:
    """Fresh in-memory record service installed as the app-wide service."""
    svc = InMemoryVacationRecordService()
    set_record_service(svc)
    yield svc
    set_record_service(InMemoryVacationRecordService())


@pytest.fixture
async def async_client(records: InMemoryVacationRecordService) -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to the app with a fresh record service."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
