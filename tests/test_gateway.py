"""
Tests for the REST gateway: envelope parsing and error mapping.
"""

import json

import httpx
import pytest

from worktimer.domain.errors import ConflictError, NetworkError, NotFoundError, TimerApiError
from worktimer.infra.gateway import TimerGateway

from conftest import BASE_URL


def make_gateway(handler) -> TimerGateway:
    return TimerGateway(BASE_URL, headers={"Authorization": "Bearer t"},
                        transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_no_active_timer(gateway):
    assert await gateway.fetch_active_timer() is None


@pytest.mark.asyncio
async def test_active_timer_parsed(gateway, store):
    store.add_running_entry("T1", started_seconds_ago=90)

    active = await gateway.fetch_active_timer()

    assert active.elapsed_seconds == 90
    assert active.entry.is_running
    assert active.entry.task_title == "Draft statement of claim"
    assert active.entry.case_title == "Al Noor v. Gulf Trading"


@pytest.mark.asyncio
async def test_start_then_conflict(gateway, store):
    entry = await gateway.start_timer("T1")
    assert entry.id == "E1"
    assert entry.is_running

    with pytest.raises(ConflictError) as exc_info:
        await gateway.start_timer("T2")
    assert exc_info.value.status_code == 409
    assert "already" in exc_info.value.message


@pytest.mark.asyncio
async def test_unknown_task_is_not_found(gateway):
    with pytest.raises(NotFoundError):
        await gateway.start_timer("nope")


@pytest.mark.asyncio
async def test_stop_sends_description(gateway, store):
    entry = await gateway.start_timer("T1")
    store.advance(30)

    closed = await gateway.stop_timer(entry.id, "Call with client")

    assert closed.duration_seconds == 30
    assert closed.description == "Call with client"
    assert closed.ended_at is not None


@pytest.mark.asyncio
async def test_update_sends_only_given_fields():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["payload"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "data": {
            "id": 7, "task_id": 3, "user_id": 1, "started_at": "2026-03-02T09:00:00Z",
            "ended_at": "2026-03-02T10:00:00Z", "duration_seconds": 3600, "is_billable": False,
        }})

    gw = make_gateway(handler)
    entry = await gw.update_entry("7", is_billable=False)
    await gw.aclose()

    assert seen == {"method": "PATCH", "payload": {"is_billable": False}}
    # Numeric ids are normalised to strings
    assert entry.id == "7"
    assert entry.task_id == "3"


@pytest.mark.asyncio
async def test_delete_with_empty_body(gateway, store):
    entry = store.add_closed_entry("T1", 60)
    assert await gateway.delete_entry(entry["id"]) is None
    assert store.entries == []


@pytest.mark.asyncio
async def test_summary_period_validated(gateway):
    with pytest.raises(ValueError):
        await gateway.fetch_summary("year")


@pytest.mark.asyncio
async def test_summary_parsed():
    def handler(request):
        assert request.url.params["period"] == "day"
        return httpx.Response(200, json={"success": True, "data": {
            "period": "day", "total_seconds": 5400, "billable_seconds": 3600, "entries_count": 2,
            "by_task": [{"task": {"id": "T1", "title": "Draft"}, "total_seconds": 5400, "entries_count": 2}],
        }})

    async with make_gateway(handler) as gw:
        summary = await gw.fetch_summary("day")

    assert summary.total_seconds == 5400
    assert summary.by_task[0].task.title == "Draft"


@pytest.mark.asyncio
async def test_transport_errors_become_network_errors():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with make_gateway(handler) as gw:
        with pytest.raises(NetworkError):
            await gw.fetch_active_timer()


@pytest.mark.asyncio
async def test_server_error_keeps_status_and_message():
    def handler(request):
        return httpx.Response(500, json={"success": False, "message": "Database unavailable"})

    async with make_gateway(handler) as gw:
        with pytest.raises(TimerApiError) as exc_info:
            await gw.fetch_active_timer()

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Database unavailable"


@pytest.mark.asyncio
async def test_unsuccessful_envelope_is_an_error():
    def handler(request):
        return httpx.Response(200, json={"success": False, "message": "Task is archived"})

    async with make_gateway(handler) as gw:
        with pytest.raises(TimerApiError, match="archived"):
            await gw.start_timer("T1")


@pytest.mark.asyncio
async def test_malformed_entry_is_an_error():
    def handler(request):
        return httpx.Response(200, json={"success": True, "data": {"id": "E1"}})

    async with make_gateway(handler) as gw:
        with pytest.raises(TimerApiError, match="Malformed TimeEntry"):
            await gw.start_timer("T1")


@pytest.mark.asyncio
async def test_auth_headers_sent():
    seen = {}

    def handler(request):
        seen.update(request.headers)
        return httpx.Response(200, json={"success": True, "data": None})

    async with make_gateway(handler) as gw:
        await gw.fetch_active_timer()

    assert seen["authorization"] == "Bearer t"


@pytest.mark.asyncio
async def test_fractional_seconds_are_floored():
    def handler(request):
        return httpx.Response(200, json={"success": True, "data": {
            "elapsed_seconds": 90.7,
            "entry": {
                "id": "E1", "task_id": "T1", "user_id": "u1", "started_at": "2026-03-02T09:00:00Z",
                "ended_at": None, "duration_seconds": 12.5,
            },
        }})

    async with make_gateway(handler) as gw:
        active = await gw.fetch_active_timer()

    assert active.elapsed_seconds == 90
    assert active.entry.duration_seconds == 12
