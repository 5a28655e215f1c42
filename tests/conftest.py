"""
Pytest configuration and fixtures.
"""

import asyncio
import json
import os
import re
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import httpx
import pytest
import pytest_asyncio
from PySide6.QtWidgets import QApplication

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from worktimer.infra.gateway import TimerGateway
from worktimer.services.ticker import TickHandle, TickScheduler
from worktimer.services.timer_service import TimerService

BASE_URL = "http://store.test/api"
USER_ID = "u1"


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    """Signals and widgets need a Qt application object (offscreen platform)"""
    app = QApplication.instance() or QApplication([])
    yield app


class FakeTimeEntryStore:
    """
    In-memory stand-in for the backend's time entry endpoints.

    Enforces one running entry per user and computes elapsed time from its
    own clock, which tests move with `advance`.
    """

    def __init__(self):
        self.now = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
        self.tasks: Dict[str, dict] = {
            "T1": {"id": "T1", "title": "Draft statement of claim",
                   "case": {"id": "C1", "title": "Al Noor v. Gulf Trading"}},
            "T2": {"id": "T2", "title": "Review lease", "case": None},
        }
        self.entries: List[dict] = []
        self.requests: List[Tuple[str, str]] = []
        self.failures: Dict[Tuple[str, str], Callable[[], httpx.Response]] = {}
        self.holds: Dict[Tuple[str, str], asyncio.Event] = {}
        self._next_id = 1

    # -- test controls -------------------------------------------------

    def advance(self, seconds: int):
        self.now += timedelta(seconds=seconds)

    def fail(self, method: str, route: str, error: Exception = None, status: int = None):
        """Make the next call to a route fail with a transport error or a status"""
        def respond():
            if error is not None:
                raise error
            return httpx.Response(status, json={"success": False, "message": f"HTTP {status}"})
        self.failures[(method, route)] = respond

    def hold(self, method: str, route: str) -> asyncio.Event:
        """Delay the response of a route (computed before the wait) until the event is set"""
        event = asyncio.Event()
        self.holds[(method, route)] = event
        return event

    def count(self, method: str, route: str) -> int:
        return sum(1 for r in self.requests if r == (method, route))

    def running_entries(self, user_id: str = USER_ID) -> List[dict]:
        return [e for e in self.entries if e["user_id"] == user_id and e["ended_at"] is None]

    def add_closed_entry(self, task_id: str, duration_seconds: int, description: str = None) -> dict:
        started = self.now - timedelta(seconds=duration_seconds + 3600)
        entry = self._new_entry(task_id, started)
        entry["ended_at"] = (started + timedelta(seconds=duration_seconds)).isoformat()
        entry["duration_seconds"] = duration_seconds
        entry["description"] = description
        self.entries.append(entry)
        return entry

    def close_running_entry(self) -> dict:
        """Stop the running entry as another session of the same user would"""
        entry = self.running_entries()[0]
        entry["ended_at"] = self.now.isoformat()
        entry["duration_seconds"] = self._elapsed(entry)
        return entry

    def add_running_entry(self, task_id: str, started_seconds_ago: int) -> dict:
        entry = self._new_entry(task_id, self.now - timedelta(seconds=started_seconds_ago))
        self.entries.append(entry)
        return entry

    # -- http ----------------------------------------------------------

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path[len("/api"):]
        method = request.method
        route = self._route(path)
        self.requests.append((method, route))

        failure = self.failures.pop((method, route), None)
        response = failure() if failure else self._dispatch(method, path, request)

        event = self.holds.pop((method, route), None)
        if event is not None:
            await event.wait()
        return response

    @staticmethod
    def _route(path: str) -> str:
        path = re.sub(r"^/tasks/[^/]+/time/start$", "/tasks/{id}/time/start", path)
        path = re.sub(r"^/tasks/0/time/stop/[^/]+$", "/time/stop/{id}", path)
        path = re.sub(r"^/tasks/[^/]+/time/entries$", "/tasks/{id}/time/entries", path)
        path = re.sub(r"^/time-entries/(?!active$|my-summary$)[^/]+$", "/time-entries/{id}", path)
        return path

    def _dispatch(self, method: str, path: str, request: httpx.Request) -> httpx.Response:
        if method == "GET" and path == "/time-entries/active":
            running = self.running_entries()
            if not running:
                return self._ok(None)
            entry = running[0]
            return self._ok({"entry": self._with_relations(entry), "elapsed_seconds": self._elapsed(entry)})

        match = re.match(r"^/tasks/([^/]+)/time/start$", path)
        if method == "POST" and match:
            task_id = match.group(1)
            if task_id not in self.tasks:
                return self._error(404, "Task not found")
            if self.running_entries():
                return self._error(409, "You already have a running timer")
            entry = self._new_entry(task_id, self.now)
            self.entries.append(entry)
            return self._ok(self._with_relations(entry), status=201)

        match = re.match(r"^/tasks/0/time/stop/([^/]+)$", path)
        if method == "POST" and match:
            entry = self._find(match.group(1))
            if entry is None or entry["ended_at"] is not None:
                return self._error(404, "Running entry not found")
            payload = json.loads(request.content or b"{}")
            entry["ended_at"] = self.now.isoformat()
            entry["duration_seconds"] = self._elapsed(entry)
            entry["description"] = payload.get("description")
            return self._ok(self._with_relations(entry))

        match = re.match(r"^/tasks/([^/]+)/time/entries$", path)
        if method == "GET" and match:
            task_id = match.group(1)
            own = [e for e in self.entries if e["task_id"] == task_id]
            entries = [self._with_relations(e) for e in own]
            # Like the real backend, the total includes the running entry so far
            total = sum(e["duration_seconds"] if e["ended_at"] else self._elapsed(e) for e in own)
            return self._ok({
                "entries": list(reversed(entries)),
                "total_seconds": total,
                "has_active_timer": any(e["ended_at"] is None for e in entries),
            })

        match = re.match(r"^/time-entries/([^/]+)$", path)
        if match and method in ("PATCH", "DELETE"):
            entry = self._find(match.group(1))
            if entry is None:
                return self._error(404, "Entry not found")
            if method == "DELETE":
                self.entries.remove(entry)
                return httpx.Response(204)
            payload = json.loads(request.content or b"{}")
            entry.update(payload)
            return self._ok(self._with_relations(entry))

        return self._error(404, "No such route")

    # -- helpers -------------------------------------------------------

    def _new_entry(self, task_id: str, started: datetime) -> dict:
        entry = {
            "id": f"E{self._next_id}",
            "task_id": task_id,
            "user_id": USER_ID,
            "started_at": started.isoformat(),
            "ended_at": None,
            "duration_seconds": 0,
            "description": None,
            "is_billable": True,
            "hourly_rate": None,
        }
        self._next_id += 1
        return entry

    def _find(self, entry_id: str) -> Optional[dict]:
        return next((e for e in self.entries if e["id"] == entry_id), None)

    def _elapsed(self, entry: dict) -> int:
        started = datetime.fromisoformat(entry["started_at"])
        return int((self.now - started).total_seconds())

    def _with_relations(self, entry: dict) -> dict:
        data = dict(entry)
        task = self.tasks.get(entry["task_id"])
        data["task"] = dict(task) if task else None
        data["user"] = {"id": USER_ID, "name": "Sara Al-Mutairi"}
        return data

    @staticmethod
    def _ok(data, status: int = 200) -> httpx.Response:
        return httpx.Response(status, json={"success": True, "data": data, "message": "OK"})

    @staticmethod
    def _error(status: int, message: str) -> httpx.Response:
        return httpx.Response(status, json={"success": False, "data": None, "message": message})


class FakeTickHandle(TickHandle):

    def __init__(self, callback):
        self.callback = callback
        self._active = True

    def cancel(self) -> None:
        self._active = False

    @property
    def active(self) -> bool:
        return self._active


class FakeTickScheduler(TickScheduler):
    """Tick scheduler driven by explicit calls to advance()"""

    def __init__(self):
        self.handles: List[FakeTickHandle] = []

    def schedule(self, callback) -> TickHandle:
        handle = FakeTickHandle(callback)
        self.handles.append(handle)
        return handle

    @property
    def active_handles(self) -> List[FakeTickHandle]:
        return [h for h in self.handles if h.active]

    def advance(self, seconds: int):
        for _ in range(seconds):
            for handle in self.active_handles:
                handle.callback()


@pytest.fixture
def store():
    return FakeTimeEntryStore()


@pytest_asyncio.fixture
async def gateway(store):
    gw = TimerGateway(BASE_URL, headers={"Authorization": "Bearer test-token"}, transport=store.transport)
    yield gw
    await gw.aclose()


@pytest.fixture
def scheduler():
    return FakeTickScheduler()


@pytest_asyncio.fixture
async def timer_service(gateway, scheduler):
    service = TimerService(gateway, scheduler)
    yield service
    service.shutdown()


@pytest.fixture
def ui_loop():
    """Event loop driven with run_until_complete from widget slots, as in TimerApp"""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()
    asyncio.set_event_loop(None)


@pytest.fixture
def ui_timer_service(ui_loop, store, scheduler):
    gw = TimerGateway(BASE_URL, headers={"Authorization": "Bearer test-token"}, transport=store.transport)
    service = TimerService(gw, scheduler)
    yield service
    service.shutdown()
    ui_loop.run_until_complete(gw.aclose())
