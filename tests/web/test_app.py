from __future__ import annotations

import json
import time
from pathlib import Path

import anyio
import pytest
from fastapi.testclient import TestClient

from mineralsys.catalog import MineralStore
from mineralsys.config import BuildConfig
from mineralsys.report import FolderLocks, ReportService, ReportSettings
from mineralsys.web import create_app
from tests.utils import (
    FAILING_SCRIPT,
    FINISH_LATE_SCRIPT,
    QUARTZ_PAYLOAD,
    SLEEPING_SCRIPT,
    SUCCESS_SCRIPT,
    stub_command,
    write_mineral,
)

QUARTZ_SLUG = "mineral.silicate.0x1a2b3c"


@pytest.fixture()
def minerals_root(tmp_path: Path) -> Path:
    root = tmp_path / "minerals"
    write_mineral(root, QUARTZ_SLUG, QUARTZ_PAYLOAD)
    return root


def _client(minerals_root: Path, script: str, *, timeout: float = 10.0) -> TestClient:
    build = BuildConfig(command=stub_command(script), timeout_seconds=timeout, poll_interval_seconds=0.05)
    service = ReportService(ReportSettings(build=build))
    return TestClient(create_app(MineralStore(minerals_root), service))


@pytest.fixture()
def client(minerals_root: Path) -> TestClient:
    return _client(minerals_root, SUCCESS_SCRIPT)


def test_health_check(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_list_minerals(client: TestClient) -> None:
    response = client.get("/api/minerals")
    assert response.status_code == 200
    assert response.json() == [{"slug": QUARTZ_SLUG, "name": "Quartz", "family": "silicate"}]


def test_generate_report_successfully(client: TestClient, minerals_root: Path) -> None:
    response = client.post(
        f"/api/minerals/{QUARTZ_SLUG}/report",
        json={"audience": "mine planner", "purpose": "pit design", "site_context": "north pit"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["markup_path"] == str(minerals_root / QUARTZ_SLUG / "report.html")
    assert body["artifact_path"] == str(minerals_root / QUARTZ_SLUG / "report.pdf")
    assert body["summary"].startswith("For mine planner and the north pit context, Quartz")
    assert "pit design" in body["summary"]


def test_generate_report_without_body_uses_defaults(client: TestClient) -> None:
    response = client.post(f"/api/minerals/{QUARTZ_SLUG}/report")

    assert response.status_code == 200
    assert "general audience" in response.json()["summary"]


def test_generate_report_unknown_mineral(client: TestClient) -> None:
    response = client.post("/api/minerals/mineral.oxide.0xfff/report", json={})
    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


def test_generate_report_build_failure(minerals_root: Path) -> None:
    client = _client(minerals_root, FAILING_SCRIPT)

    response = client.post(f"/api/minerals/{QUARTZ_SLUG}/report", json={})

    assert response.status_code == 500
    detail = response.json()["detail"]
    assert detail["stage"] == "build"
    assert "! Undefined control sequence." in detail["diagnostic"]


def test_generate_report_build_timeout(minerals_root: Path) -> None:
    client = _client(minerals_root, SLEEPING_SCRIPT, timeout=0.5)

    response = client.post(f"/api/minerals/{QUARTZ_SLUG}/report", json={})

    assert response.status_code == 504
    assert response.json()["detail"]["stage"] == "build-timeout"


def _report_scope(slug: str) -> dict:
    path = f"/api/minerals/{slug}/report"
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "POST",
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": b"",
        "headers": [(b"host", b"testserver"), (b"content-type", b"application/json"), (b"content-length", b"2")],
        "client": ("testclient", 50000),
        "server": ("testserver", 80),
    }


def _receive_then_disconnect(after: float):
    started = time.monotonic()
    body_sent = False

    async def receive() -> dict:
        nonlocal body_sent
        if not body_sent:
            body_sent = True
            return {"type": "http.request", "body": b"{}", "more_body": False}
        remaining = after - (time.monotonic() - started)
        if remaining > 0:
            await anyio.sleep(remaining)
        return {"type": "http.disconnect"}

    return receive


def test_client_disconnect_stops_the_build(minerals_root: Path) -> None:
    build = BuildConfig(command=stub_command(FINISH_LATE_SCRIPT), timeout_seconds=30, poll_interval_seconds=0.05)
    locks = FolderLocks()
    app = create_app(MineralStore(minerals_root), ReportService(ReportSettings(build=build), locks=locks))
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    async def run() -> None:
        await app(_report_scope(QUARTZ_SLUG), _receive_then_disconnect(0.3), send)

    started = time.monotonic()
    anyio.run(run)
    elapsed = time.monotonic() - started

    folder = minerals_root / QUARTZ_SLUG
    assert elapsed < 2.5
    assert not (folder / "finished.flag").exists()
    assert not (folder / "report.pdf").exists()
    assert not locks.lock_for(folder).locked()

    start = next(message for message in messages if message["type"] == "http.response.start")
    assert start["status"] == 500
    body = b"".join(message.get("body", b"") for message in messages if message["type"] == "http.response.body")
    assert json.loads(body)["detail"]["stage"] == "build-cancelled"
