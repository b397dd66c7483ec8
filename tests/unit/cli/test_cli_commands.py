"""
Tests for the browser-tasks CLI commands.

Commands run through Typer's CliRunner against a task service whose client
talks to an httpx.MockTransport.
"""

import json
import logging

import httpx
import pytest
from typer.testing import CliRunner

from browser_tasks.cli import app
from browser_tasks.cli import session
from browser_tasks.tasks import BrowserUseTaskService, TaskPoller

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep log lines out of captured output and drop handlers afterwards."""
    monkeypatch.setenv("BROWSER_TASKS_LOGGING_LEVEL", "CRITICAL")
    yield
    package_logger = logging.getLogger("browser_tasks")
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)


@pytest.fixture
def api():
    """Configurable fake API: map (method, path) to a response or callable."""
    routes = {}
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        path = request.url.path.replace("/api/v2", "", 1)
        route = routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"detail": "Task not found"})
        if callable(route):
            return route(request)
        return route

    handler.routes = routes
    handler.requests = requests
    return handler


@pytest.fixture
def use_api(monkeypatch, make_client, api, fake_clock):
    def _open_service(state):
        return BrowserUseTaskService(
            client=make_client(api),
            poller_factory=lambda client: TaskPoller(
                client, poll_interval=1.0, clock=fake_clock, sleep=fake_clock.sleep
            ),
        )

    monkeypatch.setattr(session, "open_service", _open_service)
    return api


class TestExecute:
    def test_json_result(self, use_api):
        use_api.routes[("POST", "/tasks")] = httpx.Response(200, json={"id": "t-1"})
        use_api.routes[("GET", "/tasks/t-1")] = httpx.Response(
            200,
            json={"id": "t-1", "status": "finished", "isSuccess": True, "output": "ok"},
        )

        result = runner.invoke(
            app,
            [
                "--json",
                "execute",
                "Find the title",
                "--start-url",
                "https://example.com",
                "--template",
                "article",
                "--max-steps",
                "25",
                "--vision",
                "auto",
            ],
        )

        assert result.exit_code == 0, result.output
        envelope = json.loads(result.stdout)
        assert envelope["output"] == "ok"
        assert envelope["agentMessage"] == "AI agent successfully completed the task"

        body = json.loads(use_api.requests[0].content)
        assert body["startUrl"] == "https://example.com"
        assert body["maxSteps"] == 25
        assert body["vision"] == "auto"
        assert "title" in json.loads(body["structuredOutput"])["properties"]

    def test_custom_schema(self, use_api):
        use_api.routes[("POST", "/tasks")] = httpx.Response(200, json={"id": "t-1"})
        use_api.routes[("GET", "/tasks/t-1")] = httpx.Response(
            200, json={"id": "t-1", "status": "finished", "isSuccess": True}
        )

        result = runner.invoke(
            app,
            ["--json", "execute", "List people", "--schema", '[{"name": "string"}]'],
        )

        assert result.exit_code == 0, result.output
        body = json.loads(use_api.requests[0].content)
        assert json.loads(body["structuredOutput"])["type"] == "array"

    def test_invalid_timeout_sends_nothing(self, use_api):
        result = runner.invoke(
            app, ["--json", "execute", "Find it", "--timeout", "5"]
        )

        assert result.exit_code == 1
        error = json.loads(result.stdout)
        assert error["status"] == "error"
        assert "10 and 3600" in error["message"]
        assert use_api.requests == []

    def test_stopped_task_reports_task_id(self, use_api):
        use_api.routes[("POST", "/tasks")] = httpx.Response(200, json={"id": "t-9"})
        use_api.routes[("GET", "/tasks/t-9")] = httpx.Response(
            200, json={"id": "t-9", "status": "stopped", "error": "blocked"}
        )

        result = runner.invoke(app, ["--json", "execute", "Find it"])

        assert result.exit_code == 1
        error = json.loads(result.stdout)
        assert error["task_id"] == "t-9"
        assert "blocked" in error["message"]

    def test_api_error_kind(self, use_api):
        use_api.routes[("POST", "/tasks")] = httpx.Response(
            429, json={"detail": "Too many sessions"}
        )

        result = runner.invoke(app, ["--json", "execute", "Find it"])

        assert result.exit_code == 1
        error = json.loads(result.stdout)
        assert error["kind"] == "rate_limited"
        assert error["status_code"] == 429


class TestLifecycleCommands:
    def test_get(self, use_api):
        use_api.routes[("GET", "/tasks/t-1")] = httpx.Response(
            200, json={"id": "t-1", "status": "running"}
        )

        result = runner.invoke(app, ["--json", "get", "t-1"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["status"] == "running"

    def test_get_not_found(self, use_api):
        result = runner.invoke(app, ["--json", "get", "nope"])

        assert result.exit_code == 1
        assert json.loads(result.stdout)["kind"] == "not_found"

    def test_list_with_filter_and_limit(self, use_api):
        tasks = [{"id": f"r{i}", "status": "running"} for i in range(10)]
        tasks += [{"id": "f0", "status": "finished"}]
        use_api.routes[("GET", "/tasks")] = httpx.Response(200, json=tasks)

        result = runner.invoke(
            app, ["--json", "list", "--status", "running", "--limit", "3"]
        )

        assert result.exit_code == 0
        assert [t["id"] for t in json.loads(result.stdout)] == ["r0", "r1", "r2"]

    def test_list_human_output(self, use_api):
        use_api.routes[("GET", "/tasks")] = httpx.Response(
            200, json=[{"id": "t-1", "status": "finished", "task": "Find"}]
        )

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "t-1" in result.stdout

    def test_list_invalid_filter(self, use_api):
        result = runner.invoke(app, ["--json", "list", "--status", "paused"])

        assert result.exit_code == 1
        assert "paused" in json.loads(result.stdout)["message"]

    def test_stop(self, use_api):
        use_api.routes[("PATCH", "/tasks/t-1")] = lambda request: httpx.Response(
            200, json={"id": "t-1", **json.loads(request.content)}
        )

        result = runner.invoke(app, ["--json", "stop", "t-1"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["success"] is True
        assert data["status"] == "stopped"

    def test_update(self, use_api):
        use_api.routes[("PATCH", "/tasks/t-1")] = lambda request: httpx.Response(
            200, json={"id": "t-1", **json.loads(request.content)}
        )

        result = runner.invoke(
            app, ["--json", "update", "t-1", "--description", "New goal"]
        )

        assert result.exit_code == 0
        assert json.loads(use_api.requests[0].content) == {"task": "New goal"}

    def test_update_without_fields(self, use_api):
        result = runner.invoke(app, ["--json", "update", "t-1"])

        assert result.exit_code == 1
        assert use_api.requests == []

    def test_check_success(self, use_api):
        use_api.routes[("GET", "/tasks")] = httpx.Response(200, json=[])

        result = runner.invoke(app, ["--json", "check"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["status"] == "success"

    def test_check_rejected(self, use_api):
        use_api.routes[("GET", "/tasks")] = httpx.Response(
            401, json={"detail": "bad key"}
        )

        result = runner.invoke(app, ["--json", "check"])

        assert result.exit_code == 1


class TestBatch:
    def _write(self, tmp_path, items):
        path = tmp_path / "tasks.json"
        path.write_text(json.dumps(items))
        return str(path)

    def test_continue_on_fail(self, use_api, tmp_path):
        use_api.routes[("POST", "/tasks")] = httpx.Response(200, json={"id": "t-1"})
        use_api.routes[("GET", "/tasks/t-1")] = httpx.Response(
            200, json={"id": "t-1", "status": "finished", "isSuccess": True}
        )
        path = self._write(
            tmp_path,
            [{"task": "First"}, {"task": ""}, {"task": "Third", "timeout": 60}],
        )

        result = runner.invoke(app, ["--json", "batch", path, "--continue-on-fail"])

        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert [row["item"] for row in rows] == [0, 1, 2]
        assert rows[0]["status"] == "finished"
        assert "cannot be empty" in rows[1]["error"]
        assert rows[2]["status"] == "finished"

    def test_wrongly_typed_items_are_isolated(self, use_api, tmp_path):
        use_api.routes[("POST", "/tasks")] = httpx.Response(200, json={"id": "t-1"})
        use_api.routes[("GET", "/tasks/t-1")] = httpx.Response(
            200, json={"id": "t-1", "status": "finished", "isSuccess": True}
        )
        path = self._write(
            tmp_path,
            [
                {"task": 5},
                {"task": "x", "advanced": {"maxSteps": "10"}},
                {"task": "ok"},
            ],
        )

        result = runner.invoke(app, ["--json", "batch", path, "--continue-on-fail"])

        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert "must be text" in rows[0]["error"]
        assert "Max steps" in rows[1]["error"]
        assert rows[2]["status"] == "finished"
        assert len([r for r in use_api.requests if r.method == "POST"]) == 1

    def test_wrongly_typed_item_fails_cleanly(self, use_api, tmp_path):
        path = self._write(tmp_path, [{"task": 5}])

        result = runner.invoke(app, ["--json", "batch", path])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "must be text" in json.loads(result.stdout)["message"]

    def test_stops_on_first_failure(self, use_api, tmp_path):
        path = self._write(tmp_path, [{"task": ""}, {"task": "Second"}])

        result = runner.invoke(app, ["--json", "batch", path])

        assert result.exit_code == 1
        assert use_api.requests == []

    def test_unreadable_file(self, use_api, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[not json")

        result = runner.invoke(app, ["--json", "batch", str(path)])

        assert result.exit_code == 1
        assert "Could not read batch file" in json.loads(result.stdout)["message"]


class TestGlobalOptions:
    def test_url_override_reaches_service(self, monkeypatch):
        seen = {}

        class _Service:
            def __init__(self, state):
                seen["url"] = state.api_url

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return None

            def verify_credentials(self):
                return True

        monkeypatch.setattr(session, "open_service", _Service)

        result = runner.invoke(
            app, ["--json", "--url", "http://localhost:9000/api/v2/", "check"]
        )

        assert result.exit_code == 0
        assert seen["url"] == "http://localhost:9000/api/v2"

    def test_missing_api_key(self):
        result = runner.invoke(app, ["--json", "get", "t-1"])

        assert result.exit_code == 1
        error = json.loads(result.stdout)
        assert "API key" in error["message"]
        assert "BROWSER_USE_API_KEY" in error["suggestion"]
