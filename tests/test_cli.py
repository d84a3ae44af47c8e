"""CLI: lecturas, exportación JSON y doctor."""

from __future__ import annotations

import json

import httpx
import pytest
from typer.testing import CliRunner

from adapters.infisical_api import ORGANIZATIONS_PATH
from cli.main import CliContext, app
from core.config import DEFAULT_HOST, ProviderSettings

from conftest import HOST, TOKEN, RecordingHandler, json_response

runner = CliRunner()


def _context(routes: dict[str, httpx.Response]) -> tuple[CliContext, RecordingHandler]:
    handler = RecordingHandler(routes)
    return CliContext(transport=httpx.MockTransport(handler)), handler


def test_organizations_json() -> None:
    ctx, handler = _context({ORGANIZATIONS_PATH: json_response({"organizations": [{"_id": "o1", "name": "Acme"}]})})

    result = runner.invoke(app, ["organizations", "--host", HOST, "--api-token", TOKEN, "--json"], obj=ctx)

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["organizations"] == [{"id": "o1", "name": "Acme"}]
    assert handler.requests[0].headers["X-API-Key"] == TOKEN


def test_projects_table_and_export(tmp_path) -> None:
    body = {
        "workspaces": [
            {
                "_id": "p1",
                "name": "Proj",
                "organization": "org1",
                "environments": [{"_id": "e1", "name": "dev", "slug": "dev"}],
            }
        ]
    }
    ctx, _ = _context({"/api/v2/organizations/org1/workspaces": json_response(body)})
    output = tmp_path / "out" / "projects.json"

    result = runner.invoke(
        app,
        ["projects", "org1", "--host", HOST, "--api-token", TOKEN, "--output", str(output)],
        obj=ctx,
    )

    assert result.exit_code == 0, result.output
    assert "Proj" in result.stdout
    exported = json.loads(output.read_text(encoding="utf-8"))
    assert exported["organization_id"] == "org1"
    assert exported["projects"][0]["environments"] == [{"id": "e1", "name": "dev", "slug": "dev"}]


def test_missing_token_exits_with_diagnostic() -> None:
    ctx, handler = _context({})

    result = runner.invoke(app, ["organizations", "--host", HOST], obj=ctx)

    assert result.exit_code == 1
    assert "Missing Infisical API Token" in result.output
    assert handler.requests == []


def test_remote_failure_exits_with_diagnostic() -> None:
    ctx, _ = _context({ORGANIZATIONS_PATH: json_response({"message": "bad token"}, status_code=401)})

    result = runner.invoke(app, ["organizations", "--host", HOST, "--api-token", TOKEN, "--json"], obj=ctx)

    assert result.exit_code == 1
    assert "Unable to Read Infisical Organizations" in result.output


@pytest.fixture
def isolated_dotenv(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Sin `.env` del proyecto ni del usuario: solo variables de entorno."""

    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setitem(ProviderSettings.model_config, "env_file", None)


def test_doctor_run(monkeypatch: pytest.MonkeyPatch, isolated_dotenv: None) -> None:
    monkeypatch.setenv("INFISICAL_HOST", HOST)
    monkeypatch.setenv("INFISICAL_API_TOKEN", TOKEN)
    ctx, _ = _context({ORGANIZATIONS_PATH: json_response({"organizations": [{"_id": "o1", "name": "Acme"}]})})

    result = runner.invoke(app, ["doctor", "run"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "1 organization(s) visible" in result.output
    assert f"{HOST} (INFISICAL_HOST)" in result.output


@pytest.mark.parametrize(
    ("host_env", "label"),
    [(None, "(default)"), (DEFAULT_HOST, "(INFISICAL_HOST)")],
)
def test_doctor_reports_host_source(
    monkeypatch: pytest.MonkeyPatch, isolated_dotenv: None, host_env: str | None, label: str
) -> None:
    if host_env is not None:
        monkeypatch.setenv("INFISICAL_HOST", host_env)
    monkeypatch.setenv("INFISICAL_API_TOKEN", TOKEN)
    ctx, _ = _context({ORGANIZATIONS_PATH: json_response({"organizations": []})})

    result = runner.invoke(app, ["doctor", "run"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert f"{DEFAULT_HOST} {label}" in result.output


def test_doctor_configure_writes_user_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    written: dict[str, str] = {}

    def fake_write(values: dict[str, str]) -> object:
        written.update(values)
        return tmp_path / ".env"

    monkeypatch.setattr("cli.doctor.write_user_env_vars", fake_write)

    result = runner.invoke(app, ["doctor", "configure"], input=f"{HOST}\n{TOKEN}\n")

    assert result.exit_code == 0, result.output
    assert written == {"INFISICAL_HOST": HOST, "INFISICAL_API_TOKEN": TOKEN}
