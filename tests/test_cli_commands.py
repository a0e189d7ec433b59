from typer.testing import CliRunner

from bifrost import __version__
from bifrost.cli import commands
from bifrost.cli.commands import _parse_arg, _printable, app
from bifrost.client.gateway import CallGateway
from bifrost.client.transport import LoopbackTransport
from bifrost.core.protocol import REF_KEY

runner = CliRunner()


def _use_loopback(monkeypatch, dispatcher) -> None:
    monkeypatch.setattr(commands, "open_bridge", lambda config: CallGateway(LoopbackTransport(dispatcher)))


def test_version_command() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert f"bifrost v{__version__}" in result.stdout


def test_parse_arg_prefers_json() -> None:
    assert _parse_arg("3") == 3
    assert _parse_arg('{"a": [1, 2]}') == {"a": [1, 2]}
    assert _parse_arg("hello") == "hello"


def test_call_prints_result(monkeypatch, dispatcher, tmp_path) -> None:
    _use_loopback(monkeypatch, dispatcher)
    result = runner.invoke(app, ["call", "lib", "add", "2", "3", "--config", str(tmp_path / "none.json")])
    assert result.exit_code == 0
    assert "5" in result.stdout


def test_call_prints_handles_as_references(monkeypatch, dispatcher, tmp_path) -> None:
    _use_loopback(monkeypatch, dispatcher)
    result = runner.invoke(app, ["call", "lib", "make_adder", "1", "--config", str(tmp_path / "none.json")])
    assert result.exit_code == 0
    assert REF_KEY in result.stdout


def test_call_remote_failure_exits_nonzero(monkeypatch, dispatcher, tmp_path) -> None:
    _use_loopback(monkeypatch, dispatcher)
    result = runner.invoke(app, ["call", "lib", "fail", "nope", "--config", str(tmp_path / "none.json")])
    assert result.exit_code == 1
    assert "REMOTE_ERROR" in result.stdout
    assert "ValueError: nope" in result.stdout


def test_printable_replaces_nested_proxies(gateway, lib) -> None:
    adder = lib.make_adder(1)
    assert _printable({"fn": [adder]}) == {"fn": [{REF_KEY: adder.oid}]}
