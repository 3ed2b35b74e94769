"""Command-line entry points."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner
from typer.testing import CliRunner as TyperRunner

from defevents.cli import cli
from defevents.presentation.cli import app


def test_demo_writes_both_artifacts(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["demo", "--out-dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    raw = json.loads((tmp_path / "raw_event.out.json").read_text())
    typed = json.loads((tmp_path / "typed_event.out.json").read_text())
    assert raw["kind"] == 0
    assert typed["sender"] == "addr1"


def test_append_then_show(tmp_path: Path) -> None:
    store = str(tmp_path / "store.jsonl")
    runner = CliRunner()
    result = runner.invoke(cli, [
        "append", "--store", store, "--kind", "transfer", "--contract", "0x_contract2",
        "--field", "from=0x_addr1", "--field", "to=0x_addr2", "--field", "token=0x_tokenA",
    ])
    assert result.exit_code == 0, result.output

    result = runner.invoke(cli, ["show", "--store", store])
    assert result.exit_code == 0, result.output
    assert "processed_ok=1" in result.output
    assert "processed_failed=0" in result.output


def test_store_path_from_environment(tmp_path: Path) -> None:
    store = str(tmp_path / "env.jsonl")
    runner = CliRunner(env={"DEFEVENTS_STORE": store})
    result = runner.invoke(cli, ["demo", "--out-dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert Path(store).exists()
    result = runner.invoke(cli, ["show"])
    assert result.exit_code == 0, result.output
    assert "processed_ok=1" in result.output


def test_append_rejects_unknown_kind(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, [
        "append", "--store", str(tmp_path / "s.jsonl"), "--kind", "collect", "--contract", "c",
    ])
    assert result.exit_code == 2


def test_append_reports_missing_field(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, [
        "append", "--store", str(tmp_path / "s.jsonl"), "--kind", "mint", "--contract", "c",
        "--field", "sender=s", "--field", "amount0=1",
    ])
    assert result.exit_code == 2
    assert "amount1" in result.output


def _write_unknown_kind(store: Path) -> None:
    store.write_text(json.dumps({"kind": 9, "payload": "0x", "created_at": 1, "contract_address": "c"}) + "\n")


def test_show_strict_fails_on_unknown_kind(tmp_path: Path) -> None:
    store = tmp_path / "s.jsonl"
    _write_unknown_kind(store)
    result = CliRunner().invoke(cli, ["show", "--store", str(store)])
    assert result.exit_code == 1
    assert "Unknown event kind" in result.output


def test_show_skip_invalid_reports_failure(tmp_path: Path) -> None:
    store = tmp_path / "s.jsonl"
    _write_unknown_kind(store)
    result = CliRunner().invoke(cli, ["show", "--store", str(store), "--skip-invalid"])
    assert result.exit_code == 0, result.output
    assert "processed_failed=1" in result.output


def test_export_writes_parquet_per_kind(tmp_path: Path) -> None:
    store = str(tmp_path / "parts")
    assert CliRunner().invoke(cli, ["demo", "--out-dir", str(tmp_path), "--store", store]).exit_code == 0

    out = tmp_path / "export"
    result = TyperRunner().invoke(app, ["export", store, str(out)])
    assert result.exit_code == 0, result.output
    assert (out / "Swap.parquet").exists()


def test_export_strict_exits_nonzero_on_bad_store(tmp_path: Path) -> None:
    store = tmp_path / "s.jsonl"
    _write_unknown_kind(store)
    result = TyperRunner().invoke(app, ["export", str(store), str(tmp_path / "out")])
    assert result.exit_code == 1


def test_append_rejects_unknown_field_name(tmp_path: Path) -> None:
    store = tmp_path / "s.jsonl"
    result = CliRunner().invoke(cli, [
        "append", "--store", str(store), "--kind", "transfer", "--contract", "c",
        "--field", "from=a", "--field", "to=b", "--field", "token=t", "--field", "tokn=t",
    ])
    assert result.exit_code == 2
    assert "tokn" in result.output
    assert not store.exists()
