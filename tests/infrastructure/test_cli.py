"""End-to-end CLI runs against a temporary data directory."""

import pytest
import structlog
from click.testing import CliRunner

from stockledger.infrastructure import config
from stockledger.infrastructure.cli.main import cli


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DATA_DIR", tmp_path)
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(cli, ["--log-level", "ERROR", *args])

    return invoke


def _receive(run, quantity=10):
    return run(
        "stock", "receive",
        "--product", "P1", "--warehouse", "W1",
        "--quantity", str(quantity), "--purchase", "PO-1", "--unit-cost", "2.50",
    )


def test_receive_and_show(run):
    result = _receive(run)
    assert result.exit_code == 0, result.output
    assert "Movement #1" in result.output
    assert "+10" in result.output

    result = run("stock", "show")
    assert result.exit_code == 0
    assert "P1@W1" in result.output
    assert structlog.contextvars.get_contextvars() == {"command": "stock"}


def test_reserve_commit_order(run):
    _receive(run)

    result = run("reservation", "reserve-order", "--order", "42", "--lines", "P1@W1:4")
    assert result.exit_code == 0, result.output
    assert "status=held" in result.output

    result = run("reservation", "commit", "--order", "42", "--by", "packer")
    assert result.exit_code == 0, result.output
    assert "Committed: P1@W1 -4 (10 -> 6)" in result.output

    result = run("stock", "history", "--reference", "order:42")
    assert "Stock Out" in result.output


def test_insufficient_stock_is_reported(run):
    _receive(run, quantity=2)

    result = run(
        "reservation", "reserve",
        "--product", "P1", "--warehouse", "W1", "--quantity", "3", "--reference", "order:1",
    )

    assert result.exit_code == 1
    assert "Insufficient stock for P1@W1" in result.output


def test_commit_needs_exactly_one_target(run):
    result = run("reservation", "commit")
    assert result.exit_code == 2
    assert "exactly one of --id or --order" in result.output


def test_bad_lines_format(run):
    result = run("reservation", "reserve-order", "--order", "42", "--lines", "P1:4")
    assert result.exit_code == 2
    assert "Invalid line format" in result.output


def test_alert_set_and_list(run):
    _receive(run, quantity=2)

    result = run(
        "alert", "set", "--product", "P1", "--warehouse", "W1",
        "--type", "low_stock", "--threshold", "3",
    )
    assert result.exit_code == 0, result.output
    assert "low_stock alert on P1@W1 at 3 (ACTIVE)" in result.output

    result = run("alert", "list", "--active")
    assert "P1@W1" in result.output


def test_expire_with_nothing_stale(run):
    result = run("reservation", "expire")
    assert result.exit_code == 0
    assert "Expired 0 reservation(s)." in result.output
