"""End-to-end tests for the click CLI against JSON files in a temp dir."""

import pytest
from click.testing import CliRunner

from logistics.infrastructure.cli.main import cli


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("LOGISTICS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return CliRunner()


def _ok(runner, *args):
    result = runner.invoke(cli, list(args))
    assert result.exit_code == 0, result.output
    return result.output


class TestFulfillmentFlow:

    def test_purchase_to_delivery(self, runner):
        _ok(runner, "carrier", "add", "--id", "c1", "--code", "DHL", "--name", "DHL Express", "--capacity", "5")
        _ok(runner, "po", "create", "--supplier", "S1", "--lines", "P1:20@2.50")
        _ok(runner, "po", "approve", "--id", "1")
        out = _ok(runner, "po", "receive", "--id", "1", "--warehouse", "W1")
        assert "Purchase order #1 received into W1." in out

        out = _ok(runner, "order", "create", "--client", "C1", "--warehouse", "W1", "--lines", "P1:5@10")
        assert "Sales order #1" in out
        _ok(runner, "order", "reserve", "--id", "1")

        out = _ok(runner, "stock", "show", "--warehouse", "W1")
        assert "W1" in out and "P1" in out

        out = _ok(runner, "order", "ship", "--id", "1")
        assert "Tracking: TRK-" in out

        out = _ok(runner, "shipment", "assign", "--id", "1", "--carrier", "c1")
        assert "status=IN_TRANSIT" in out
        _ok(runner, "shipment", "deliver", "--id", "1")

        out = _ok(runner, "order", "show", "--id", "1")
        assert "status=DELIVERED" in out

        out = _ok(runner, "stock", "movements", "--reference", "SO-1")
        assert "OUTBOUND" in out

    def test_adjust_and_low_stock(self, runner):
        _ok(runner, "po", "create", "--supplier", "S1", "--lines", "P1:4")
        _ok(runner, "po", "approve", "--id", "1")
        _ok(runner, "po", "receive", "--id", "1", "--warehouse", "W1")

        out = _ok(runner, "stock", "adjust", "--warehouse", "W1", "--product", "P1", "--on-hand", "6", "--reserved", "0")
        assert "on hand 6, reserved 0, available 6" in out

        out = _ok(runner, "stock", "low", "--warehouse", "W1")
        assert "P1" in out

    def test_sweep_with_nothing_reserved(self, runner):
        out = _ok(runner, "scheduler", "sweep")
        assert "found 0, canceled 0, failed 0" in out


class TestErrors:

    def test_missing_order_is_reported(self, runner):
        result = runner.invoke(cli, ["order", "show", "--id", "99"])
        assert result.exit_code == 1
        assert "Sales order #99 not found" in result.output

    def test_insufficient_stock_is_reported(self, runner):
        result = runner.invoke(cli, ["order", "create", "--client", "C1", "--warehouse", "W1", "--lines", "P1:5"])
        assert result.exit_code == 1
        assert "Insufficient stock" in result.output

    def test_bad_configuration_is_reported(self, runner, monkeypatch):
        monkeypatch.setenv("LOGISTICS_SHIPMENT_CUTOFF_HOUR", "25")
        result = runner.invoke(cli, ["stock", "show"])
        assert result.exit_code == 1
        assert "between 0 and 23" in result.output
