"""Tests for the typer CLI."""

import json

import pytest
from typer.testing import CliRunner

from hwextract import cli

runner = CliRunner()

NIC_JSON = {"speed": "25GbE", "port_count": 2, "port_type": "SFP28", "condition": "new", "confidence": 0.9}


@pytest.fixture
def scripted(monkeypatch, fake_backend):
    """Route every CLI command to a FakeBackend loaded with the given responses."""

    def install(*responses):
        backend = fake_backend(*responses)
        monkeypatch.setattr(cli, "get_backend", lambda name=None, settings=None: backend)
        return backend

    return install


def test_key():
    attrs = json.dumps({"generation": "DDR4", "ecc": True, "registered": True, "capacity_gb": 32, "speed_mhz": 2666})
    result = runner.invoke(cli.app, ["key", "ram", attrs])
    assert result.exit_code == 0
    assert result.output.strip() == "ram:ddr4:ecc_reg:32gb:2666"


def test_key_invalid_json():
    result = runner.invoke(cli.app, ["key", "ram", "{nope"])
    assert result.exit_code == 1
    assert "invalid JSON" in result.output


def test_classify(scripted):
    scripted("NIC")
    result = runner.invoke(cli.app, ["classify", "Mellanox ConnectX-4 25GbE"])
    assert result.exit_code == 0
    assert result.output.strip() == "nic"


def test_classify_invalid(scripted):
    scripted("gpu")
    result = runner.invoke(cli.app, ["classify", "Tesla V100"])
    assert result.exit_code == 1
    assert "invalid component type" in result.output


def test_extract_classifies_first(scripted):
    backend = scripted("nic", NIC_JSON)
    result = runner.invoke(cli.app, ["extract", "Mellanox CX4 25GbE", "--spec", "Brand=Mellanox"])
    assert result.exit_code == 0, result.output
    out = json.loads(result.output)
    assert out["component_type"] == "nic"
    assert out["product_key"] == "nic:25gbe:2p:sfp28"
    assert out["attributes"]["condition"] == "new"
    assert "Item Specifics: Brand: Mellanox" in backend.requests[1].prompt


def test_extract_with_category(scripted):
    backend = scripted(NIC_JSON)
    result = runner.invoke(cli.app, ["extract", "Mellanox CX4 25GbE", "--category", "nic"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["component_type"] == "nic"
    assert len(backend.requests) == 1


def test_extract_reports_classified_category_on_failure(scripted):
    scripted("other")
    result = runner.invoke(cli.app, ["extract", "Nvidia Tesla V100"])
    assert result.exit_code == 1
    assert "Classified as other" in result.output
    assert "no extraction prompt" in " ".join(result.output.split())


def test_extract_bad_spec(scripted):
    scripted()
    result = runner.invoke(cli.app, ["extract", "t", "--spec", "novalue"])
    assert result.exit_code != 0


@pytest.mark.parametrize("env, value", [("HWX_LLM_BACKEND", "bedrock"), ("HWX_LOG_LEVEL", "LOUD")])
@pytest.mark.parametrize("command", [["classify", "t"], ["extract", "t"]])
def test_bad_settings_reported_cleanly(monkeypatch, env, value, command):
    monkeypatch.setenv(env, value)
    result = runner.invoke(cli.app, command)
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert env.lower() in result.output
