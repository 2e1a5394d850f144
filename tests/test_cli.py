"""Tests for the context-packer command line."""

import json

import pytest
import yaml
from click.testing import CliRunner

from context_packer.cli import main


CONFIG = {
    "model": "gpt-4o",
    "context_window": 10000,
    "reserve_output": 1000,
    "pricing": {"input_per_1m": 2.5, "provider": "openai"},
    "sources": {
        "system": {"content": "You are helpful.", "priority": "required", "position": "beginning"},
        "memory": {"content": ["User likes tea", "User lives in Oslo"], "priority": "medium"},
    },
}


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "context.yaml"
    path.write_text(yaml.safe_dump(CONFIG), encoding="utf-8")
    return str(path)


class TestCli:
    """Test cases for the CLI commands."""

    def test_pack_text_report(self, config_file):
        """Test the human-readable report."""
        result = CliRunner().invoke(main, ["pack", config_file, "--query", "Where do I live?"])

        assert result.exit_code == 0, result.output
        assert "Budget:      9000 tokens" in result.output
        assert "system_0" in result.output
        assert "query_0" in result.output
        assert "(openai)" in result.output

    def test_pack_json(self, config_file):
        """Test JSON output carries items, stats and warnings."""
        result = CliRunner().invoke(main, ["pack", config_file, "--format", "json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert [item["id"] for item in payload["items"]][0] == "system_0"
        assert payload["stats"]["budget"] == 9000
        assert "warnings" in payload

    def test_pack_json_is_strict(self, config_file):
        """Test required scores serialize as null rather than Infinity."""
        def reject(constant):
            raise ValueError(constant)

        result = CliRunner().invoke(main, ["pack", config_file, "-q", "hi", "--format", "json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output, parse_constant=reject)
        scores = {item["id"]: item["score"] for item in payload["items"]}
        assert scores["system_0"] is None
        assert scores["query_0"] is None
        assert scores["memory_0"] == 100.0

    def test_pack_lists_dropped_items(self, tmp_path):
        """Test the text report names each dropped item and its reason."""
        path = tmp_path / "tight.yaml"
        path.write_text(yaml.safe_dump({
            "context_window": 40,
            "reserve_output": 0,
            "sources": {
                "docs": {"content": ["short note", "x" * 400], "priority": "low"},
            },
        }), encoding="utf-8")

        result = CliRunner().invoke(main, ["pack", str(path)])

        assert result.exit_code == 0, result.output
        assert "Dropped:" in result.output
        assert "docs_1: budget exhausted" in result.output

    def test_pack_messages(self, config_file):
        """Test chat message output."""
        result = CliRunner().invoke(main, ["pack", config_file, "-q", "hi", "--messages"])

        assert result.exit_code == 0, result.output
        messages = json.loads(result.output)
        assert messages[-1] == {"role": "user", "content": "hi"}

    def test_pack_simple_tokenizer(self, config_file):
        """Test choosing another tokenizer backend."""
        result = CliRunner().invoke(main, ["pack", config_file, "--tokenizer", "simple"])
        assert result.exit_code == 0, result.output

    def test_invalid_config(self, tmp_path):
        """Test configuration errors become CLI errors."""
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump({"sources": {"a": {"content": "x", "priority": "urgent"}}}),
                        encoding="utf-8")

        result = CliRunner().invoke(main, ["pack", str(path)])

        assert result.exit_code == 1
        assert "urgent" in result.output

    def test_validate_ok(self, config_file):
        """Test validating a sound configuration."""
        result = CliRunner().invoke(main, ["validate", config_file])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_validate_issues(self, tmp_path):
        """Test validation issues exit non-zero."""
        path = tmp_path / "tight.yaml"
        path.write_text(yaml.safe_dump({"context_window": 100, "reserve_output": 200}), encoding="utf-8")

        result = CliRunner().invoke(main, ["validate", str(path)])

        assert result.exit_code == 1
        assert "reserve_output" in result.output
