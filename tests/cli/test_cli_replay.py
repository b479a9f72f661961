"""Tests for ``llmbridge replay`` CLI command."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from click.testing import CliRunner

from llmbridge.cli import main

if TYPE_CHECKING:
    from pathlib import Path


def _chunk(delta: dict[str, Any], finish_reason: str | None = None) -> dict[str, Any]:
    return {"choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}]}


def _write_jsonl(tmp_path: Path, items: list[Any]) -> str:
    f = tmp_path / "stream.jsonl"
    f.write_text("\n".join(json.dumps(item) for item in items) + "\n")
    return str(f)


_TEXT_STREAM = [
    _chunk({"role": "assistant", "content": "Hello"}),
    _chunk({"content": " world"}),
    _chunk({}, finish_reason="stop"),
]


class TestReplayCommand:
    def test_text_stream(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["replay", _write_jsonl(tmp_path, _TEXT_STREAM)])

        assert result.exit_code == 0, result.output
        assert "partial 'Hello'" in result.output
        assert "Final Response" in result.output
        assert "Text: Hello world" in result.output

    def test_quiet_hides_partials(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["replay", _write_jsonl(tmp_path, _TEXT_STREAM), "-q"])

        assert result.exit_code == 0
        assert "partial" not in result.output
        assert "Hello world" in result.output

    def test_json_output(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["replay", _write_jsonl(tmp_path, _TEXT_STREAM), "--json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["turnComplete"] is True
        assert payload["content"] == {"role": "model", "parts": [{"text": "Hello world"}]}

    def test_tool_calls_table(self, tmp_path: Path) -> None:
        items = [
            _chunk({"tool_calls": [{"index": 0, "id": "call_1", "function": {"name": "lookup", "arguments": "{}"}}]}),
            _chunk({}, finish_reason="tool_calls"),
        ]
        runner = CliRunner()
        result = runner.invoke(main, ["replay", _write_jsonl(tmp_path, items)])

        assert result.exit_code == 0, result.output
        assert "Tool Calls" in result.output
        assert "lookup" in result.output

    def test_anthropic_events(self, tmp_path: Path) -> None:
        events = [
            {"type": "content_block_start", "index": 0, "content_block": {"type": "text", "text": ""}},
            {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "Hi"}},
            {"type": "message_stop"},
        ]
        runner = CliRunner()
        result = runner.invoke(
            main, ["replay", _write_jsonl(tmp_path, events), "--dialect", "anthropic", "--json"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["content"]["parts"] == [{"text": "Hi"}]

    def test_stream_without_terminal_chunk(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["replay", _write_jsonl(tmp_path, _TEXT_STREAM[:2])])

        assert result.exit_code == 1
        assert "Stream ended without a terminal chunk" in result.output

    def test_invalid_line(self, tmp_path: Path) -> None:
        f = tmp_path / "stream.jsonl"
        f.write_text('{"choices": []}\nnot json\n')

        runner = CliRunner()
        result = runner.invoke(main, ["replay", str(f)])

        assert result.exit_code == 1
        assert "Line 2 is not valid JSON" in result.output
