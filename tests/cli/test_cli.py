"""Tests for MoodPlay CLI commands."""

import json

import httpx
import pytest
import respx
from click.testing import CliRunner

from moodplay_cli.main import cli
from moodplay_cli.replay import load_ticks


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def feed_file(tmp_path):
    """Recorded feed: happy, happy, sad, sad one minute apart."""
    ticks = [
        {"emotion": "happy", "confidence": 80, "timestamp_ms": 0},
        {"emotion": "happy", "confidence": 90, "timestamp_ms": 60_000},
        {"emotion": "sad", "confidence": 70, "timestamp_ms": 120_000},
        {"emotion": "sad", "confidence": 55, "timestamp_ms": 180_000},
    ]
    path = tmp_path / "feed.json"
    path.write_text(json.dumps(ticks))
    return path


class TestCLI:
    """Tests for the CLI group."""

    def test_version(self, runner):
        """Test version output."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_help(self, runner):
        """Test help output."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "replay" in result.output
        assert "genres" in result.output


class TestGenresCommand:
    """Tests for genres command."""

    def test_genres(self, runner):
        """Test the mood table."""
        result = runner.invoke(cli, ["genres"])

        assert result.exit_code == 0
        assert "happy" in result.output
        assert "melancholy" in result.output


class TestReplayCommand:
    """Tests for replay command."""

    def test_replay_json(self, runner, feed_file):
        """Test an offline replay summarized as JSON."""
        result = runner.invoke(cli, ["replay", str(feed_file), "--offline", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)

        assert [t["id"] for t in data["queue"]["tracks"]] == [
            "happy-1", "happy-2", "happy-3", "sad-1", "sad-2", "sad-3",
        ]
        assert data["current_emotion"] == "sad"
        assert data["report"]["duration"] == "3m 0s"
        assert data["report"]["total_detections"] == 4
        assert data["report"]["emotion_changes"] == 1
        assert [n["type"] for n in data["notifications"]] == [
            "session.started",
            "music.replaced",
            "music.appended",
            "session.stopped",
        ]

    def test_replay_table(self, runner, feed_file):
        """Test the human-readable replay output."""
        result = runner.invoke(cli, ["replay", str(feed_file), "--offline"])

        assert result.exit_code == 0, result.output
        assert "Replayed 4 ticks" in result.output
        assert "Session Summary" in result.output
        assert "Positive Emotional State" in result.output

    def test_replay_invalid_feed(self, runner, tmp_path):
        """Test rejection of a malformed feed."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"emotion": "bored", "confidence": 50}]))

        result = runner.invoke(cli, ["replay", str(path), "--offline"])

        assert result.exit_code == 1
        assert "Invalid feed" in result.output

    def test_load_ticks_spacing(self, tmp_path):
        """Test timestamps for feeds without them."""
        path = tmp_path / "feed.json"
        path.write_text(json.dumps({"ticks": [
            {"emotion": "happy", "confidence": 80},
            {"emotion": "sad", "confidence": 70},
            {"emotion": "sad", "confidence": 70, "timestamp_ms": 5_000},
            {"emotion": "angry", "confidence": 65},
        ]}))

        ticks = load_ticks(path, interval_ms=250)

        assert [t.timestamp_ms for t in ticks] == [0.0, 250.0, 5_000.0, 5_250.0]


class TestSearchCommand:
    """Tests for search command."""

    @respx.mock
    def test_search_json(self, runner):
        """Test a mood search against a mocked Audius API."""
        respx.get(host="discoveryprovider.audius.co", path="/v1/tracks/search").mock(
            return_value=httpx.Response(200, json={"data": [{
                "id": "a1",
                "title": "Sunny",
                "user": {"name": "Band"},
                "duration": 123,
            }]})
        )

        result = runner.invoke(cli, ["search", "happy", "--count", "1", "--json"])

        assert result.exit_code == 0, result.output
        tracks = json.loads(result.output)
        assert tracks[0]["title"] == "Sunny"
        assert tracks[0]["stream_url"].endswith("/v1/tracks/a1/stream")

    @respx.mock
    def test_search_failure(self, runner):
        """Test the error path."""
        respx.get(host="discoveryprovider.audius.co", path="/v1/tracks/search").mock(
            return_value=httpx.Response(500)
        )

        result = runner.invoke(cli, ["search", "sad"])

        assert result.exit_code == 1
        assert "Search failed" in result.output
