"""Tests for the mode resolver, the pipeline and the command line."""

import io
import json
import logging
import webbrowser

import pytest
from datadiff import (
    DatadiffEngine,
    DiffKind,
    Side,
    RunConfig,
    CheckMode,
    LoadMode,
    DisplayOutput,
    SaveOutput,
    BrowserOutput,
    Theme,
    UsageError,
    ValueDiff,
    ArrayDiff,
    KeyDiff,
    resolve,
)
from datadiff import store
from datadiff.cli import build_parser, main
from datadiff.models import RawDiffSet, ArrayDelta, ScalarMismatch

LEFT = {"name": "a", "tags": ["x", "y"], "version": 1}
RIGHT = {"name": "b", "tags": ["x"], "version": 2}


def parse(*argv):
    return build_parser().parse_args(list(argv))


def write_documents(directory):
    (directory / "left.json").write_text(json.dumps(LEFT), encoding="utf-8")
    (directory / "right.json").write_text(json.dumps(RIGHT), encoding="utf-8")


class FakeDiffer:
    """Comparison engine stand-in returning a crafted fact set."""

    def __init__(self, raw):
        self.raw = raw
        self.calls = []

    def compare(self, left, right, requested_kinds):
        self.calls.append((left, right, frozenset(requested_kinds)))
        return self.raw


class TestResolve:
    """Test turning flags into a RunConfig."""

    def test_check_mode(self):
        """Test a plain check run."""
        config = resolve(parse("-c", "a.json", "b.json", "-k", "-v"))
        assert config == RunConfig(
            mode=CheckMode(left_path="a.json", right_path="b.json"),
            requested_kinds=frozenset({DiffKind.KEY, DiffKind.VALUE}),
        )
        assert config.is_checking

    def test_load_mode_without_kinds(self):
        """Test that load mode needs no kinds."""
        config = resolve(parse("-r", "session.json"))
        assert config.mode == LoadMode(session_path="session.json")
        assert config.requested_kinds == frozenset()
        assert not config.is_checking

    def test_check_and_load_conflict(self, tmp_path):
        """Test that -c and -r together fail before any file is opened."""
        missing = str(tmp_path / "missing.json")
        with pytest.raises(UsageError):
            resolve(parse("-c", missing, missing, "-r", missing, "-k"))

    def test_no_mode(self):
        """Test that one of -c and -r is required."""
        with pytest.raises(UsageError):
            resolve(parse("-k"))

    def test_check_without_kinds(self):
        """Test that check mode needs at least one kind."""
        with pytest.raises(UsageError, match="at least one"):
            resolve(parse("-c", "a.json", "b.json"))

    def test_empty_path(self):
        """Test that empty file paths are rejected."""
        with pytest.raises(UsageError):
            resolve(parse("-c", "", "b.json", "-v"))

    def test_write_wins_over_browser(self):
        """Test that -w takes precedence over -b."""
        config = resolve(parse("-c", "a.json", "b.json", "-v", "-w", "s.json", "-b", "r.html"))
        assert config.output == SaveOutput(path="s.json")

    def test_browser_options(self):
        """Test -b with -p and -n."""
        config = resolve(parse("-r", "s.json", "-b", "r.html", "-p", "-n"))
        assert config.output == BrowserOutput(
            path="r.html", theme=Theme.PRINTER_FRIENDLY, auto_open=False
        )

    def test_browser_defaults(self):
        """Test -b alone."""
        config = resolve(parse("-r", "s.json", "-b", "r.html"))
        assert config.output == BrowserOutput(path="r.html")

    def test_browser_flags_ignored_without_browser(self):
        """Test that -p and -n do nothing without -b."""
        config = resolve(parse("-r", "s.json", "-p", "-n"))
        assert config.output == DisplayOutput()

    def test_order_sensitive(self):
        """Test -o."""
        assert resolve(parse("-c", "a.json", "b.json", "-v", "-o")).order_sensitive is True

    def test_exclusions(self):
        """Test that exclusions are collected in order."""
        config = resolve(parse("-c", "a.json", "b.json", "-v", "-x", "$.a", "-x", "$..b"))
        assert config.excluded_paths == ("$.a", "$..b")

    def test_invalid_exclusion(self):
        """Test that a malformed exclusion is a usage error."""
        with pytest.raises(UsageError, match="Invalid JSONPath"):
            resolve(parse("-c", "a.json", "b.json", "-v", "-x", "$.[["))

    def test_exclusions_ignored_in_load_mode(self):
        """Test that exclusions only apply when checking."""
        assert resolve(parse("-r", "s.json", "-x", "$.a")).excluded_paths == ()


class TestEngine:
    """Test the pipeline with a fake comparison engine."""

    def setup_method(self):
        self.raw = RawDiffSet([
            ScalarMismatch(path="name", left="a", right="b"),
            ArrayDelta(path="tags", left_only=("y",), right_only=(),
                       left=["x", "y"], right=["x"]),
        ])

    def check_config(self, tmp_path, **kwargs):
        write_documents(tmp_path)
        kwargs.setdefault("requested_kinds", frozenset({DiffKind.VALUE, DiffKind.ARRAY}))
        return RunConfig(
            mode=CheckMode(str(tmp_path / "left.json"), str(tmp_path / "right.json")),
            **kwargs
        )

    def test_build_session_unordered(self, tmp_path):
        """Test that crafted facts become records."""
        differ = FakeDiffer(self.raw)
        session = DatadiffEngine(differ).build_session(self.check_config(tmp_path))

        assert session.records == (
            ValueDiff(path="name", left_value="a", right_value="b"),
            ArrayDiff(path="tags", value="y", side=Side.LEFT),
        )
        assert session.sources.left.endswith("left.json")
        assert differ.calls[0][0] == LEFT

    def test_build_session_ordered(self, tmp_path):
        """Test the order policy is applied to crafted facts."""
        config = self.check_config(tmp_path, order_sensitive=True)
        session = DatadiffEngine(FakeDiffer(self.raw)).build_session(config)

        assert session.order_sensitive is True
        assert session.records[1] == ValueDiff(
            path="tags", left_value='["x","y"]', right_value='["x"]'
        )

    def test_build_session_filters_kinds(self, tmp_path):
        """Test that only requested kinds survive."""
        config = self.check_config(tmp_path, requested_kinds=frozenset({DiffKind.ARRAY}))
        session = DatadiffEngine(FakeDiffer(self.raw)).build_session(config)
        assert all(r.kind == DiffKind.ARRAY for r in session.records)

    def test_exclusions_applied(self, tmp_path):
        """Test that excluded locations are removed before comparing."""
        differ = FakeDiffer(RawDiffSet())
        config = self.check_config(tmp_path, excluded_paths=("$.version",))
        session = DatadiffEngine(differ).build_session(config)

        assert "version" not in differ.calls[0][0]
        assert "version" not in differ.calls[0][1]
        assert session.excluded_paths == ("$.version",)

    def test_real_differ(self, tmp_path):
        """Test the default differ end to end."""
        config = self.check_config(tmp_path, requested_kinds=frozenset(DiffKind))
        session = DatadiffEngine().build_session(config)
        assert [r.path for r in session.records] == ["name", "tags", "version"]

    def test_run_save(self, tmp_path):
        """Test the save output."""
        target = tmp_path / "session.json"
        config = self.check_config(tmp_path, output=SaveOutput(str(target)))
        out = io.StringIO()

        assert DatadiffEngine(FakeDiffer(self.raw)).run(config, out) == 0
        assert "Saved 2 differences" in out.getvalue()
        assert len(store.load(str(target)).records) == 2

    def test_run_display(self, tmp_path):
        """Test the table output."""
        out = io.StringIO()
        DatadiffEngine(FakeDiffer(self.raw)).run(self.check_config(tmp_path), out)
        assert "Value Differences" in out.getvalue()
        assert "Array Differences" in out.getvalue()

    def test_run_browser(self, tmp_path, monkeypatch):
        """Test the document output opens the browser."""
        opened = []
        monkeypatch.setattr(webbrowser, "open", lambda uri: opened.append(uri) or True)
        report = tmp_path / "report.html"
        config = self.check_config(tmp_path, output=BrowserOutput(str(report)))

        assert DatadiffEngine(FakeDiffer(self.raw)).run(config, io.StringIO()) == 0
        assert "<h2 id='value_diff'>" in report.read_text(encoding="utf-8")
        assert opened == [report.resolve().as_uri()]

    def test_run_browser_failure_still_succeeds(self, tmp_path, monkeypatch):
        """Test that a failed browser launch does not fail the run."""
        def fail(uri):
            raise webbrowser.Error("no runnable browser")

        monkeypatch.setattr(webbrowser, "open", fail)
        report = tmp_path / "report.html"
        config = self.check_config(tmp_path, output=BrowserOutput(str(report)))

        assert DatadiffEngine(FakeDiffer(self.raw)).run(config, io.StringIO()) == 0
        assert report.exists()


class TestCommandLine:
    """Test the datadiff command."""

    def setup_method(self):
        self.root_handlers = list(logging.getLogger().handlers)

    def teardown_method(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            if handler not in self.root_handlers:
                root.removeHandler(handler)

    def test_display(self, tmp_path, monkeypatch, capsys):
        """Test a check run printing tables."""
        write_documents(tmp_path)
        monkeypatch.chdir(tmp_path)

        assert main(["-c", "left.json", "right.json", "-v", "-a"]) == 0
        out = capsys.readouterr().out
        assert "Value Differences" in out
        assert 'Only "left.json" has' in out

    def test_save_then_replay(self, tmp_path, monkeypatch, capsys):
        """Test saving a session and replaying it with a narrower filter."""
        write_documents(tmp_path)
        monkeypatch.chdir(tmp_path)

        assert main(["-c", "left.json", "right.json", "-k", "-v", "-a", "-w", "s.json"]) == 0
        assert "Saved" in capsys.readouterr().out

        assert main(["-r", "s.json", "-a"]) == 0
        out = capsys.readouterr().out
        assert "Array Differences" in out
        assert "Value Differences" not in out

    def test_replay_unchecked_kind(self, tmp_path, monkeypatch, capsys):
        """Test replaying with a kind the session never checked."""
        write_documents(tmp_path)
        monkeypatch.chdir(tmp_path)

        main(["-c", "left.json", "right.json", "-v", "-w", "s.json"])
        capsys.readouterr()

        assert main(["-r", "s.json", "-t"]) == 0
        assert "were not checked in this session" in capsys.readouterr().out

    def test_browser_no_show(self, tmp_path, monkeypatch):
        """Test -b with -n never launches a browser."""
        def fail(uri):
            raise AssertionError("browser should not open")

        write_documents(tmp_path)
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(webbrowser, "open", fail)

        assert main(["-c", "left.json", "right.json", "-v", "-b", "r.html", "-n", "-p"]) == 0
        assert "Data Differences" in (tmp_path / "r.html").read_text(encoding="utf-8")

    def test_usage_error_exit_code(self, tmp_path, capsys):
        """Test that conflicting modes exit with 2."""
        assert main(["-c", "a.json", "b.json", "-r", "s.json", "-v"]) == 2
        assert "error:" in capsys.readouterr().err

    def test_missing_document_exit_code(self, tmp_path, capsys):
        """Test that an unreadable document exits with 1 and names it."""
        missing = str(tmp_path / "missing.json")
        assert main(["-c", missing, missing, "-v"]) == 1
        assert "missing.json" in capsys.readouterr().err

    def test_parse_error_exit_code(self, tmp_path, monkeypatch, capsys):
        """Test that a malformed document exits with 1."""
        write_documents(tmp_path)
        (tmp_path / "broken.json").write_text("{", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        assert main(["-c", "left.json", "broken.json", "-v"]) == 1
        assert "broken.json" in capsys.readouterr().err

    def test_corrupt_session_exit_code(self, tmp_path, capsys):
        """Test that a corrupt session exits with 1."""
        path = tmp_path / "s.json"
        path.write_text('{"format": "datadiff-session", "version": 1}', encoding="utf-8")
        assert main(["-r", str(path)]) == 1
        assert "Invalid session file" in capsys.readouterr().err

    def test_unknown_flag(self):
        """Test that argparse errors exit with 2."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--bogus"])
        assert exc_info.value.code == 2

    def test_version(self, capsys):
        """Test -V."""
        with pytest.raises(SystemExit) as exc_info:
            main(["-V"])
        assert exc_info.value.code == 0
        assert "datadiff" in capsys.readouterr().out

    def test_key_marks(self, tmp_path, monkeypatch, capsys):
        """Test key presence marks in the terminal."""
        (tmp_path / "left.json").write_text('{"a": 1, "b": 2}', encoding="utf-8")
        (tmp_path / "right.json").write_text('{"a": 1}', encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        assert main(["-c", "left.json", "right.json", "-k"]) == 0
        out = capsys.readouterr().out
        assert "✓" in out and "×" in out
        assert KeyDiff(path="b", side=Side.LEFT).path in out
