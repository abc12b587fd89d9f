"""Tests for the stackref command line."""

import argparse
import json
from io import StringIO

import pytest

from stackref import __version__
from stackref.cli import BufferedOutput
from stackref.cli.cli import build_parser, main
from stackref.cli.tools import CheckTool, WatchTool, find_templates
from stackref.config import StackRefConfig
from stackref.exceptions import ToolError
from stackref.log import null_lg

BAD = "Resources:\n  A:\n    Properties:\n      X: !Ref B\n"
GOOD = "Resources:\n  B: {Type: AWS::S3::Bucket}\n  A:\n    DependsOn: B\n"
PARENT = """\
Resources:
  Child:
    Type: AWS::CloudFormation::Stack
    Properties:
      TemplateURL: child.yaml
      Parameters:
        Baz: x
        Region: y
Outputs:
  Name:
    Value: !GetAtt Child.Outputs.BucketName
"""


@pytest.fixture
def workdir(temp_dir, monkeypatch, clean_env):
    monkeypatch.chdir(temp_dir)
    return temp_dir


@pytest.fixture
def run():
    """Run the CLI, returning (exit code, stdout lines, log text)."""

    def _run(*argv: str):
        out = BufferedOutput()
        logs = StringIO()
        code = main(list(argv), out=out, log_stream=logs)
        return code, out.lines, logs.getvalue()

    return _run


@pytest.mark.integration
class TestCheck:
    def test_clean_file(self, workdir, write_template, run):
        write_template("good.yaml", GOOD)
        code, lines, _ = run("check", "good.yaml")
        assert code == 0
        assert lines == ["1 file checked: 0 errors, 0 warnings"]

    def test_error_exit_code(self, workdir, write_template, run):
        write_template("bad.yaml", BAD)
        code, lines, _ = run("check", "bad.yaml")
        assert code == 1
        assert lines[0] == "bad.yaml:4:15: error: Unable to find referenced variable, 'B'"

    def test_warnings_only_exit_zero(self, workdir, write_template, run):
        write_template("child.yaml", "Parameters:\n  P: {Type: String, Default: x}\n")
        write_template(
            "parent.yaml",
            "Resources:\n  C:\n    Type: AWS::CloudFormation::Stack\n"
            "    Properties:\n      TemplateURL: child.yaml\n",
        )
        code, lines, _ = run("check", "parent.yaml")
        assert code == 0
        assert "warning: Missing value for parameter with default value 'P'" in lines[0]

    def test_parse_failure(self, workdir, write_template, run):
        write_template("broken.yaml", "Resources: [\n")
        write_template("bad.yaml", BAD)
        code, lines, logs = run("check", "broken.yaml", "bad.yaml")
        assert code == 2
        assert "cannot analyze template" in logs
        # Remaining files are still reported
        assert any("bad.yaml:4:15" in line for line in lines)

    def test_missing_path(self, workdir, run):
        code, _, logs = run("check", "nope.yaml")
        assert code == 2
        assert "path does not exist" in logs

    def test_directory_recursive(self, workdir, write_template, run):
        write_template("top.yaml", GOOD)
        write_template("nested/deep.yml", BAD)
        write_template("nested/readme.txt", "not yaml: [")

        code, lines, _ = run("check", ".")
        assert code == 0
        assert lines[-1].startswith("1 file checked")

        code, lines, _ = run("check", ".", "--recursive")
        assert code == 1
        assert lines[-1].startswith("2 files checked: 1 error")

    def test_json_format(self, workdir, write_template, run):
        write_template("bad.yaml", BAD)
        code, lines, _ = run("check", "--format", "json", "bad.yaml")
        assert code == 1
        (entry,) = json.loads("\n".join(lines))
        assert entry["path"] == "bad.yaml"
        assert entry["diagnostics"][0]["range"]["start"] == {"line": 3, "character": 14}

    def test_format_from_config(self, workdir, write_template, run):
        write_template(".stackref.yaml", "output:\n  format: json\n")
        write_template("good.yaml", GOOD)
        code, lines, _ = run("check", "good.yaml")
        assert json.loads("\n".join(lines)) == [{"path": "good.yaml", "diagnostics": []}]

    def test_pretty_format(self, workdir, write_template, run):
        write_template("bad.yaml", BAD)
        code, lines, _ = run("check", "-f", "pretty", "--no-color", "bad.yaml")
        assert code == 1
        assert "bad.yaml:4:15 error: Unable to find referenced variable, 'B'" in lines

    def test_getatt_option_from_env(self, workdir, write_template, run, monkeypatch):
        write_template(
            "t.yaml",
            "Resources:\n  Q: {Type: AWS::SQS::Queue}\n"
            "Outputs:\n  O:\n    Value: !GetAtt Q.Arn\n",
        )
        assert run("check", "t.yaml")[0] == 1
        monkeypatch.setenv("STACKREF_ANALYSIS_GETATT_LOCAL_RESOURCES", "true")
        assert run("check", "t.yaml")[0] == 0

    def test_debug_logging(self, workdir, write_template, run):
        write_template("good.yaml", GOOD)
        _, _, logs = run("--log-level", "debug", "check", "good.yaml")
        assert "analysis pass complete" in logs
        assert "[/check/analysis]" in logs


@pytest.mark.integration
class TestGlobalOptions:
    def test_invalid_log_level(self, workdir, run, capsys):
        code, _, _ = run("--log-level", "loud", "version")
        assert code == 2
        assert "Invalid log level" in capsys.readouterr().err

    def test_invalid_config(self, workdir, write_template, run, capsys):
        write_template("cfg.yaml", "output:\n  format: xml\n")
        code, _, _ = run("--config", "cfg.yaml", "version")
        assert code == 2
        assert "Invalid configuration" in capsys.readouterr().err

    def test_command_required(self, workdir):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2


@pytest.mark.unit
class TestVersion:
    def test_default(self, workdir, run):
        code, lines, _ = run("version")
        assert code == 0
        assert lines[0].startswith(f"stackref {__version__}")

    def test_semver_field(self, workdir, run):
        assert run("version", "semver")[1] == [__version__]

    def test_json(self, workdir, run):
        _, lines, _ = run("version", "--json")
        data = json.loads("\n".join(lines))
        assert data["semver"] == __version__
        assert set(data) == {"semver", "commit", "full", "message", "time", "modified"}


@pytest.mark.unit
class TestFindTemplates:
    def test_files_and_dirs(self, write_template, temp_dir):
        a = write_template("a.yaml", "")
        write_template("b.json", "")
        write_template("sub/c.template", "")
        assert find_templates([temp_dir], [".yaml", ".template"]) == [a]
        found = find_templates([temp_dir, a], [".yaml", ".template"], recursive=True)
        assert [p.name for p in found] == ["a.yaml", "c.template"]

    def test_explicit_file_any_suffix(self, write_template):
        path = write_template("stack.cfn", "")
        assert find_templates([path], [".yaml"]) == [path]

    def test_missing(self, temp_dir):
        with pytest.raises(ToolError):
            find_templates([temp_dir / "nope"], [".yaml"])


@pytest.mark.integration
class TestWatchTool:
    def setup_tool(self, temp_dir):
        tool = WatchTool()
        args = build_parser([tool]).parse_args(["watch", str(temp_dir)])
        out = BufferedOutput()
        tool.setup(args, StackRefConfig(), null_lg(), out)
        return tool, out

    def test_initial_pass_and_updates(self, temp_dir, write_template):
        bad = write_template("bad.yaml", BAD)
        tool, out = self.setup_tool(temp_dir)
        watcher = tool.prepare()
        try:
            assert any(":4:15: error:" in line for line in out.lines)
            assert len(tool.registry.get(bad)) == 1

            bad.write_text(GOOD)
            watcher.file_changed(bad)
            watcher.flush()
            assert tool.registry.get(bad) == []

            bad.unlink()
            watcher.file_deleted(bad)
            assert bad not in tool.registry
        finally:
            watcher.stop()

    def test_child_change_refreshes_parent(
        self, temp_dir, write_template, child_template
    ):
        parent = write_template("parent.yaml", PARENT)
        tool, out = self.setup_tool(temp_dir)
        watcher = tool.prepare()
        try:
            assert tool.registry.get(parent) == []

            child_template.write_text(
                "Parameters:\n  Baz: {Type: String}\n  Region: {Type: String}\n"
            )
            watcher.file_changed(child_template)
            watcher.flush()
            assert [d.message for d in tool.registry.get(parent)] == [
                "Unable to find referenced variable, 'Child.Outputs.BucketName'"
            ]
            assert any(":11:20: error:" in line for line in out.lines)

            child_template.unlink()
            watcher.file_deleted(child_template)
            assert child_template not in tool.registry
            assert tool.registry.get(parent)[0].message.startswith(
                "Unable to load referenced template 'child.yaml'"
            )
        finally:
            watcher.stop()

    def test_on_change_right_after_setup(self, temp_dir, write_template):
        bad = write_template("bad.yaml", BAD)
        tool, out = self.setup_tool(temp_dir)
        tool.on_change(bad)
        assert len(tool.registry.get(bad)) == 1
        assert any(":4:15: error:" in line for line in out.lines)

    def test_on_change_before_setup_raises(self, temp_dir):
        with pytest.raises(ToolError, match="before setup"):
            WatchTool().on_change(temp_dir / "a.yaml")

    def test_parser_defaults(self):
        tool = WatchTool()
        args = build_parser([tool]).parse_args(["watch"])
        assert args.paths == ["."]
        assert args.debounce_ms == 300
        assert args.tool is tool


@pytest.mark.unit
class TestToolBase:
    def test_check_tool_registered(self):
        tool = CheckTool()
        args = build_parser([tool]).parse_args(["check", "a.yaml", "-r"])
        assert isinstance(args, argparse.Namespace)
        assert args.paths == ["a.yaml"]
        assert args.recursive is True
        assert args.format is None
