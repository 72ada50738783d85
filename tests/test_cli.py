"""Tests for the mdimport command line interface.

The download is stubbed by patching fetch_markdown in the CLI module; the
Contentful CLI is never run.
"""

import json
import os
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

# Set NO_COLOR for clean test output
os.environ["NO_COLOR"] = "1"
os.environ["TERM"] = "dumb"
os.environ["COLUMNS"] = "200"

from mdimport.cli import output  # noqa: E402
from mdimport.cli.main import app  # noqa: E402
from mdimport.fetch import FetchError  # noqa: E402
from mdimport.version import __version__  # noqa: E402

runner = CliRunner()

URL = "https://raw.example.com/docs/guide.md"
GOOD_DOC = "# Guide\n\nSee [the docs](https://example.com).\n"
BAD_DOC = "# Guide\n\nline two\n\n[Click]()\n\n![](diagram.png)\n"


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Run commands in a scratch directory with an isolated config."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    monkeypatch.chdir(work_dir)

    with (
        patch.dict(os.environ),
        patch("mdimport.cli.config.CONFIG_DIR", config_dir),
        patch("mdimport.cli.config.CONFIG_FILE", config_dir / "config.yaml"),
        patch("mdimport.cli.config.CREDENTIALS_FILE", config_dir / "credentials.yaml"),
    ):
        for name in (
            "CONTENTFUL_SPACE_ID",
            "CONTENTFUL_ENVIRONMENT_ID",
            "CONTENTFUL_MANAGEMENT_TOKEN",
        ):
            os.environ.pop(name, None)
        yield work_dir


def _serve(markdown):
    return patch("mdimport.cli.main.fetch_markdown", return_value=markdown)


class TestVersion:
    """Tests for the version option."""

    def test_version(self):
        """Should print the version and exit cleanly."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"mdimport version {__version__}" in result.output


class TestValidateCommand:
    """Tests for 'mdimport validate'."""

    def test_clean_document(self, cli_env):
        """A clean document should pass and write no CSV."""
        with _serve(GOOD_DOC) as fetch:
            result = runner.invoke(app, ["validate", URL])

        assert result.exit_code == 0, result.output
        assert "VALIDATION PASSED" in result.output
        assert "No errors to export." in result.output
        assert not (cli_env / "validation-errors.csv").exists()
        fetch.assert_called_once_with(URL, timeout=30.0)

    def test_failing_document_exports_csv(self, cli_env):
        """Critical issues should fail the command and be exported."""
        with _serve(BAD_DOC):
            result = runner.invoke(app, ["validate", URL])

        assert result.exit_code == 1
        assert "VALIDATION FAILED" in result.output
        assert "1 link(s) with missing URLs" in result.output

        lines = (cli_env / "validation-errors.csv").read_text().split("\n")
        assert lines[0] == "Type,Category,Line,Element,Description,Additional Info"
        assert lines[1].startswith("Warning,Missing Alt Text,7,![](diagram.png)")
        assert lines[2].startswith("Critical,Broken Link,5,[Click]()")

    def test_custom_csv_path(self, cli_env):
        """--csv should choose the export file."""
        with _serve(BAD_DOC):
            runner.invoke(app, ["validate", URL, "--csv", "reports/errors.csv"])

        assert (cli_env / "reports" / "errors.csv").exists()

    def test_no_export(self, cli_env):
        """--no-export should skip the CSV."""
        with _serve(BAD_DOC):
            result = runner.invoke(app, ["validate", URL, "--no-export"])

        assert result.exit_code == 1
        assert not (cli_env / "validation-errors.csv").exists()

    def test_json_output(self, cli_env):
        """JSON output should be machine-readable."""
        with _serve(BAD_DOC):
            result = runner.invoke(app, ["validate", URL, "--format", "json"])

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["success"] is False
        assert data["title"] == "Guide"
        assert data["issues"] == ["1 link(s) with missing URLs"]
        assert [e["category"] for e in data["detailed_errors"]] == [
            "Missing Alt Text",
            "Broken Link",
        ]

    def test_invalid_format(self, cli_env):
        """An unknown format should be rejected."""
        with _serve(GOOD_DOC):
            result = runner.invoke(app, ["validate", URL, "--format", "xml"])

        assert result.exit_code == 1
        assert "Invalid output format" in result.output

    def test_fetch_failure(self, cli_env):
        """A failed download should be reported."""
        error = FetchError(
            "Failed to fetch markdown: 404 Not Found", status_code=404, detail="Not Found"
        )
        with patch("mdimport.cli.main.fetch_markdown", side_effect=error):
            result = runner.invoke(app, ["validate", URL])

        assert result.exit_code == 1
        assert "Failed to fetch markdown: 404 Not Found" in result.output

    def test_timeout_option(self, cli_env):
        """--timeout should reach the fetcher."""
        with _serve(GOOD_DOC) as fetch:
            runner.invoke(app, ["validate", URL, "--timeout", "5"])

        fetch.assert_called_once_with(URL, timeout=5.0)

    def test_verbose_shows_findings_table(self, cli_env):
        """Verbose mode should list the detailed findings."""
        with _serve(BAD_DOC):
            result = runner.invoke(app, ["validate", URL, "--verbose"])

        assert "Detailed findings" in result.output
        assert "Broken Link" in result.output


class TestGenerateCommand:
    """Tests for 'mdimport generate'."""

    def test_generates_import_file(self, cli_env):
        """Should write outputs/import.json with the extracted title."""
        with _serve(GOOD_DOC):
            result = runner.invoke(app, ["generate", "--url", URL])

        assert result.exit_code == 0, result.output
        assert "Import file successfully generated!" in result.output

        doc = json.loads((cli_env / "outputs" / "import.json").read_text(encoding="utf-8"))
        entry = doc["entries"][0]
        assert entry["fields"]["internalTitle"] == {"en-US": "Guide"}
        assert entry["fields"]["markdown"] == {"en-US": GOOD_DOC}
        assert entry["sys"]["publishedVersion"] == 1

    def test_fallback_title(self, cli_env):
        """Documents without an H1 should get the fallback title."""
        with _serve("Just text\n"):
            runner.invoke(app, ["generate", "--url", URL])

        doc = json.loads((cli_env / "outputs" / "import.json").read_text(encoding="utf-8"))
        assert doc["entries"][0]["fields"]["internalTitle"] == {
            "en-US": "Untitled Markdown Import"
        }

    def test_failed_validation_blocks_generation(self, cli_env):
        """--validate should refuse to write a file for a failing document."""
        with _serve(BAD_DOC):
            result = runner.invoke(app, ["generate", "--url", URL, "--validate"])

        assert result.exit_code == 1
        assert "Validation failed. Fix issues before generating import." in result.output
        assert not (cli_env / "outputs" / "import.json").exists()

    def test_validate_and_export_errors(self, cli_env):
        """--export-errors should write the CSV even when generation is refused."""
        with _serve(BAD_DOC):
            result = runner.invoke(
                app, ["generate", "--url", URL, "--validate", "--export-errors"]
            )

        assert result.exit_code == 1
        assert (cli_env / "validation-errors.csv").exists()

    def test_passing_validation_generates(self, cli_env):
        """A passing document should be generated after validation."""
        with _serve(GOOD_DOC):
            result = runner.invoke(app, ["generate", "--url", URL, "--validate"])

        assert result.exit_code == 0, result.output
        assert "VALIDATION PASSED" in result.output
        assert (cli_env / "outputs" / "import.json").exists()

    def test_export_errors_without_validate_warns(self, cli_env):
        """--export-errors alone should warn and still generate."""
        with _serve(BAD_DOC):
            result = runner.invoke(app, ["generate", "--url", URL, "--export-errors"])

        assert result.exit_code == 0
        assert "--export-errors requires --validate flag to be set." in result.output
        assert not (cli_env / "validation-errors.csv").exists()
        assert (cli_env / "outputs" / "import.json").exists()

    def test_prompts_for_url(self, cli_env):
        """Without --url the command should prompt for one."""
        with _serve(GOOD_DOC) as fetch:
            result = runner.invoke(app, ["generate"], input=f"{URL}\n")

        assert result.exit_code == 0, result.output
        fetch.assert_called_once_with(URL, timeout=30.0)

    def test_blank_prompt_is_an_error(self, cli_env):
        """An empty answer to the prompt should fail."""
        with _serve(GOOD_DOC) as fetch:
            result = runner.invoke(app, ["generate"], input="\n")

        assert result.exit_code == 1
        assert "URL is required" in result.output
        fetch.assert_not_called()

    def test_draft_and_custom_output(self, cli_env):
        """--no-publish and --output should shape the generated file."""
        with _serve(GOOD_DOC):
            result = runner.invoke(
                app,
                ["generate", "--url", URL, "--no-publish", "-o", "build/post.json"],
            )

        assert result.exit_code == 0, result.output
        doc = json.loads((cli_env / "build" / "post.json").read_text(encoding="utf-8"))
        assert "publishedVersion" not in doc["entries"][0]["sys"]

    def test_with_content_type(self, cli_env):
        """--with-content-type should include the content type definition."""
        with _serve(GOOD_DOC):
            runner.invoke(app, ["generate", "--url", URL, "--with-content-type"])

        doc = json.loads((cli_env / "outputs" / "import.json").read_text(encoding="utf-8"))
        assert doc["contentTypes"][0]["sys"]["id"] == "post"

    def test_title_with_brackets(self, cli_env):
        """Titles containing square brackets should be printed literally."""
        with _serve("# Paths under [/usr/local]\n\nBody\n"):
            result = runner.invoke(app, ["generate", "--url", URL])

        assert result.exit_code == 0, result.output
        assert 'Title: "Paths under [/usr/local]"' in result.output

        doc = json.loads((cli_env / "outputs" / "import.json").read_text(encoding="utf-8"))
        assert doc["entries"][0]["fields"]["internalTitle"] == {
            "en-US": "Paths under [/usr/local]"
        }

    def test_title_with_style_tags_not_rendered(self, cli_env):
        """Text that looks like console markup should not be interpreted."""
        with _serve("# [bold]Loud[/bold] title\n\nBody\n"):
            result = runner.invoke(app, ["generate", "--url", URL, "--validate"])

        assert result.exit_code == 0, result.output
        assert 'Title: "[bold]Loud[/bold] title"' in result.output

    def test_url_with_brackets(self, cli_env):
        """URLs with square brackets should be echoed unchanged."""
        url = "https://raw.example.com/[draft]/guide.md"
        with _serve(GOOD_DOC):
            result = runner.invoke(app, ["generate", "--url", url])

        assert result.exit_code == 0, result.output
        assert f"Fetching markdown from {url}" in result.output


class TestImportCommand:
    """Tests for 'mdimport import'."""

    def _write_import_file(self, work_dir):
        path = work_dir / "outputs" / "import.json"
        path.parent.mkdir()
        path.write_text('{"entries": []}')
        return path

    def test_missing_import_file(self, cli_env):
        """Should fail when there is nothing to import."""
        result = runner.invoke(app, ["import", "--space-id", "abc123"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_missing_space_id(self, cli_env):
        """Should fail when no space ID is configured."""
        self._write_import_file(cli_env)

        result = runner.invoke(app, ["import"])

        assert result.exit_code == 1
        assert "No Contentful space ID configured" in result.output

    def test_missing_contentful_cli(self, cli_env):
        """Should fail when the Contentful CLI is not installed."""
        self._write_import_file(cli_env)

        with patch("shutil.which", return_value=None):
            result = runner.invoke(app, ["import", "--space-id", "abc123"])

        assert result.exit_code == 1
        assert "Contentful CLI not found" in result.output

    def test_import_with_env_file(self, cli_env):
        """Space and environment should be read from the .env file."""
        path = self._write_import_file(cli_env)
        (cli_env / ".env").write_text(
            "CONTENTFUL_SPACE_ID=env-space\nCONTENTFUL_ENVIRONMENT_ID=staging\n"
        )

        with (
            patch("shutil.which", return_value="/usr/local/bin/contentful"),
            patch("subprocess.run", return_value=MagicMock(returncode=0)) as run,
        ):
            result = runner.invoke(app, ["import"])

        assert result.exit_code == 0, result.output
        assert "Import completed successfully!" in result.output
        cmd = run.call_args[0][0]
        assert cmd[cmd.index("--space-id") + 1] == "env-space"
        assert cmd[cmd.index("--environment-id") + 1] == "staging"
        assert cmd[cmd.index("--content-file") + 1] == str(path.relative_to(cli_env))

    def test_import_failure(self, cli_env):
        """A failing Contentful CLI should fail the command."""
        self._write_import_file(cli_env)

        with (
            patch("shutil.which", return_value="/usr/local/bin/contentful"),
            patch("subprocess.run", return_value=MagicMock(returncode=1)),
        ):
            result = runner.invoke(app, ["import", "--space-id", "abc123"])

        assert result.exit_code == 1
        assert "Import failed: Command failed with exit code 1" in result.output


class TestOutputSettings:
    """Tests for the output section of the configuration."""

    def test_stored_format_used(self, cli_env):
        """output.format from the config file should apply without --format."""
        runner.invoke(app, ["config", "set", "output.format", "json"])

        with _serve(BAD_DOC):
            result = runner.invoke(app, ["validate", URL])

        assert result.exit_code == 1
        assert json.loads(result.output)["success"] is False

    def test_format_flag_beats_stored_format(self, cli_env):
        """--format should override the stored output.format."""
        runner.invoke(app, ["config", "set", "output.format", "json"])

        with _serve(BAD_DOC):
            result = runner.invoke(app, ["validate", URL, "--format", "text"])

        assert "VALIDATION FAILED" in result.output

    def test_stored_verbose_used(self, cli_env):
        """output.verbose should show the findings table without -v."""
        runner.invoke(app, ["config", "set", "output.verbose", "true"])

        with _serve(BAD_DOC):
            result = runner.invoke(app, ["validate", URL])

        assert "Detailed findings" in result.output

    def test_color_disabled(self, cli_env):
        """output.color false should turn off color on both consoles."""
        runner.invoke(app, ["config", "set", "output.color", "false"])

        with (
            patch.object(output.console, "no_color", False),
            patch.object(output.err_console, "no_color", False),
        ):
            with _serve(GOOD_DOC):
                result = runner.invoke(app, ["validate", URL])

            assert result.exit_code == 0, result.output
            assert output.console.no_color is True
            assert output.err_console.no_color is True

    def test_color_enabled_leaves_consoles(self, cli_env):
        """The default color setting should not change the consoles."""
        with (
            patch.object(output.console, "no_color", False),
            patch.object(output.err_console, "no_color", False),
        ):
            with _serve(GOOD_DOC):
                runner.invoke(app, ["validate", URL])

            assert output.console.no_color is False


class TestConfigCommands:
    """Tests for 'mdimport config'."""

    def test_set_and_show(self, cli_env):
        """Values set should appear in the config table."""
        result = runner.invoke(app, ["config", "set", "contentful.space_id", "abc123"])
        assert result.exit_code == 0
        assert "Set contentful.space_id = abc123" in result.output

        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "contentful.space_id" in result.output
        assert "abc123" in result.output

    def test_show_bracketed_value(self, cli_env):
        """Values with square brackets should be shown literally."""
        runner.invoke(app, ["config", "set", "output.directory", "[build]/out"])

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0, result.output
        assert "[build]/out" in result.output

    def test_set_unknown_key(self, cli_env):
        """Unknown keys should be rejected."""
        result = runner.invoke(app, ["config", "set", "contentful.nope", "x"])

        assert result.exit_code == 1
        assert "Unknown field" in result.output

    def test_token_is_masked(self, cli_env):
        """The stored token should be masked unless asked for."""
        result = runner.invoke(app, ["config", "set-token", "--token", "CFPAT-abcdefgh1234"])
        assert result.exit_code == 0
        assert "Management token saved" in result.output

        result = runner.invoke(app, ["config", "show"])
        assert "CFPA...1234" in result.output
        assert "CFPAT-abcdefgh1234" not in result.output

        result = runner.invoke(app, ["config", "show", "--show-token"])
        assert "CFPAT-abcdefgh1234" in result.output

    def test_clear_credentials(self, cli_env):
        """Credentials should be removed with --force."""
        runner.invoke(app, ["config", "set-token", "--token", "CFPAT-abcdefgh1234"])

        result = runner.invoke(app, ["config", "clear-credentials", "--force"])

        assert result.exit_code == 0
        assert "Credentials removed" in result.output
        assert "CFPAT" not in runner.invoke(app, ["config", "show", "--show-token"]).output

    def test_path(self, cli_env):
        """Should list the config file locations."""
        result = runner.invoke(app, ["config", "path"])

        assert result.exit_code == 0
        assert "config.yaml" in result.output
        assert "credentials.yaml" in result.output
