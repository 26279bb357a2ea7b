import shutil
from pathlib import Path
from unittest.mock import patch

import yaml
from click.testing import CliRunner

from openapi_tool.cli import main
from openapi_tool.errors import MergeConflictError

FIXTURES = Path(__file__).parent / "fixtures"
WIDGETS = FIXTURES / "widgets" / "openapi.yaml"
BROKEN = FIXTURES / "broken" / "openapi.yaml"


class TestCliGenerate:
    def test_no_files_is_usage_error(self):
        runner = CliRunner()
        result = runner.invoke(main, ["generate"])

        assert result.exit_code == 2
        assert "No files provided." in result.stderr
        assert result.stdout == ""

    @patch("openapi_tool.cli.generate_document")
    def test_prints_merged_yaml(self, mock_generate, tmp_path):
        mock_generate.return_value = {"openapi": "3.0.3", "info": {"title": "Merged"}}

        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["generate", "a.yaml", "b/*.yaml"])

        assert result.exit_code == 0
        assert result.stdout == "openapi: 3.0.3\ninfo:\n  title: Merged\n"
        assert mock_generate.call_args[0][0] == ("a.yaml", "b/*.yaml")

    def test_problems_reported_on_stderr(self, tmp_path):
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["generate", str(WIDGETS), str(BROKEN)])

        assert result.exit_code == 1
        assert result.stdout == ""
        assert "no-unresolved-refs" in result.stderr
        assert "Bundling failed with 1 error and 0 warnings." in result.stderr
        assert "Problems when bundling, not trying to merge" in result.stderr

    @patch("openapi_tool.cli.generate_document")
    def test_merge_conflict_fails(self, mock_generate, tmp_path):
        mock_generate.side_effect = MergeConflictError("#/components/schemas/Error")

        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["generate", "a.yaml"])

        assert result.exit_code == 1
        assert "Conflicting definitions for #/components/schemas/Error" in result.stderr
        assert result.stdout == ""

    def test_binary_file_in_glob_is_skipped(self, tmp_path):
        specs = tmp_path / "specs"
        shutil.copytree(FIXTURES / "gadgets", specs)
        (specs / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\xfe")

        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["generate", str(specs / "*")])

        assert result.exit_code == 0, result.stderr
        merged = yaml.safe_load(result.stdout)
        assert merged["info"]["title"] == "Gadgets API"
        assert "GadgetItem" in merged["components"]["schemas"]

    def test_invalid_config_fails(self, tmp_path):
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            Path("openapi-tool.yaml").write_text("rules:\n  spec: fatal\n")
            result = runner.invoke(main, ["generate", str(WIDGETS)])

        assert result.exit_code == 1
        assert "Invalid config" in result.stderr

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["generate", "--help"])
        assert result.exit_code == 0
        assert "FILES" in result.stdout
