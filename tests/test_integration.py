"""End-to-end runs of ``openapi-tool generate`` over the fixture specs."""

from pathlib import Path

import yaml
from click.testing import CliRunner

from openapi_tool.cli import main

FIXTURES = Path(__file__).parent / "fixtures"
WIDGETS = FIXTURES / "widgets" / "openapi.yaml"
GADGETS = FIXTURES / "gadgets" / "openapi.yaml"
INVALID = FIXTURES / "invalid" / "openapi.yaml"


def _run(args: list[str], tmp_path: Path, config: str | None = None):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        if config is not None:
            Path("openapi-tool.yaml").write_text(config)
        return runner.invoke(main, ["generate", *args])


class TestGenerateEndToEnd:
    def test_two_specs_merge_without_schema_collision(self, tmp_path):
        result = _run([str(WIDGETS), str(GADGETS)], tmp_path)

        assert result.exit_code == 0, result.stderr
        merged = yaml.safe_load(result.stdout)
        schemas = merged["components"]["schemas"]
        assert list(schemas) == ["WidgetItem", "Error", "GadgetItem"]
        assert schemas["WidgetItem"]["required"] == ["id"]
        assert schemas["GadgetItem"]["required"] == ["serial"]
        assert "#/components/schemas/schema" not in result.stdout

    def test_rewritten_refs_point_at_item_schemas(self, tmp_path):
        result = _run([str(WIDGETS), str(GADGETS)], tmp_path)

        merged = yaml.safe_load(result.stdout)
        post = merged["paths"]["/widgets"]["post"]
        assert post["requestBody"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/WidgetItem"
        }
        get_gadget = merged["paths"]["/gadgets/{gadgetId}"]["get"]
        assert get_gadget["responses"]["200"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/GadgetItem"
        }
        assert merged["components"]["parameters"]["GadgetId"]["in"] == "path"

    def test_header_from_first_document(self, tmp_path):
        result = _run([str(WIDGETS), str(GADGETS)], tmp_path)

        merged = yaml.safe_load(result.stdout)
        assert merged["openapi"] == "3.0.3"
        assert merged["info"]["title"] == "Widgets API"
        assert [tag["name"] for tag in merged["tags"]] == ["widgets", "gadgets"]

    def test_glob_skips_non_openapi_files(self, tmp_path):
        # Matches every file in widgets/ and gadgets/, including schema.json and common.yaml.
        result = _run([str(FIXTURES / "*dgets" / "*")], tmp_path)

        assert result.exit_code == 0, result.stderr
        merged = yaml.safe_load(result.stdout)
        assert set(merged["paths"]) == {"/widgets", "/gadgets/{gadgetId}"}

    def test_block_style_output(self, tmp_path):
        result = _run([str(WIDGETS)], tmp_path)

        assert result.stdout.startswith("openapi: 3.0.3\ninfo:\n")
        assert "{" not in result.stdout.split("paths:")[0]
        assert "&id" not in result.stdout

    def test_warnings_still_block_merge(self, tmp_path):
        result = _run([str(WIDGETS), str(INVALID)], tmp_path, config="rules:\n  spec: warn\n")

        assert result.exit_code == 1
        assert result.stdout == ""
        assert "warn" in result.stderr

    def test_only_non_openapi_files(self, tmp_path):
        result = _run([str(FIXTURES / "notes.md")], tmp_path)

        assert result.exit_code == 1
        assert "No OpenAPI documents to merge" in result.stderr
