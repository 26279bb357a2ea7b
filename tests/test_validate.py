from openapi_tool.config import Config
from openapi_tool.parser.validate import validate_document

VALID_30 = {
    "openapi": "3.0.3",
    "info": {"title": "Pets", "version": "1.0.0"},
    "paths": {"/pets": {"get": {"responses": {"200": {"description": "ok"}}}}},
}


class TestValidateDocument:
    def test_valid_30(self):
        assert validate_document(VALID_30, "pets.yaml", Config()) == []

    def test_valid_31_without_paths(self):
        doc = {"openapi": "3.1.0", "info": {"title": "Hooks", "version": "1"}, "webhooks": {}}
        assert validate_document(doc, "hooks.yaml", Config()) == []

    def test_missing_info_version(self):
        doc = {**VALID_30, "info": {"title": "Pets"}}
        problems = validate_document(doc, "pets.yaml", Config())
        assert len(problems) >= 1
        problem = problems[0]
        assert problem.rule_id == "spec"
        assert problem.severity == "error"
        assert problem.location[0].source == "pets.yaml"

    def test_configured_as_warning(self):
        doc = {**VALID_30, "info": {"title": "Pets"}}
        problems = validate_document(doc, "pets.yaml", Config(rules={"spec": "warn"}))
        assert problems
        assert {p.severity for p in problems} == {"warn"}

    def test_rule_off(self):
        doc = {**VALID_30, "info": {"title": "Pets"}}
        assert validate_document(doc, "pets.yaml", Config(rules={"spec": "off"})) == []
