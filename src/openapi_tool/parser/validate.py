"""Structural validation of bundled documents with openapi-spec-validator."""

import logging

from openapi_spec_validator import OpenAPIV30SpecValidator, OpenAPIV31SpecValidator

from openapi_tool.config import Config
from openapi_tool.parser.base import Location, Problem
from openapi_tool.pointer import build_pointer

logger = logging.getLogger(__name__)

SPEC_RULE = "spec"


def validate_document(document: dict, source: str, config: Config) -> list[Problem]:
    """Validate a bundled document and return one problem per validation error."""
    severity = config.rule_severity(SPEC_RULE)
    if severity == "off":
        return []

    version = str(document.get("openapi", ""))
    if version.startswith("3.1"):
        validator = OpenAPIV31SpecValidator(document)
    else:
        validator = OpenAPIV30SpecValidator(document)

    problems = []
    for error in validator.iter_errors():
        path = list(getattr(error, "absolute_path", []) or [])
        problems.append(
            Problem(
                rule_id=SPEC_RULE,
                severity=severity,
                message=error.message,
                location=[Location(source=source, pointer=build_pointer(path))],
            )
        )
    logger.debug("Validated %s: %d problem(s)", source, len(problems))
    return problems
