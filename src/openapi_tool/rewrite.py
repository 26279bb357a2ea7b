"""Restore the canonical item schema name of a bundled document.

Documents name their item schema with ``info.x-ref-schema-name`` and point
``{name}Item`` at an external ``schema.json``. Bundling stores that file
under the fixed key ``schema``, which would collide between documents at
merge time, so each document is rewritten to use ``{name}Item`` instead.
"""

import logging

logger = logging.getLogger(__name__)

SCHEMA_NAME_FIELD = "x-ref-schema-name"
FIXED_SCHEMA_REF = "#/components/schemas/schema"


def deep_replace(node, on_key: str, old, new) -> None:
    """Replace ``node[on_key]`` values equal to ``old`` with ``new`` at any depth."""
    if isinstance(node, dict):
        for key, value in node.items():
            if key == on_key and value == old:
                node[key] = new
            elif isinstance(value, (dict, list)):
                deep_replace(value, on_key, old, new)
    elif isinstance(node, list):
        for item in node:
            deep_replace(item, on_key, old, new)


def rewrite_schema_refs(document: dict) -> dict:
    """Rewrite ``#/components/schemas/schema`` refs to ``{name}Item`` in place."""
    info = document.get("info")
    name = info.get(SCHEMA_NAME_FIELD) if isinstance(info, dict) else None
    if not name:
        return document

    item_name = f"{name}Item"
    schemas = (document.get("components") or {}).get("schemas")
    if isinstance(schemas, dict) and "schema" in schemas:
        item = schemas.get(item_name)
        if isinstance(item, dict) and item.get("$ref") == FIXED_SCHEMA_REF:
            logger.debug("Moving #/components/schemas/schema to %s", item_name)
            schemas[item_name] = schemas.pop("schema")

    deep_replace(document, "$ref", FIXED_SCHEMA_REF, f"#/components/schemas/{item_name}")
    return document
