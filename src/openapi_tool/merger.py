"""Merge several OpenAPI documents into one.

The first document provides ``openapi``, ``info`` and any other top-level
field it defines. Paths and components are combined entry by entry; the
same entry defined differently by two documents is a conflict.
"""

import logging
from copy import deepcopy

from openapi_tool.errors import MergeConflictError, NoDocumentsError
from openapi_tool.pointer import build_pointer

logger = logging.getLogger(__name__)

NESTED_SECTIONS = ("paths", "webhooks", "components")
UNION_LISTS = ("servers", "security")


def merge(documents: list[dict]) -> dict:
    """Merge ``documents`` in order and return a new document."""
    if not documents:
        raise NoDocumentsError("No OpenAPI documents to merge")

    merged: dict = {}
    for doc in documents:
        for key, value in doc.items():
            if key in NESTED_SECTIONS:
                _merge_nested(merged.setdefault(key, {}), value or {}, [key], depth=2)
            elif key == "tags":
                _merge_tags(merged.setdefault(key, []), value or [])
            elif key in UNION_LISTS:
                _merge_union(merged.setdefault(key, []), value or [])
            elif key not in merged:
                merged[key] = deepcopy(value)

    logger.debug("Merged %d documents", len(documents))
    return merged


def _merge_nested(dst: dict, src: dict, segments: list, depth: int) -> None:
    """Merge ``src`` into ``dst`` ``depth`` levels deep, then compare entries."""
    for key, value in src.items():
        pointer = [*segments, key]
        if key not in dst:
            dst[key] = deepcopy(value)
        elif depth > 1 and isinstance(dst[key], dict) and isinstance(value, dict):
            _merge_nested(dst[key], value, pointer, depth - 1)
        elif dst[key] != value:
            raise MergeConflictError(build_pointer(pointer))


def _merge_tags(dst: list, src: list) -> None:
    names = {tag.get("name") for tag in dst if isinstance(tag, dict)}
    for tag in src:
        name = tag.get("name") if isinstance(tag, dict) else None
        if name in names:
            continue
        names.add(name)
        dst.append(deepcopy(tag))


def _merge_union(dst: list, src: list) -> None:
    for item in src:
        if item not in dst:
            dst.append(deepcopy(item))
