"""JSON pointer helpers for ``$ref`` values."""

from urllib.parse import unquote


def escape(segment) -> str:
    return str(segment).replace("~", "~0").replace("/", "~1")


def unescape(segment: str) -> str:
    return unquote(segment).replace("~1", "/").replace("~0", "~")


def build_pointer(segments) -> str:
    """Build a ``#/a/b`` pointer from path segments."""
    return "#/" + "/".join(escape(s) for s in segments)


def split_pointer(fragment: str) -> list[str]:
    """Split a fragment like ``/components/schemas/Pet`` into segments."""
    pointer = fragment.lstrip("#")
    if not pointer or pointer == "/":
        return []
    return [unescape(part) for part in pointer.lstrip("/").split("/")]


def resolve_pointer(document, segments: list[str]):
    """Walk ``segments`` into ``document``. Raises KeyError if a segment is missing."""
    node = document
    for part in segments:
        if isinstance(node, dict):
            if part not in node:
                raise KeyError(part)
            node = node[part]
        elif isinstance(node, list):
            try:
                node = node[int(part)]
            except (ValueError, IndexError):
                raise KeyError(part) from None
        else:
            raise KeyError(part)
    return node
