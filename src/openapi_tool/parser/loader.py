"""YAML/JSON document loading."""

from pathlib import Path

import yaml


class _Loader(yaml.SafeLoader):
    """SafeLoader that always produces string mapping keys.

    Response codes such as ``200:`` would otherwise load as integers.
    """

    def construct_mapping(self, node, deep=False):
        mapping = super().construct_mapping(node, deep=deep)
        return {_key(k): v for k, v in mapping.items()}


def _key(key) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def load_document(file_path: Path):
    """Load a YAML or JSON file. JSON is parsed as YAML."""
    text = file_path.read_text(encoding="utf-8")
    return yaml.load(text, Loader=_Loader)
