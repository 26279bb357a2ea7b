"""YAML serialization of the merged document."""

import yaml


class _NoAliasDumper(yaml.SafeDumper):
    def ignore_aliases(self, data):
        return True


def dump_yaml(document: dict) -> str:
    """Serialize ``document`` as block-style YAML, keeping key order."""
    return yaml.dump(
        document,
        Dumper=_NoAliasDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
