"""OpenAPI bundler.

Resolves the external ``$ref`` pointers of one root document and hoists
their targets into the root's ``components`` section, so the result is a
single self-contained document whose internal refs are left untouched.

An external ref such as ``./schema.json`` used where a schema is expected
ends up as ``#/components/schemas/schema``: the component name is the last
segment of the ref's JSON pointer, or the file stem when there is none.
"""

import copy
import logging
from pathlib import Path
from urllib.parse import unquote, urldefrag, urlparse

import yaml

from openapi_tool.config import Config
from openapi_tool.parser.base import BundleResult, Location, Problem
from openapi_tool.parser.loader import load_document
from openapi_tool.parser.validate import validate_document
from openapi_tool.pointer import build_pointer, resolve_pointer, split_pointer

logger = logging.getLogger(__name__)

UNRESOLVED_RULE = "no-unresolved-refs"

OPERATION_KEYS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Node type -> {key: child type}. "[x]" is a mapping or list whose values are x,
# "*" applies to every key of the node.
TYPE_TREE: dict[str, dict[str, str]] = {
    "document": {
        "paths": "[pathItem]",
        "webhooks": "[pathItem]",
        "components": "components",
    },
    "components": {
        "schemas": "[schema]",
        "responses": "[response]",
        "parameters": "[parameter]",
        "examples": "[example]",
        "requestBodies": "[requestBody]",
        "headers": "[header]",
        "securitySchemes": "[securityScheme]",
        "links": "[link]",
        "callbacks": "[callback]",
        "pathItems": "[pathItem]",
    },
    "pathItem": {
        "parameters": "[parameter]",
        **{method: "operation" for method in OPERATION_KEYS},
    },
    "operation": {
        "parameters": "[parameter]",
        "requestBody": "requestBody",
        "responses": "[response]",
        "callbacks": "[callback]",
    },
    "callback": {"*": "pathItem"},
    "parameter": {"schema": "schema", "content": "[mediaType]", "examples": "[example]"},
    "header": {"schema": "schema", "content": "[mediaType]", "examples": "[example]"},
    "requestBody": {"content": "[mediaType]"},
    "response": {"headers": "[header]", "content": "[mediaType]", "links": "[link]"},
    "mediaType": {"schema": "schema", "examples": "[example]", "encoding": "[encoding]"},
    "encoding": {"headers": "[header]"},
}

# Node type -> components section its refs are hoisted into. Other types are inlined.
SECTIONS = {
    "schema": "schemas",
    "parameter": "parameters",
    "response": "responses",
    "requestBody": "requestBodies",
    "header": "headers",
    "example": "examples",
    "link": "links",
    "callback": "callbacks",
    "securityScheme": "securitySchemes",
}


def _child_type(node_type: str, key) -> str:
    if node_type == "schema":
        return "schema"
    if node_type.startswith("["):
        return node_type[1:-1]
    children = TYPE_TREE.get(node_type, {})
    return children.get(key) or children.get("*") or "any"


def iter_refs(node, segments=()):
    """Yield ``(ref, path_segments)`` for every ``$ref`` string in the tree."""
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            yield ref, list(segments)
        for key, value in node.items():
            if key != "$ref":
                yield from iter_refs(value, (*segments, key))
    elif isinstance(node, list):
        for index, item in enumerate(node):
            yield from iter_refs(item, (*segments, index))


class Bundler:
    """Bundles a single root document. Instances are not shared between files."""

    def __init__(self, config: Config, root_path: Path):
        self.config = config
        self.source = str(root_path)
        self.root_path = root_path.resolve()
        self.root: dict = {}
        self.problems: list[Problem] = []
        self._unresolved = 0
        self._documents: dict[Path, object] = {}
        self._hoisted: dict[tuple, str] = {}
        self._inlining: set[tuple] = set()
        self._done: set[int] = set()
        # Raw content behind each hoisted component, before its refs were rewritten.
        self._sources: dict[tuple[str, str], object] = {}

    def bundle(self, dereference: bool = False, remove_unused_components: bool = False) -> BundleResult:
        try:
            root = load_document(self.root_path)
        except yaml.YAMLError as e:
            self._report("parse", "error", f"Failed to parse document: {e}", self.root_path, [])
            return BundleResult(document=None, problems=self.problems)

        if not isinstance(root, dict):
            self._report("parse", "error", "Document must be a mapping", self.root_path, [])
            return BundleResult(document=None, problems=self.problems)

        self.root = root
        self._documents[self.root_path] = root
        self._walk(root, "document", self.root_path, [])
        self._check_internal_refs()

        if dereference:
            self.root = dereference_document(self.root)
        if remove_unused_components:
            remove_unused(self.root)

        if self._unresolved:
            logger.debug("Skipping validation of %s: unresolved refs", self.source)
        else:
            self.problems.extend(validate_document(self.root, self.source, self.config))

        deps = sorted(path for path in self._documents if path != self.root_path)
        return BundleResult(document=self.root, problems=self.problems, file_dependencies=deps)

    def _walk(self, node, node_type: str, base: Path, segments: list):
        # Hoisted components are walked once, relative to the file they came from.
        if id(node) in self._done:
            return node
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str):
                return self._resolve_ref(node, ref, node_type, base, segments)
            for key, value in list(node.items()):
                node[key] = self._walk(value, _child_type(node_type, key), base, [*segments, key])
            return node
        if isinstance(node, list):
            for index, item in enumerate(node):
                node[index] = self._walk(item, _child_type(node_type, index), base, [*segments, index])
            return node
        return node

    def _resolve_ref(self, node: dict, ref: str, node_type: str, base: Path, segments: list):
        file_part, fragment = urldefrag(ref)
        if not file_part:
            if base == self.root_path:
                return node
            target = base
        elif urlparse(file_part).scheme:
            self._unresolved_ref(ref, base, segments, "remote references are not supported")
            return node
        else:
            target = (base.parent / unquote(file_part)).resolve()

        pointer = split_pointer(fragment)
        if target == self.root_path:
            node["$ref"] = build_pointer(pointer)
            return node

        section = SECTIONS.get(node_type)
        # One file can back components in several sections.
        key = (target, tuple(pointer), section)
        if section and key in self._hoisted:
            node["$ref"] = self._hoisted[key]
            return node

        try:
            content = resolve_pointer(self._load(target), pointer)
        except (OSError, yaml.YAMLError) as e:
            self._unresolved_ref(ref, base, segments, str(e))
            return node
        except KeyError as e:
            self._unresolved_ref(ref, base, segments, f"pointer segment {e} not found")
            return node

        if section is None:
            return self._inline(node, key, content, node_type, target, segments)

        components = self.root.get("components")
        if not isinstance(components, dict):
            components = self.root["components"] = {}
        entries = components.get(section)
        if not isinstance(entries, dict):
            entries = components[section] = {}

        name = self._component_name(section, entries, pointer[-1] if pointer else target.stem, content)
        new_ref = build_pointer(["components", section, name])
        self._hoisted[key] = new_ref
        if name not in entries:
            logger.debug("Hoisting %s into %s", ref, new_ref)
            entries[name] = {}
            self._sources[(section, name)] = content
            hoisted = self._walk(copy.deepcopy(content), node_type, target, ["components", section, name])
            self._done.add(id(hoisted))
            entries[name] = hoisted
        node["$ref"] = new_ref
        return node

    def _inline(self, node: dict, key: tuple, content, node_type: str, target: Path, segments: list):
        if key in self._inlining:
            self._unresolved_ref(node["$ref"], target, segments, "circular reference cannot be inlined")
            return node
        self._inlining.add(key)
        try:
            inlined = self._walk(copy.deepcopy(content), node_type, target, segments)
        finally:
            self._inlining.discard(key)
        siblings = {k: v for k, v in node.items() if k != "$ref"}
        if siblings and isinstance(inlined, dict):
            inlined.update(siblings)
        return inlined

    def _component_name(self, section: str, entries: dict, base_name: str, content) -> str:
        """Pick a free component name, reusing one whose content is identical.

        Hoisted entries are compared by the raw content they were built from,
        entries defined in the root document by their current value.
        """
        name = base_name
        suffix = 2
        while name in entries and self._sources.get((section, name), entries[name]) != content:
            name = f"{base_name}-{suffix}"
            suffix += 1
        return name

    def _load(self, path: Path):
        if path not in self._documents:
            logger.debug("Loading referenced file %s", path)
            self._documents[path] = load_document(path)
        return self._documents[path]

    def _check_internal_refs(self):
        for ref, segments in iter_refs(self.root):
            if not ref.startswith("#"):
                continue
            try:
                resolve_pointer(self.root, split_pointer(ref))
            except KeyError:
                self._unresolved_ref(ref, self.root_path, segments, "target not found")

    def _unresolved_ref(self, ref: str, base: Path, segments: list, reason: str):
        self._unresolved += 1
        severity = self.config.rule_severity(UNRESOLVED_RULE)
        if severity == "off":
            return
        self._report(UNRESOLVED_RULE, severity, f"Can't resolve $ref {ref}: {reason}", base, segments)

    def _report(self, rule_id: str, severity: str, message: str, base: Path, segments: list):
        source = self.source if base == self.root_path else str(base)
        self.problems.append(
            Problem(
                rule_id=rule_id,
                severity=severity,
                message=message,
                location=[Location(source=source, pointer=build_pointer(segments))],
            )
        )


def dereference_document(document: dict) -> dict:
    """Return a copy of ``document`` with internal refs replaced by their targets.

    Recursive refs are left as refs.
    """

    def _deref(node, stack: frozenset):
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str) and ref.startswith("#"):
                if ref in stack:
                    return node
                try:
                    target = resolve_pointer(document, split_pointer(ref))
                except KeyError:
                    return node
                return _deref(copy.deepcopy(target), stack | {ref})
            return {key: _deref(value, stack) for key, value in node.items()}
        if isinstance(node, list):
            return [_deref(item, stack) for item in node]
        return node

    return _deref(document, frozenset())


def remove_unused(document: dict) -> dict:
    """Drop components not reachable from outside ``components``.

    Security schemes are referenced by name, not ``$ref``, and are always kept.
    """
    components = document.get("components")
    if not isinstance(components, dict):
        return document

    outside = {key: value for key, value in document.items() if key != "components"}
    pending = [ref for ref, _ in iter_refs(outside)]
    used: set[tuple[str, str]] = set()
    while pending:
        segments = split_pointer(pending.pop())
        if len(segments) < 3 or segments[0] != "components":
            continue
        key = (segments[1], segments[2])
        if key in used:
            continue
        used.add(key)
        section = components.get(segments[1])
        if isinstance(section, dict):
            pending.extend(ref for ref, _ in iter_refs(section.get(segments[2])))

    for section, entries in components.items():
        if section == "securitySchemes" or not isinstance(entries, dict):
            continue
        for name in list(entries):
            if (section, name) not in used:
                logger.debug("Removing unused component #/components/%s/%s", section, name)
                del entries[name]
    return document


def bundle(
    config: Config,
    ref: Path | str,
    dereference: bool = False,
    remove_unused_components: bool = False,
) -> BundleResult:
    """Bundle the OpenAPI document at ``ref``.

    Returns the bundled document tree together with every problem found
    while resolving refs and validating the result.
    """
    bundler = Bundler(config, Path(ref))
    result = bundler.bundle(dereference=dereference, remove_unused_components=remove_unused_components)
    logger.debug("Bundled %s with %d problem(s)", ref, len(result.problems))
    return result
