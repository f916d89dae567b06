"""Extractors for SDK method signatures and documented method sections."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from .models import (
    DeclarationNotFoundError,
    DocsCheckError,
    DocSection,
    MethodNotFoundError,
    ModuleSpec,
    ValidationResult,
)

log = logging.getLogger(__name__)

TYPESCRIPT = Language(tree_sitter_typescript.language_typescript())
TSX = Language(tree_sitter_typescript.language_tsx())

# Declaration node types searched for each ModuleSpec.kind
DECLARATION_TYPES: dict[str, frozenset[str]] = {
    "interface": frozenset({"interface_declaration"}),
    "class": frozenset({"class_declaration", "abstract_class_declaration"}),
}

# Members that count as methods, per declaration body
INTERFACE_METHOD_TYPES = frozenset({"method_signature"})
CLASS_METHOD_TYPES = frozenset(
    {"method_definition", "method_signature", "abstract_method_signature"}
)

PARAMETER_TYPES = frozenset({"required_parameter", "optional_parameter"})

# Any level-3/4 heading made of a single inline code span
CANDIDATE_HEADING_RE = re.compile(r"^#{3,4}[ \t]+`([^`]+)`[ \t]*\r?$", re.MULTILINE)
# prefix.method(...) shape required for a heading to name a method
METHOD_HEADING_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*\.[A-Za-z0-9]+\([^)]*\)$")


def normalize_heading(value: str) -> str:
    """Trim and collapse whitespace runs to single spaces."""
    return re.sub(r"\s+", " ", value.strip())


def read_text(path: Path) -> str | None:
    """Read a UTF-8 file, or return None if it is missing or unreadable.

    Undecodable bytes become U+FFFD so one bad file cannot stop the run.
    """
    if not path.is_file():
        log.debug("File not found: %s", path)
        return None
    log.debug("Reading %s", path)
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        log.error("Cannot read %s: %s", path, e)
        return None


def load_files(paths: Iterable[Path]) -> dict[Path, str | None]:
    """Read each file once. Missing files map to None."""
    return {path: read_text(path) for path in dict.fromkeys(paths)}


def _text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""


def _parameter_name(param: Node) -> str:
    """Declared parameter name, with "?" appended when optional."""
    pattern = param.child_by_field_name("pattern")
    if pattern is None:
        name = _text(param)
    elif pattern.type == "rest_pattern":
        name = _text(pattern).lstrip(".").strip()
    else:
        name = _text(pattern)
    if param.type == "optional_parameter":
        name += "?"
    return name


class DeclarationVisitor:
    """Walks a syntax tree and collects the methods of one named declaration.

    Dispatches on node type like ast.NodeVisitor: declaration nodes with a
    matching name are harvested, every other node is descended into.
    """

    def __init__(self, declaration: str, kind: str = "interface"):
        if kind not in DECLARATION_TYPES:
            raise ValueError(f"Unknown declaration kind: {kind}")
        self.declaration = declaration
        self.declaration_types = DECLARATION_TYPES[kind]
        self.method_types = (
            INTERFACE_METHOD_TYPES if kind == "interface" else CLASS_METHOD_TYPES
        )
        self.found = False
        self.methods: list[tuple[str, list[str]]] = []

    def visit(self, node: Node) -> None:
        if node.type in self.declaration_types:
            self.visit_declaration(node)
        self.generic_visit(node)

    def generic_visit(self, node: Node) -> None:
        for child in node.named_children:
            self.visit(child)

    def visit_declaration(self, node: Node) -> None:
        name = node.child_by_field_name("name")
        if name is None or _text(name) != self.declaration:
            return
        body = node.child_by_field_name("body")
        if body is None:
            return
        self.found = True
        log.debug("Matched %s at line %d", self.declaration, node.start_point[0] + 1)

        # Only direct members; nested declarations are reached by generic_visit
        members = [
            member
            for member in body.named_children
            if member.type in self.method_types
            and member.child_by_field_name("name") is not None
        ]
        # Overloaded class methods are documented by their overload signatures
        overloaded = {
            _text(member.child_by_field_name("name"))
            for member in members
            if member.type == "method_signature"
        }
        for member in members:
            member_name = member.child_by_field_name("name")
            if member.type == "method_definition" and _text(member_name) in overloaded:
                continue
            params = member.child_by_field_name("parameters")
            param_names = []
            if params is not None:
                param_names = [
                    _parameter_name(p)
                    for p in params.named_children
                    if p.type in PARAMETER_TYPES
                ]
            self.methods.append((_text(member_name), param_names))


def _parse(source: str, file: Path) -> Node:
    language = TSX if file.suffix == ".tsx" else TYPESCRIPT
    tree = Parser(language).parse(source.encode("utf-8"))
    if tree.root_node.has_error:
        log.warning("Syntax errors while parsing %s; results may be partial", file)
    return tree.root_node


def extract_module_methods(spec: ModuleSpec, source: str) -> list[str]:
    """Extract prefixed method signatures for one ModuleSpec.

    Args:
        spec: Which declaration to read and how to prefix its methods
        source: TypeScript source text of spec.file

    Returns:
        Signatures like "sessions.login(token, options?)" in declaration order

    Raises:
        DeclarationNotFoundError: If the file does not declare spec.declaration
        MethodNotFoundError: If an allow-listed method is not declared on it
    """
    visitor = DeclarationVisitor(spec.declaration, spec.kind)
    visitor.visit(_parse(source, spec.file))
    if not visitor.found:
        raise DeclarationNotFoundError(spec.declaration, spec.file)

    methods = visitor.methods
    if spec.methods is not None:
        declared = {name for name, _ in methods}
        for wanted in spec.methods:
            if wanted not in declared:
                raise MethodNotFoundError(wanted, spec.declaration, spec.file)
        methods = [(name, params) for name, params in methods if name in spec.methods]

    signatures = [
        normalize_heading(f"{spec.prefix}.{name}({', '.join(params)})")
        for name, params in methods
    ]
    log.debug("%s: %d methods from %s", spec.prefix, len(signatures), spec.file.name)
    return signatures


def collect_expected(specs: list[ModuleSpec], result: ValidationResult) -> list[str]:
    """Collect the sorted, de-duplicated method signatures for all specs.

    Missing files, missing declarations and repeated signatures are recorded
    on result; the remaining specs are still processed.
    """
    sources = load_files(spec.file for spec in specs)
    signatures: list[str] = []

    for spec in specs:
        source = sources[spec.file]
        if source is None:
            result.fail(f"Missing SDK source file: {spec.file}")
            continue
        try:
            signatures.extend(extract_module_methods(spec, source))
        except DocsCheckError as e:
            result.fail(str(e))

    seen: set[str] = set()
    for signature in signatures:
        if signature in seen:
            result.fail(f"Duplicate SDK method signature: {signature}")
        seen.add(signature)

    return sorted(seen)


def parse_method_sections(content: str, file: Path) -> list[DocSection]:
    """Split markdown into method sections keyed by `prefix.method(...)` headings.

    A section runs from the end of its heading line to the next code-span
    heading at level 3 or 4, or to the end of the document.
    """
    matches = list(CANDIDATE_HEADING_RE.finditer(content))
    sections = []

    for i, match in enumerate(matches):
        heading = normalize_heading(match.group(1))
        if not METHOD_HEADING_RE.match(heading):
            continue
        start = match.end()
        end = matches[i + 1].start() if i + 1 < len(matches) else len(content)
        sections.append(DocSection(heading=heading, body=content[start:end], file=file))

    return sections


def collect_sections(
    documents: dict[Path, str | None],
) -> dict[str, list[DocSection]]:
    """Merge sections from all method pages into heading -> occurrences."""
    seen: dict[str, list[DocSection]] = {}
    for file, content in documents.items():
        if content is None:
            continue
        for section in parse_method_sections(content, file):
            seen.setdefault(section.heading, []).append(section)
    return seen
