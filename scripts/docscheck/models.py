"""Data models for documentation conformance checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


class DocsCheckError(Exception):
    """Base exception for conformance check operations."""


class DeclarationNotFoundError(DocsCheckError):
    """Raised when a source file does not declare the configured interface/class."""

    def __init__(self, declaration: str, file: Path):
        super().__init__(f"Declaration {declaration} not found in {file}")
        self.declaration = declaration
        self.file = file


class MethodNotFoundError(DocsCheckError):
    """Raised when an allow-listed method is absent from its declaration."""

    def __init__(self, method: str, declaration: str, file: Path):
        super().__init__(f"Method {declaration}.{method} not found in {file}")
        self.method = method
        self.declaration = declaration
        self.file = file


@dataclass(frozen=True)
class ModuleSpec:
    """Binds an SDK source file and declaration to a documentation prefix."""

    file: Path
    declaration: str  # "SessionsModule"
    prefix: str  # "sessions"
    kind: str = "interface"  # "interface" | "class"
    methods: tuple[str, ...] | None = None  # Allow-list; None means every method


@dataclass
class DocSection:
    """A method section parsed from a markdown file."""

    heading: str  # Normalized, e.g. "sessions.login(token, options?)"
    body: str
    file: Path

    @property
    def method_name(self) -> str:
        """Bare method name: "login" for "sessions.login(token, options?)"."""
        return self.heading.split("(")[0].split(".")[-1]


@dataclass
class CoverageResult:
    """Comparison of source method signatures against documented headings."""

    expected: list[str]
    actual: list[str]
    missing: list[str]
    extra: list[str]
    occurrences: dict[str, list[DocSection]]

    @property
    def duplicates(self) -> dict[str, int]:
        return {
            heading: len(entries)
            for heading, entries in self.occurrences.items()
            if len(entries) != 1
        }


@dataclass
class CheckOutcome:
    """Outcome of one check category."""

    name: str
    message: str  # Printed when the category passes
    errors: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors


@dataclass
class ValidationResult:
    """Accumulates failures from every check; any failure fails the run."""

    errors: list[str] = field(default_factory=list)
    checks: list[CheckOutcome] = field(default_factory=list)

    def fail(self, message: str) -> None:
        self.errors.append(message)

    @property
    def passed(self) -> bool:
        return not self.errors
