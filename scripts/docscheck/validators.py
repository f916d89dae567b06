"""Coverage, method template and page-level documentation checks.

Every check records failures on the ValidationResult it is given and keeps
going, so one run surfaces every issue.
"""

from __future__ import annotations

import re
from pathlib import Path

from .models import CoverageResult, DocSection, ValidationResult

FRONT_MATTER_RE = re.compile(r"^---.*?---\n?", re.DOTALL)
H2_RE = re.compile(r"^##\s+", re.MULTILINE)


def _missing_page(result: ValidationResult, purpose: str, file: Path) -> None:
    result.fail(f"Missing required page for {purpose}: {file}")


def reconcile(
    expected: list[str], occurrences: dict[str, list[DocSection]]
) -> CoverageResult:
    """Compare source signatures against documented headings."""
    expected = sorted(expected)
    actual = sorted(occurrences)
    expected_set = set(expected)
    actual_set = set(actual)
    return CoverageResult(
        expected=expected,
        actual=actual,
        missing=[m for m in expected if m not in actual_set],
        extra=[m for m in actual if m not in expected_set],
        occurrences=occurrences,
    )


def check_coverage(coverage: CoverageResult, result: ValidationResult) -> None:
    """Every source method documented exactly once, and nothing else documented."""
    if coverage.missing:
        result.fail(
            f"Missing method headings in module docs ({len(coverage.missing)}):\n- "
            + "\n- ".join(coverage.missing)
        )

    if coverage.extra:
        result.fail(
            f"Extra method headings not found in SDK interfaces ({len(coverage.extra)}):\n- "
            + "\n- ".join(coverage.extra)
        )

    for method, count in sorted(coverage.duplicates.items()):
        result.fail(f"Method must be documented exactly once: {method} (found {count})")


def check_method_section(
    method: str,
    section: DocSection,
    required_sections: list[str],
    request_header: str,
    response_header: str,
    signature_fence: str,
    result: ValidationResult,
) -> None:
    """Check one method section against the structural template."""
    body = section.body
    file_name = section.file.name

    for subsection in required_sections:
        if subsection not in body:
            result.fail(
                f"Method `{method}` is missing subsection `{subsection}` in {file_name}."
            )

    method_name = section.method_name
    fence = re.search(rf"```{re.escape(signature_fence)}(.*?)```", body, re.DOTALL)
    if fence is None:
        result.fail(f"Method `{method}` is missing TypeScript signature block in {file_name}.")
    elif method_name and method_name not in fence.group(1):
        result.fail(
            f"Method `{method}` signature block does not include method name "
            f"`{method_name}` in {file_name}."
        )

    if request_header not in body:
        result.fail(
            f"Method `{method}` is missing required request fields table header in {file_name}."
        )

    if response_header not in body:
        result.fail(
            f"Method `{method}` is missing required response fields table header in {file_name}."
        )


def check_method_templates(
    coverage: CoverageResult,
    required_sections: list[str],
    request_header: str,
    response_header: str,
    signature_fence: str,
    result: ValidationResult,
) -> None:
    """Run the template check for every method documented exactly once.

    Methods with zero or several occurrences were already reported by
    check_coverage and are skipped.
    """
    for method in coverage.expected:
        entries = coverage.occurrences.get(method, [])
        if len(entries) != 1:
            continue
        check_method_section(
            method,
            entries[0],
            required_sections,
            request_header,
            response_header,
            signature_fence,
            result,
        )


def has_subtitle(content: str) -> bool:
    """True if non-empty intro text sits between front matter and the first H2."""
    stripped = FRONT_MATTER_RE.sub("", content, count=1).strip()
    first_heading = H2_RE.search(stripped)
    if first_heading is None or first_heading.start() == 0:
        return False
    return bool(stripped[: first_heading.start()].strip())


def check_prerequisites(
    documents: dict[Path, str | None], pages: list[Path], result: ValidationResult
) -> None:
    for file in pages:
        content = documents.get(file)
        if content is None:
            _missing_page(result, "prerequisites check", file)
            continue
        if "## Prerequisites" not in content:
            result.fail(f"Missing prerequisites section: {file.name}")
        if not has_subtitle(content):
            result.fail(f"Missing subtitle sentence before first H2: {file.name}")


def _check_required_substrings(
    content: str | None,
    file: Path,
    required: list[str],
    purpose: str,
    message: str,
    result: ValidationResult,
) -> None:
    if content is None:
        _missing_page(result, purpose, file)
        return
    for item in required:
        if item not in content:
            result.fail(f"{message}: {item}")


def check_quickstart(
    content: str | None, file: Path, headings: list[str], result: ValidationResult
) -> None:
    _check_required_substrings(
        content,
        file,
        headings,
        "quickstart check",
        "Quickstart is missing required heading",
        result,
    )


def check_error_classes(
    content: str | None, file: Path, error_classes: list[str], result: ValidationResult
) -> None:
    _check_required_substrings(
        content,
        file,
        error_classes,
        "error class check",
        "Error playbook is missing SDK error class",
        result,
    )


def check_hub_links(
    content: str | None, file: Path, links: list[str], result: ValidationResult
) -> None:
    _check_required_substrings(
        content,
        file,
        links,
        "methods hub check",
        "Methods hub is missing required module link",
        result,
    )


def check_language(
    documents: dict[Path, str | None],
    pages: list[Path],
    patterns: list[re.Pattern[str]],
    result: ValidationResult,
) -> None:
    """Flag internal implementation vocabulary; one failure per pattern per file."""
    for file in pages:
        content = documents.get(file)
        if content is None:
            _missing_page(result, "language check", file)
            continue
        for pattern in patterns:
            if pattern.search(content):
                result.fail(f"Banned language pattern /{pattern.pattern}/ found in {file.name}.")
