"""Tests for coverage, method template and page checks."""

import re
from pathlib import Path

import pytest

from docscheck.config import (
    BANNED_PATTERNS,
    REQUEST_TABLE_HEADER,
    REQUIRED_METHOD_SECTIONS,
    RESPONSE_TABLE_HEADER,
)
from docscheck.extractors import collect_sections
from docscheck.models import ValidationResult
from docscheck.validators import (
    check_coverage,
    check_error_classes,
    check_hub_links,
    check_language,
    check_method_templates,
    check_prerequisites,
    check_quickstart,
    has_subtitle,
    reconcile,
)

SESSIONS_MD = Path("rn-methods-sessions.md")


def method_doc(heading: str = "sessions.login(token, options?)", name: str = "login") -> str:
    return f"""#### `{heading}`

#### What this method does

Signs the user in.

#### When to call it

After the app receives a token.

#### Signature

```ts
{name}(token: string, options?: LoginOptions): Promise<Session>
```

#### Request fields

{REQUEST_TABLE_HEADER}
| --- | --- | --- | --- | --- | --- |
| token | string | yes | - | non-empty | Exchange token |

#### Response fields

{RESPONSE_TABLE_HEADER}
| --- | --- | --- | --- | --- |
| userId | string | yes | UUID | Signed-in user |

#### Errors and handling

Retry on NetworkError.

#### Minimal example

```ts
await sdk.sessions.{name}(token);
```
"""


def run_templates(documents: dict[Path, str], expected: list[str]) -> ValidationResult:
    result = ValidationResult()
    coverage = reconcile(expected, collect_sections(documents))
    check_method_templates(
        coverage,
        REQUIRED_METHOD_SECTIONS,
        REQUEST_TABLE_HEADER,
        RESPONSE_TABLE_HEADER,
        "ts",
        result,
    )
    return result


class TestCoverage:
    def test_matching_sets_pass(self):
        documents = {SESSIONS_MD: method_doc()}
        coverage = reconcile(["sessions.login(token, options?)"], collect_sections(documents))
        result = ValidationResult()

        check_coverage(coverage, result)

        assert coverage.missing == []
        assert coverage.extra == []
        assert result.errors == []

    def test_missing_and_extra_are_separate_failures(self):
        documents = {SESSIONS_MD: method_doc("sessions.logout()", "logout")}
        coverage = reconcile(["sessions.login(token, options?)"], collect_sections(documents))
        result = ValidationResult()

        check_coverage(coverage, result)

        assert coverage.missing == ["sessions.login(token, options?)"]
        assert coverage.extra == ["sessions.logout()"]
        assert set(coverage.missing).isdisjoint(coverage.extra)
        assert len(result.errors) == 2
        assert result.errors[0].startswith("Missing method headings in module docs (1)")
        assert result.errors[1].startswith("Extra method headings not found")

    def test_duplicate_across_files(self):
        documents = {
            SESSIONS_MD: method_doc(),
            Path("rn-methods-drive.md"): "### `sessions.login(token, options?)`\n\nOther.\n",
        }
        coverage = reconcile(["sessions.login(token, options?)"], collect_sections(documents))
        result = ValidationResult()

        check_coverage(coverage, result)

        assert coverage.duplicates == {"sessions.login(token, options?)": 2}
        assert result.errors == [
            "Method must be documented exactly once: sessions.login(token, options?) (found 2)"
        ]


class TestMethodTemplate:
    def test_complete_section_passes(self):
        result = run_templates({SESSIONS_MD: method_doc()}, ["sessions.login(token, options?)"])

        assert result.errors == []

    @pytest.mark.parametrize("subsection", REQUIRED_METHOD_SECTIONS)
    def test_missing_subsection_single_failure(self, subsection):
        content = method_doc().replace(subsection + "\n", "")

        result = run_templates({SESSIONS_MD: content}, ["sessions.login(token, options?)"])

        assert result.errors == [
            f"Method `sessions.login(token, options?)` is missing subsection "
            f"`{subsection}` in rn-methods-sessions.md."
        ]

    def test_renamed_request_column_single_failure(self):
        content = method_doc().replace("| Default |", "| Defaults |")

        result = run_templates({SESSIONS_MD: content}, ["sessions.login(token, options?)"])

        assert len(result.errors) == 1
        assert "missing required request fields table header" in result.errors[0]
        assert "sessions.login(token, options?)" in result.errors[0]

    def test_missing_response_header(self):
        content = method_doc().replace("Required/Conditional", "Conditional")

        result = run_templates({SESSIONS_MD: content}, ["sessions.login(token, options?)"])

        assert len(result.errors) == 1
        assert "response fields table header" in result.errors[0]

    def test_signature_block_must_name_method(self):
        content = method_doc(name="signIn")

        result = run_templates({SESSIONS_MD: content}, ["sessions.login(token, options?)"])

        assert result.errors == [
            "Method `sessions.login(token, options?)` signature block does not include "
            "method name `login` in rn-methods-sessions.md."
        ]

    def test_missing_signature_block(self):
        content = method_doc().replace("```ts", "```js")

        result = run_templates({SESSIONS_MD: content}, ["sessions.login(token, options?)"])

        assert len(result.errors) == 1
        assert "missing TypeScript signature block" in result.errors[0]

    def test_duplicated_and_undocumented_methods_skipped(self):
        documents = {
            SESSIONS_MD: "### `sessions.login(token, options?)`\n\nIncomplete.\n",
            Path("rn-methods-drive.md"): "### `sessions.login(token, options?)`\n\nAlso.\n",
        }

        result = run_templates(documents, ["sessions.login(token, options?)", "bin.empty()"])

        assert result.errors == []


class TestSubtitle:
    def test_front_matter_then_intro(self):
        content = "---\ntitle: Sessions\n---\n\nManage sign-in state.\n\n## Prerequisites\n"
        assert has_subtitle(content)

    def test_heading_right_after_front_matter(self):
        content = "---\ntitle: Sessions\n---\n\n## Prerequisites\n"
        assert not has_subtitle(content)

    def test_no_h2(self):
        assert not has_subtitle("Intro text.\n\n### Only H3\n")

    def test_h3_is_not_first_h2(self):
        content = "### Details\n\n## Prerequisites\n"
        assert has_subtitle(content)


class TestPageChecks:
    def test_prerequisites(self):
        good = Path("good.md")
        bare = Path("bare.md")
        missing = Path("missing.md")
        documents = {
            good: "Intro.\n\n## Prerequisites\n",
            bare: "## Usage\n",
            missing: None,
        }
        result = ValidationResult()

        check_prerequisites(documents, [good, bare, missing], result)

        assert result.errors == [
            "Missing prerequisites section: bare.md",
            "Missing subtitle sentence before first H2: bare.md",
            "Missing required page for prerequisites check: missing.md",
        ]

    def test_quickstart_headings(self):
        content = "## 1) Install\n## 2) Configure\n## 4) Verify\n"
        result = ValidationResult()

        check_quickstart(
            content, Path("quickstart.md"), ["## 1) Install", "## 3) Initialize"], result
        )

        assert result.errors == ["Quickstart is missing required heading: ## 3) Initialize"]

    def test_error_classes(self):
        result = ValidationResult()

        check_error_classes(
            "AuthError and NetworkError", Path("errors.md"), ["AuthError", "SdkError"], result
        )

        assert result.errors == ["Error playbook is missing SDK error class: SdkError"]

    def test_hub_links_missing_page(self):
        result = ValidationResult()

        check_hub_links(None, Path("hub.md"), ["/docs/rn-methods-bin"], result)

        assert result.errors == ["Missing required page for methods hub check: hub.md"]

    def test_banned_pattern_reported_once_per_file(self):
        page = Path("rn-troubleshooting.md")
        other = Path("rn-interfaces.md")
        documents = {
            page: "The backend is slow. BACKEND again. Another backend mention.",
            other: "Endpoints and backends are fine here.",
        }
        result = ValidationResult()

        check_language(documents, [page, other], BANNED_PATTERNS, result)

        assert result.errors == [
            r"Banned language pattern /\bbackend\b/ found in rn-troubleshooting.md."
        ]

    def test_banned_patterns_each_reported(self):
        page = Path("page.md")
        patterns = [re.compile("alpha", re.IGNORECASE), re.compile("beta", re.IGNORECASE)]
        result = ValidationResult()

        check_language({page: "Alpha and BETA"}, [page], patterns, result)

        assert len(result.errors) == 2
