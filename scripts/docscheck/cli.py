"""Documentation conformance checker for the React Native SDK reference.

Verifies that:
    docs/rn-methods-*.md     - document every SDK module method exactly once,
                               each following the method template
    docs/*.md (key pages)    - carry prerequisites, a subtitle, required
                               headings/links/error classes, and no banned terms

Usage:
    python -m docscheck
    python -m docscheck --sdk-root ../mtn-drive-sdk --format json
    SDK_REPO_PATH=/path/to/sdk python -m docscheck -v
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import CheckConfig, default_config, resolve_sdk_root
from .extractors import collect_expected, collect_sections, load_files
from .models import ValidationResult
from .reporter import ConsoleReporter, JSONReporter, Reporter
from .validators import (
    check_coverage,
    check_error_classes,
    check_hub_links,
    check_language,
    check_method_templates,
    check_prerequisites,
    check_quickstart,
    reconcile,
)

log = logging.getLogger(__name__)


def run_checks(config: CheckConfig, reporter: Reporter) -> ValidationResult:
    """Run every check category, in order, against one reporter."""
    documents = load_files(config.all_doc_files())
    log.info(
        "Loaded %d docs files (%d missing)",
        len(documents),
        sum(1 for content in documents.values() if content is None),
    )

    with reporter.check("prerequisites", "Prerequisites and subtitle checks passed.") as result:
        check_prerequisites(documents, config.prerequisite_pages, result)

    method_docs = {file: documents[file] for file in config.method_doc_files}
    with reporter.check("coverage", "Method coverage matches SDK interfaces.") as result:
        for file, content in method_docs.items():
            if content is None:
                result.fail(f"Missing docs file: {file}")
        expected = collect_expected(config.module_specs, result)
        coverage = reconcile(expected, collect_sections(method_docs))
        log.info(
            "Coverage: %d expected, %d documented", len(coverage.expected), len(coverage.actual)
        )
        reporter.message = (
            f"Method coverage matches SDK interfaces ({len(coverage.expected)} methods)."
        )
        check_coverage(coverage, result)

    with reporter.check("template", "Method template checks passed.") as result:
        check_method_templates(
            coverage,
            config.required_method_sections,
            config.request_table_header,
            config.response_table_header,
            config.signature_fence,
            result,
        )

    with reporter.check("quickstart", "Quickstart numbered flow check passed.") as result:
        check_quickstart(
            documents[config.quickstart_file],
            config.quickstart_file,
            config.required_quickstart_headings,
            result,
        )

    with reporter.check("errors", "Error playbook class coverage check passed.") as result:
        check_error_classes(
            documents[config.error_file],
            config.error_file,
            config.required_error_classes,
            result,
        )

    with reporter.check("hub", "Methods hub link check passed.") as result:
        check_hub_links(
            documents[config.hub_file], config.hub_file, config.hub_links, result
        )

    with reporter.check("language", "Language guardrail checks passed.") as result:
        check_language(documents, config.language_files, config.banned_patterns, result)

    return reporter.result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rn-docs-conformance",
        description="Check the React Native SDK reference docs against the SDK source.",
    )
    parser.add_argument(
        "--docs-root",
        type=Path,
        default=None,
        help="Docs repository root (default: this repository)",
    )
    parser.add_argument(
        "--sdk-root",
        type=Path,
        default=None,
        help="SDK repository root (default: $SDK_REPO_PATH or ../mtn-drive-sdk)",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log progress to stderr"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run all conformance checks. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    docs_root = (args.docs_root or Path(__file__).resolve().parent.parent.parent).resolve()
    sdk_root = args.sdk_root.resolve() if args.sdk_root else resolve_sdk_root(docs_root)
    log.info("Docs root: %s", docs_root)
    log.info("SDK root: %s", sdk_root)

    reporter: Reporter = JSONReporter() if args.format == "json" else ConsoleReporter()
    run_checks(default_config(docs_root, sdk_root), reporter)
    return reporter.finish()


if __name__ == "__main__":
    sys.exit(main())
