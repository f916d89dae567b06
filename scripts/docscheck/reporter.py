"""Report check outcomes and decide the process exit status."""

from __future__ import annotations

import json
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

from .models import CheckOutcome, ValidationResult

FINAL_MESSAGE = "RN docs conformance checks passed."


class Reporter:
    """Collects outcomes per check category into one ValidationResult.

    Subclasses decide how outcomes are shown.
    """

    def __init__(self) -> None:
        self.result = ValidationResult()
        # Success line for the running category; a check may refine it
        self.message = ""

    @contextmanager
    def check(self, name: str, message: str) -> Iterator[ValidationResult]:
        """Run one check category; failures recorded inside belong to it.

        Args:
            name: Short category identifier ("coverage")
            message: Success line shown when the category records no failure
        """
        start = len(self.result.errors)
        self.message = message
        try:
            yield self.result
        except Exception as e:
            self.result.fail(f"{name} check aborted: {e.__class__.__name__}: {e}")
            raise
        finally:
            outcome = CheckOutcome(
                name=name, message=self.message, errors=self.result.errors[start:]
            )
            self.result.checks.append(outcome)
            self.emit(outcome)

    def emit(self, outcome: CheckOutcome) -> None:
        pass

    def finish(self) -> int:
        """Emit the closing summary and return the exit status."""
        return 0 if self.result.passed else 1


class ConsoleReporter(Reporter):
    """Prints ✓ lines to stdout and ✗ lines to stderr as checks complete."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        super().__init__()
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    def emit(self, outcome: CheckOutcome) -> None:
        for error in outcome.errors:
            print(f"✗ {error}", file=self.err)
        if outcome.passed:
            print(f"✓ {outcome.message}", file=self.out)

    def finish(self) -> int:
        if self.result.passed:
            print(f"✓ {FINAL_MESSAGE}", file=self.out)
        return super().finish()


class JSONReporter(Reporter):
    """Prints a single JSON document once all checks have run."""

    def __init__(self, out: TextIO | None = None) -> None:
        super().__init__()
        self.out = out or sys.stdout

    def finish(self) -> int:
        payload = {
            "passed": self.result.passed,
            "checks": [
                {
                    "name": outcome.name,
                    "passed": outcome.passed,
                    "message": outcome.message,
                    "errors": outcome.errors,
                }
                for outcome in self.result.checks
            ],
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False), file=self.out)
        return super().finish()
