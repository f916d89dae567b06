"""Documentation conformance checks for the React Native SDK reference.

Checks that the markdown method reference documents every public method of
the SDK module interfaces exactly once, that each method section follows the
method template, and that the key pages follow the page template.

Usage:
    python -m docscheck
    python -m docscheck --format json
"""

__version__ = "0.1.0"
