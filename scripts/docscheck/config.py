"""Configuration for the React Native SDK docs conformance checks.

Every list that drives the checker lives on CheckConfig so the checks can run
against synthetic fixtures as well as the real docs site.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .models import ModuleSpec

SDK_ROOT_ENV = "SDK_REPO_PATH"
DEFAULT_SDK_DIRNAME = "mtn-drive-sdk"

# (source file stem, interface name, documentation prefix)
SDK_CORE_MODULES: list[tuple[str, str, str]] = [
    ("sessions", "SessionsModule", "sessions"),
    ("drive", "DriveModule", "drive"),
    ("sharing", "SharingModule", "sharing"),
    ("bin", "BinModule", "bin"),
    ("photo-backup", "PhotoBackupModule", "photoBackup"),
    ("storage", "StorageModule", "storage"),
]

# One doc page per module, plus the upload manager page
METHOD_DOC_PAGES: list[str] = [
    "rn-methods-sessions",
    "rn-methods-drive",
    "rn-methods-sharing",
    "rn-methods-bin",
    "rn-methods-photo-backup",
    "rn-methods-storage",
    "rn-methods-upload-manager",
]

REQUIRED_METHOD_SECTIONS: list[str] = [
    "#### What this method does",
    "#### When to call it",
    "#### Signature",
    "#### Request fields",
    "#### Response fields",
    "#### Errors and handling",
    "#### Minimal example",
]

REQUIRED_QUICKSTART_HEADINGS: list[str] = [
    "## 1) Install",
    "## 2) Configure",
    "## 3) Initialize",
    "## 4) Verify",
    "## 5) Next steps",
]

REQUIRED_ERROR_CLASSES: list[str] = [
    "AuthExchangeError",
    "AuthError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "RateLimitError",
    "NetworkError",
    "SdkError",
]

BANNED_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"\bbackend\b", re.IGNORECASE),
    re.compile(r"\bendpoint\b", re.IGNORECASE),
    re.compile(r"implementation-defined", re.IGNORECASE),
    re.compile(r"implementation-specific", re.IGNORECASE),
    re.compile(r"intentionally documented as sdk-opaque", re.IGNORECASE),
]

REQUEST_TABLE_HEADER = "| Field | Type | Required | Default | Format/Constraints | Meaning |"
RESPONSE_TABLE_HEADER = "| Field | Type | Required/Conditional | Format/Constraints | Meaning |"


@dataclass
class CheckConfig:
    """Everything the checker needs to know about the docs and the SDK."""

    module_specs: list[ModuleSpec]
    method_doc_files: list[Path]
    prerequisite_pages: list[Path]
    quickstart_file: Path
    error_file: Path
    hub_file: Path
    language_files: list[Path]
    hub_links: list[str]
    required_method_sections: list[str] = field(
        default_factory=lambda: list(REQUIRED_METHOD_SECTIONS)
    )
    required_quickstart_headings: list[str] = field(
        default_factory=lambda: list(REQUIRED_QUICKSTART_HEADINGS)
    )
    required_error_classes: list[str] = field(
        default_factory=lambda: list(REQUIRED_ERROR_CLASSES)
    )
    banned_patterns: list[re.Pattern[str]] = field(
        default_factory=lambda: list(BANNED_PATTERNS)
    )
    request_table_header: str = REQUEST_TABLE_HEADER
    response_table_header: str = RESPONSE_TABLE_HEADER
    signature_fence: str = "ts"

    def all_doc_files(self) -> list[Path]:
        """Every markdown file any check reads, without duplicates."""
        files = [
            *self.prerequisite_pages,
            self.quickstart_file,
            self.error_file,
            self.hub_file,
            *self.method_doc_files,
            *self.language_files,
        ]
        return list(dict.fromkeys(files))


def resolve_sdk_root(
    docs_root: Path, environ: Mapping[str, str] | None = None
) -> Path:
    """Locate the SDK checkout: $SDK_REPO_PATH, else a sibling of the docs repo."""
    env = os.environ if environ is None else environ
    override = env.get(SDK_ROOT_ENV)
    if override:
        return Path(override).resolve()
    return (docs_root / ".." / DEFAULT_SDK_DIRNAME).resolve()


def default_config(docs_root: Path, sdk_root: Path) -> CheckConfig:
    """Build the configuration for the React Native SDK reference docs."""
    docs = docs_root / "docs"
    modules_dir = sdk_root / "packages" / "sdk-core" / "src" / "modules"

    module_specs = [
        ModuleSpec(file=modules_dir / f"{stem}.ts", declaration=iface, prefix=prefix)
        for stem, iface, prefix in SDK_CORE_MODULES
    ]
    module_specs.append(
        ModuleSpec(
            file=sdk_root / "packages" / "react-native-sdk" / "src" / "upload-manager.ts",
            declaration="ReactNativePhotoBackupUploadManager",
            prefix="photoBackupUploadManager",
            kind="class",
            methods=("backupAsset",),
        )
    )

    method_doc_files = [docs / f"{page}.md" for page in METHOD_DOC_PAGES]
    hub_file = docs / "rn-sdk-methods-reference.md"
    quickstart_file = docs / "quickstart-react-native.md"
    error_file = docs / "error-retry-matrix.md"
    interfaces_file = docs / "rn-interfaces.md"
    troubleshooting_file = docs / "rn-troubleshooting.md"

    return CheckConfig(
        module_specs=module_specs,
        method_doc_files=method_doc_files,
        prerequisite_pages=[
            quickstart_file,
            interfaces_file,
            hub_file,
            *method_doc_files,
            error_file,
            troubleshooting_file,
        ],
        quickstart_file=quickstart_file,
        error_file=error_file,
        hub_file=hub_file,
        language_files=[
            hub_file,
            quickstart_file,
            interfaces_file,
            error_file,
            *method_doc_files,
            troubleshooting_file,
        ],
        hub_links=[f"/docs/{page}" for page in METHOD_DOC_PAGES],
    )
