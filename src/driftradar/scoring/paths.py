"""Path classification rules.

Each rule is an independent predicate over the lower-cased path. A path may
carry several tags at once: ``src/deploy.yml`` is both core and infra.
"""

from __future__ import annotations

_DOCS_PREFIXES = ("docs/", "readme")
_DOCS_SUFFIXES = (".md",)

_INFRA_PREFIXES = (".github/", "terraform/")
_INFRA_SUFFIXES = (".yml", ".yaml", ".tf")
_INFRA_EXACT = frozenset({"dockerfile"})

_CORE_PREFIXES = ("src/", "lib/", "app/")

_TESTS_PREFIXES = ("tests/", "__tests__/")
_TESTS_SEGMENT = "/__tests__/"

# Manifests and lockfiles, matched against the whole path
DEPENDENCY_FILES: frozenset[str] = frozenset({
    "package.json",
    "package-lock.json",
    "pnpm-lock.yaml",
    "yarn.lock",
    "poetry.lock",
    "requirements.txt",
    "pipfile.lock",
})


def is_docs_path(path: str) -> bool:
    lower = path.lower()
    return lower.startswith(_DOCS_PREFIXES) or lower.endswith(_DOCS_SUFFIXES)


def is_infra_path(path: str) -> bool:
    lower = path.lower()
    return (
        lower.startswith(_INFRA_PREFIXES)
        or lower in _INFRA_EXACT
        or lower.endswith(_INFRA_SUFFIXES)
    )


def is_core_path(path: str) -> bool:
    return path.lower().startswith(_CORE_PREFIXES)


def is_tests_path(path: str) -> bool:
    lower = path.lower()
    return lower.startswith(_TESTS_PREFIXES) or _TESTS_SEGMENT in lower


def is_deps_path(path: str) -> bool:
    return path.lower() in DEPENDENCY_FILES


def path_tags(path: str) -> list[str]:
    """Return every category tag that applies to `path`, in a fixed order."""
    tags = []
    if is_core_path(path):
        tags.append("core")
    if is_tests_path(path):
        tags.append("tests")
    if is_deps_path(path):
        tags.append("deps")
    if is_infra_path(path):
        tags.append("infra")
    if is_docs_path(path):
        tags.append("docs")
    return tags
