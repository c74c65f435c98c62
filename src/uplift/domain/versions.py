"""
Version and range helpers over npm-style semantic versioning.

Thin wrappers around semantic_version's NpmSpec. Ranges that cannot be
parsed (dist-tags, URLs, file: specifiers) never satisfy anything.
"""

import re
from functools import lru_cache

from semantic_version import NpmSpec, Version

_VERSION_TOKEN = re.compile(r"\d+(?:\.\d+){0,2}(?:-[0-9A-Za-z.-]+)?")


@lru_cache(maxsize=1024)
def parse_range(version_range: str) -> NpmSpec | None:
    try:
        return NpmSpec(version_range.strip() or "*")
    except ValueError:
        return None


def coerce(text: str) -> Version | None:
    """Loose parse: 'v18', '18.2', '18.2.0-rc.1' -> Version, else None."""
    if not text:
        return None
    text = text.strip().lstrip("vV=")
    if _is_exact(text):
        return Version(text)
    match = _VERSION_TOKEN.search(text)
    if not match:
        return None
    try:
        return Version.coerce(match.group(0))
    except ValueError:
        return None


def major(text: str) -> int | None:
    version = coerce(text)
    return version.major if version is not None else None


def satisfies(version: str | Version, version_range: str) -> bool:
    """True when version falls inside the npm range."""
    spec = parse_range(version_range)
    if spec is None:
        return False
    parsed = version if isinstance(version, Version) else coerce(version)
    if parsed is None:
        return False
    return spec.match(parsed)


def _candidates(items: list[str]) -> set[Version]:
    found: set[Version] = set()
    for item in items:
        exact = coerce(item) if _is_exact(item) else None
        if exact is not None:
            found.add(exact)
            continue
        for token in _VERSION_TOKEN.findall(item):
            version = coerce(token)
            if version is not None:
                found.add(version)
    return found


def _successors(versions: set[Version]) -> set[Version]:
    """Nearest versions above each bound, for exclusive lower bounds like >1.2.0."""
    return {
        successor
        for version in versions
        for successor in (
            version.next_patch(),
            version.next_minor(),
            version.next_major(),
        )
    }


def _is_exact(item: str) -> bool:
    try:
        Version(item.strip().lstrip("vV="))
    except ValueError:
        return False
    return True


def find_intersection(items: list[str]) -> str | None:
    """
    Highest version satisfying every exact version or range in items.

    Candidates are the exact versions and range bounds that appear in the
    inputs. When none of them fits, the next patch, minor and major above
    each bound are tried. No registry is consulted.
    """
    if not items:
        return None
    bounds = _candidates(items)
    for candidates in (bounds, _successors(bounds)):
        matching = [
            candidate
            for candidate in candidates
            if all(satisfies(candidate, item) for item in items)
        ]
        if matching:
            return str(max(matching))
    return None
