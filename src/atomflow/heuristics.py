"""Text heuristics over names, source snippets and import paths.

These stand in for real symbol resolution. Each one is a plain function
so callers can replace it without touching the mapper, resolver or DNA code.
"""

from __future__ import annotations

import re

# Ordered verb prefixes. Longest match wins, so "initialize" beats "init".
VERB_PREFIXES: tuple[str, ...] = (
    "get",
    "fetch",
    "load",
    "read",
    "find",
    "search",
    "query",
    "list",
    "create",
    "build",
    "make",
    "generate",
    "init",
    "initialize",
    "add",
    "insert",
    "save",
    "store",
    "write",
    "set",
    "update",
    "modify",
    "delete",
    "remove",
    "clear",
    "reset",
    "validate",
    "check",
    "verify",
    "is",
    "has",
    "can",
    "should",
    "parse",
    "format",
    "transform",
    "convert",
    "normalize",
    "map",
    "filter",
    "reduce",
    "sort",
    "merge",
    "compute",
    "calculate",
    "handle",
    "process",
    "render",
)

_TOKEN_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z0-9]+")
_SOURCE_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".py")


def match_verb(name: str) -> str | None:
    """Return the longest verb from VERB_PREFIXES that prefixes ``name``."""
    lowered = name.lower()
    best: str | None = None
    for verb in VERB_PREFIXES:
        if lowered.startswith(verb) and (best is None or len(verb) > len(best)):
            best = verb
    return best


def split_identifier(name: str) -> list[str]:
    """Split a camelCase or snake_case identifier into word tokens.

    Examples:
        getUserProfile -> ["get", "User", "Profile"]
        parse_HTTP_header -> ["parse", "HTTP", "header"]
    """
    return _TOKEN_RE.findall(name)


def find_result_binding(source: str, callee_name: str, start_line: int = 0) -> str | None:
    """Find the local a call result is assigned to.

    Matches ``const|let|var NAME = [await] CALLEE(`` in the caller source,
    searching from ``start_line`` (0-based offset) onward so that repeated
    calls to the same callee each find their own binding.
    """
    if not source or not callee_name:
        return None
    pattern = re.compile(
        rf"\b(?:const|let|var)\s+([A-Za-z_$][\w$]*)\s*=\s*(?:await\s+)?"
        rf"(?:[\w$]+\.)*{re.escape(callee_name)}\s*\("
    )
    match = pattern.search("\n".join(source.splitlines()[start_line:]))
    return match.group(1) if match else None


def find_binding_usages(source: str, binding: str, after_line: int) -> list[tuple[int, str]]:
    """Find lines after ``after_line`` (0-based offset into source) mentioning ``binding``.

    Returns (offset, stripped line) pairs.
    """
    word = re.compile(rf"(?<![\w$]){re.escape(binding)}(?![\w$])")
    usages: list[tuple[int, str]] = []
    for offset, text in enumerate(source.splitlines()):
        if offset <= after_line:
            continue
        if word.search(text):
            usages.append((offset, text.strip()))
    return usages


def _normalize_module_path(path: str) -> str:
    path = path.replace("\\", "/").strip()
    for ext in _SOURCE_EXTENSIONS:
        if path.endswith(ext):
            path = path[: -len(ext)]
            break
    if path.endswith("/index") or path.endswith("/__init__"):
        path = path.rsplit("/", 1)[0]
    return path


def import_references_file(source: str, file_path: str) -> bool:
    """Check whether an import source plausibly points at ``file_path``.

    Relative prefixes and extensions are ignored and the comparison is
    segment-aware: "./math" matches "src/math.js" but not "src/mymath.js".
    Dotted Python module paths ("pkg.math") are treated as slash paths.
    """
    if not source or not file_path:
        return False

    target = source.replace("\\", "/").strip()
    while target.startswith("./") or target.startswith("../"):
        target = target.split("/", 1)[1]
    target = target.lstrip(".")
    # "pkg.utils" style; leave "name.js" alone.
    if "/" not in target and not target.endswith(_SOURCE_EXTENSIONS):
        target = target.replace(".", "/")
    target = _normalize_module_path(target)
    if not target:
        return False

    candidate = _normalize_module_path(file_path)
    return candidate == target or candidate.endswith("/" + target)
