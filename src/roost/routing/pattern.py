"""Route pattern compilation and path normalization.

Patterns are paths with placeholders::

    users/{id}              -> one segment, any characters but "/"
    users/{id:\\d+}          -> custom regex
    files/{filepath:path}   -> named converter (see CONVERTERS)

Separators in literal text are interchangeable: ``business-plan`` and
``business_plan`` address the same route, both as registered patterns
(one table key) and as requested paths. Nothing is case-folded.

Placeholders are matched against the path as sent. A custom regex
sees the real characters (``{slug:[a-z-]+}`` matches ``hello-world``)
and captured values keep their dashes.
"""

import re
from dataclasses import dataclass
from functools import lru_cache

# Default regex for a placeholder without a custom expression
DEFAULT_PARAM_REGEX = r"[^/]+"

# Named converters accepted in place of a custom regex: {id:int}
CONVERTERS: dict[str, str] = {
    "str": DEFAULT_PARAM_REGEX,
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}

# {name} or {name:regex}; the regex may contain balanced {m,n} quantifiers
_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z0-9_]+)(?::((?:[^{}]|\{[^{}]*\})+))?\}")


@dataclass(frozen=True, slots=True)
class Placeholder:
    """A ``{name}`` or ``{name:regex}`` occurrence in a pattern."""

    name: str
    regex: str
    start: int
    end: int


def normalize(path: str) -> str:
    """Trim surrounding slashes and map ``-`` to ``_``.

    Used for table keys and the exact-match fast path. Text inside
    placeholders is left alone, so ``post-tags/{slug:[a-z-]+}`` becomes
    ``post_tags/{slug:[a-z-]+}``.
    """
    path = path.strip("/")
    parts: list[str] = []
    last = 0
    for match in _PLACEHOLDER_RE.finditer(path):
        parts.append(path[last : match.start()].replace("-", "_"))
        parts.append(match.group(0))
        last = match.end()
    parts.append(path[last:].replace("-", "_"))
    return "".join(parts)


def placeholders(pattern: str) -> list[Placeholder]:
    """List the placeholders of *pattern* in declaration order."""
    return [
        Placeholder(
            name=m.group(1),
            regex=_param_regex(m.group(2)),
            start=m.start(),
            end=m.end(),
        )
        for m in _PLACEHOLDER_RE.finditer(pattern)
    ]


def has_placeholders(pattern: str) -> bool:
    """True if *pattern* contains at least one placeholder."""
    return _PLACEHOLDER_RE.search(pattern) is not None


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a normalized *pattern* to an anchored regex.

    Each placeholder becomes one capturing group, in declaration order;
    custom regexes have their own groups made non-capturing so the
    positional parameter list always has one entry per placeholder.
    Literal text is escaped, and each literal ``-`` or ``_`` matches
    either separator. Paths are matched as sent, so captured values keep
    their original separators and custom regexes see the raw text.

    Raises ``ValueError`` if a custom regex does not compile.
    """
    pieces: list[str] = []
    last = 0
    for ph in placeholders(pattern):
        pieces.append(_literal(pattern[last : ph.start]))
        pieces.append(f"({ph.regex})")
        last = ph.end
    pieces.append(_literal(pattern[last:]))
    source = "".join(pieces)
    try:
        return re.compile(source)
    except re.error as exc:
        msg = f"Invalid route pattern {pattern!r}: {exc}"
        raise ValueError(msg) from exc


def _literal(text: str) -> str:
    return "".join("[-_]" if ch in "-_" else re.escape(ch) for ch in text)


def _param_regex(custom: str | None) -> str:
    if not custom:
        return DEFAULT_PARAM_REGEX
    if custom in CONVERTERS:
        return CONVERTERS[custom]
    return _uncapture(custom)


def _uncapture(regex: str) -> str:
    """Turn plain ``(...)`` groups into ``(?:...)``.

    Escaped parens, character classes and existing ``(?...)`` groups
    are left alone.
    """
    out: list[str] = []
    i = 0
    in_class = False
    while i < len(regex):
        ch = regex[i]
        if ch == "\\":
            out.append(regex[i : i + 2])
            i += 2
            continue
        if in_class:
            if ch == "]":
                in_class = False
        elif ch == "[":
            in_class = True
        elif ch == "(" and not regex.startswith("?", i + 1):
            out.append("(?:")
            i += 1
            continue
        out.append(ch)
        i += 1
    return "".join(out)
