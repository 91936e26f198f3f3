from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from .errors import ConfigurationError


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile a path glob: ``**`` spans directories, ``*`` and ``?`` stay in one segment."""

    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                i += 2
                if pattern.startswith("/", i):
                    # "**/" also matches zero directories.
                    out.append("(?:.*/)?")
                    i += 1
                else:
                    out.append(".*")
                continue
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            j = i + 1
            if pattern.startswith("!", j):
                j += 1
            # A "]" right after the opening bracket belongs to the class.
            if pattern.startswith("]", j):
                j += 1
            end = pattern.find("]", j)
            if end == -1:
                # No closing bracket: the "[" is literal.
                out.append(re.escape(c))
                i += 1
                continue
            body = pattern[i + 1 : end]
            negate = body.startswith("!")
            if negate:
                body = body[1:]
            body = body.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
            out.append("[" + ("^" if negate else "") + body + "]")
            i = end
        else:
            out.append(re.escape(c))
        i += 1

    try:
        return re.compile("".join(out) + r"\Z")
    except re.error as exc:
        raise ConfigurationError(f"Invalid exclude pattern {pattern!r}: {exc}") from exc


@dataclass(frozen=True, slots=True)
class _Rule:
    pattern: str
    regex: re.Pattern[str]


class ExclusionMatcher:
    """Paths that must keep their original name.

    A path is excluded if either check matches:
      - the pattern occurs anywhere in the path as a plain substring
      - the whole path matches the pattern as a glob
    """

    def __init__(self, patterns: Iterable[str] | None = None) -> None:
        rules: list[_Rule] = []
        for pattern in patterns or ():
            if not isinstance(pattern, str) or not pattern:
                raise ConfigurationError(f"exclude patterns must be non-empty strings, got {pattern!r}")
            rules.append(_Rule(pattern=pattern, regex=glob_to_regex(pattern)))
        self._rules = tuple(rules)

    @property
    def patterns(self) -> tuple[str, ...]:
        return tuple(r.pattern for r in self._rules)

    def __bool__(self) -> bool:
        return bool(self._rules)

    def _contains(self, path: str) -> bool:
        return any(r.pattern in path for r in self._rules)

    def glob_matches(self, path: str) -> bool:
        return any(r.regex.match(path.replace("\\", "/")) for r in self._rules)

    def is_excluded(self, path: str) -> bool:
        path = path.replace("\\", "/")
        return self._contains(path) or self.glob_matches(path)
