"""Line matcher for literal and regular-expression patterns.

One matcher is compiled per search and shared by every worker and by the
content index, so both search paths agree on what a hit is.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from treegrep.core.errors import SearchError

NO_MATCH: tuple[bool, int, int] = (False, -1, -1)


@dataclass(frozen=True, slots=True)
class PatternMatcher:
    """Compiled pattern. Offsets are indices into the original line."""

    pattern: str
    is_regex: bool
    case_sensitive: bool
    _regex: re.Pattern[str] | None = None

    @classmethod
    def compile(
        cls,
        pattern: str,
        *,
        is_regex: bool = False,
        case_sensitive: bool = True,
    ) -> PatternMatcher:
        """Compile a matcher.

        Raises:
            SearchError: If ``is_regex`` and the pattern does not compile.
        """
        flags = 0 if case_sensitive else re.IGNORECASE
        if is_regex:
            try:
                regex = re.compile(pattern, flags)
            except re.error as e:
                raise SearchError.invalid_pattern(pattern, str(e)) from e
        elif case_sensitive:
            regex = None
        else:
            # Folding with str.lower() can change lengths; an escaped
            # IGNORECASE search keeps offsets valid for the original line.
            regex = re.compile(re.escape(pattern), flags)
        return cls(pattern=pattern, is_regex=is_regex, case_sensitive=case_sensitive, _regex=regex)

    def match(self, line: str) -> tuple[bool, int, int]:
        """Return ``(found, start, end)`` for the first match in ``line``."""
        if self._regex is None:
            start = line.find(self.pattern)
            if start < 0:
                return NO_MATCH
            return True, start, start + len(self.pattern)

        m = self._regex.search(line)
        if m is None:
            return NO_MATCH
        return True, m.start(), m.end()

    def matches(self, line: str) -> bool:
        return self.match(line)[0]
