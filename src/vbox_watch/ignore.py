"""Directory ignore rules applied while walking the watch root."""

import logging
from fnmatch import fnmatchcase

from vbox_watch.errors import IgnorePatternError

logger = logging.getLogger(__name__)

DEFAULT_IGNORE = "node_modules;.git;.idea"


def split_ignore_arg(value: str | None) -> list[str]:
    """Split a semicolon-separated ignore list into patterns.

    Args:
        value: Raw flag value, e.g. ``"node_modules;.git;build*"``

    Returns:
        Non-empty, whitespace-stripped patterns in their original order
    """
    if not value:
        return []
    return [part.strip() for part in value.split(";") if part.strip()]


def validate_pattern(pattern: str) -> None:
    """Reject globs with unclosed bracket classes or a dangling backslash.

    ``fnmatch`` silently treats a stray ``[`` as a literal, which hides typos
    like ``build[0-9`` in an ignore list, so those are errors here.
    Backslash is not an escape character in ``fnmatch``, but a pattern ending
    in an odd run of backslashes is still rejected.

    Raises:
        IgnorePatternError: If the pattern is malformed
    """
    if not pattern:
        raise IgnorePatternError(pattern, "empty pattern")

    trailing = len(pattern) - len(pattern.rstrip("\\"))
    if trailing % 2 == 1:
        raise IgnorePatternError(pattern, "trailing backslash")

    i, n = 0, len(pattern)
    while i < n:
        if pattern[i] != "[":
            i += 1
            continue
        j = i + 1
        if j < n and pattern[j] in "!^":
            j += 1
        # A leading ']' is a member of the class, not its end
        if j < n and pattern[j] == "]":
            j += 1
        close = pattern.find("]", j)
        if close == -1:
            raise IgnorePatternError(pattern, f"unterminated character class at offset {i}")
        i = close + 1


def _normalize(pattern: str) -> str:
    # fnmatch spells class negation "[!...]"; accept "[^...]" as well
    return pattern.replace("[^", "[!")


def should_ignore(name: str, patterns: list[str]) -> bool:
    """Decide whether a directory with the given bare name is excluded.

    Hidden directories (leading ``.``) are always excluded. Callers must not
    pass the watch root through here.

    Raises:
        IgnorePatternError: If one of the patterns is malformed
    """
    if name.startswith("."):
        return True

    for pattern in patterns:
        validate_pattern(pattern)
        if fnmatchcase(name, _normalize(pattern)):
            return True
    return False


class IgnoreFilter:
    """Pre-validated ignore pattern set."""

    def __init__(self, patterns: list[str]):
        for pattern in patterns:
            validate_pattern(pattern)
        self.patterns = list(patterns)
        self._normalized = [_normalize(p) for p in patterns]

    @classmethod
    def from_arg(cls, value: str | None) -> "IgnoreFilter":
        """Build a filter from a semicolon-separated ignore list."""
        return cls(split_ignore_arg(value))

    def should_ignore(self, name: str) -> bool:
        """Return True if a directory named ``name`` is hidden or matches a pattern."""
        if name.startswith("."):
            return True
        for pattern in self._normalized:
            if fnmatchcase(name, pattern):
                logger.debug(f"Ignoring directory {name!r} (matched {pattern!r})")
                return True
        return False

    def __repr__(self) -> str:
        return f"IgnoreFilter({self.patterns!r})"
