"""Value objects for ignore and force-include policies."""

import re
from dataclasses import dataclass, field

from metadelta.common.errors import InvalidPolicyPattern

GLOB_CHARACTERS = frozenset("*?[")


@dataclass(frozen=True)
class PolicyRule:
    """One compiled gitignore-style pattern."""

    pattern: str
    negated: bool
    regex: re.Pattern[str]

    @classmethod
    def compile(cls, raw: str) -> "PolicyRule":
        negated = raw.startswith("!")
        pattern = raw[1:] if negated else raw
        if pattern.startswith("\\"):
            pattern = pattern[1:]
        try:
            regex = re.compile(_translate(pattern))
        except re.error as e:
            raise InvalidPolicyPattern(raw, str(e)) from e
        return cls(pattern=pattern, negated=negated, regex=regex)

    @property
    def is_literal(self) -> bool:
        """Whether the rule names one exact file path."""
        return (
            not self.negated
            and not self.pattern.endswith("/")
            and not GLOB_CHARACTERS.intersection(self.pattern)
        )

    @property
    def literal_path(self) -> str:
        return self.pattern.lstrip("/")


def _translate(pattern: str) -> str:
    """Translate a gitignore-style pattern into a regex over repository paths.

    A pattern matches a path when it matches the path itself or one of its
    parent directories.
    """
    dir_only = pattern.endswith("/")
    body = pattern.rstrip("/")
    anchored = "/" in body
    body = body.lstrip("/")

    parts: list[str] = []
    i = 0
    while i < len(body):
        char = body[i]
        if body.startswith("**", i):
            i += 2
            if body.startswith("/", i):
                parts.append("(?:.*/)?")
                i += 1
            else:
                parts.append(".*")
            continue
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        elif char == "[":
            # A "]" right after "[" or "[!" belongs to the class
            start = i + 2 if body.startswith("!", i + 1) else i + 1
            if body.startswith("]", start):
                start += 1
            end = body.find("]", start)
            if end == -1:
                parts.append(re.escape(char))
            else:
                content = body[i + 1 : end].replace("\\", "\\\\")
                if content.startswith("!"):
                    content = "^" + content[1:]
                elif content.startswith("^"):
                    content = "\\" + content
                parts.append(f"[{content}]")
                i = end
        else:
            parts.append(re.escape(char))
        i += 1

    prefix = "^" if anchored else "^(?:.*/)?"
    suffix = "/.*$" if dir_only else "(?:/.*)?$"
    return prefix + "".join(parts) + suffix


@dataclass(frozen=True)
class PolicyList:
    """Ordered gitignore-style patterns; the last matching pattern wins."""

    patterns: tuple[str, ...] = ()
    rules: tuple[PolicyRule, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        rules = tuple(PolicyRule.compile(pattern) for pattern in _clean(self.patterns))
        object.__setattr__(self, "rules", rules)

    @classmethod
    def from_text(cls, text: str) -> "PolicyList":
        return cls(patterns=tuple(text.splitlines()))

    def __bool__(self) -> bool:
        return bool(self.rules)

    def matches(self, path: str) -> bool:
        """Check whether a path is selected by this list."""
        selected = False
        for rule in self.rules:
            if rule.regex.match(path):
                selected = not rule.negated
        return selected

    @property
    def literal_paths(self) -> tuple[str, ...]:
        return tuple(rule.literal_path for rule in self.rules if rule.is_literal)

    @property
    def has_patterns(self) -> bool:
        """Whether some rule needs expansion against a file listing."""
        return any(not rule.is_literal for rule in self.rules)


def _clean(patterns: tuple[str, ...]) -> list[str]:
    cleaned = []
    for pattern in patterns:
        stripped = pattern.strip()
        if not stripped or stripped.startswith("#"):
            continue
        cleaned.append(stripped)
    return cleaned


@dataclass(frozen=True)
class PolicySet:
    """The four policy lists applied to a change set.

    An unset destructive ignore list reuses the constructive one.
    """

    ignore_constructive: PolicyList = PolicyList()
    ignore_destructive: PolicyList | None = None
    force_include_constructive: PolicyList = PolicyList()
    force_include_destructive: PolicyList = PolicyList()

    @property
    def effective_ignore_destructive(self) -> PolicyList:
        if self.ignore_destructive is None:
            return self.ignore_constructive
        return self.ignore_destructive
