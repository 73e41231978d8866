"""Textual heuristics over configuration files.

These are containment checks, not parsers: a directive counts as present
if the pattern appears on a non-comment line. Directives pulled in through
nginx ``include`` files are not followed.
"""

import re
from dataclasses import dataclass

# Full-line comment markers per file kind
COMMENT_PREFIXES = {
    "nginx": ("#",),
    "dockerfile": ("#",),
    "js": ("//", "/*", "*"),
}


def strip_comments(text: str, kind: str) -> str:
    """Drop full-line comments so commented-out directives don't count."""
    prefixes = COMMENT_PREFIXES.get(kind, ())
    kept = [
        line for line in text.splitlines()
        if not (prefixes and line.lstrip().startswith(prefixes))
    ]
    return "\n".join(kept)


@dataclass(frozen=True)
class TextRule:
    """A directive that should (or should not) appear in a file.

    Attributes:
        id: Result id.
        pattern: Regular expression searched line by line.
        present: Message when the pattern is found.
        absent: Message when it is not.
        wanted: False for directives whose presence is the problem.
    """

    id: str
    pattern: str
    present: str
    absent: str
    wanted: bool = True

    def matches(self, text: str) -> bool:
        return re.search(self.pattern, text, re.MULTILINE) is not None


def literal(text: str) -> str:
    """Pattern for a plain substring, the way ``grep -F`` would match it."""
    return re.escape(text)


def apply_rule(check, rule: TextRule, text: str, subject: str | None = None):
    """Turn a rule match into a Pass or Warn result for ``check``."""
    found = rule.matches(text)
    message = rule.present if found else rule.absent
    if found == rule.wanted:
        return check.passed(rule.id, message, subject=subject)
    return check.warned(rule.id, message, subject=subject)
