"""Regex replacement rules.

A ``FilterRule`` pairs a compiled pattern with a replacement template and
substitutes the first match it finds. Compiling is the expensive part, so rules
are built once and shared; see ``metafilter.normalize.catalogs`` for the
predefined tables.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

# $$, ${group} or $group (longest run of word characters)
TEMPLATE_REF_PATTERN = re.compile(r"\$(?:(\$)|\{([^}]*)\}|([0-9A-Za-z_]+))")


class InvalidPattern(ValueError):
    def __init__(self, pattern: str, replacement: str, reason: str) -> None:
        super().__init__(f"Invalid filter rule pattern {pattern!r} (replacement {replacement!r}): {reason}")
        self.pattern = pattern
        self.replacement = replacement
        self.reason = reason


def _group_ref(regex: re.Pattern[str], name: str) -> str:
    # Missing groups expand to nothing.
    if name.isascii() and name.isdigit():
        index = int(name)
        return f"\\g<{index}>" if index <= regex.groups else ""
    return f"\\g<{name}>" if name in regex.groupindex else ""


def compile_template(regex: re.Pattern[str], replacement: str) -> str:
    """Translate a ``$1``-style replacement into a template ``re`` understands.

    Literal text is escaped so backslashes in the replacement stay literal.
    """
    parts: list[str] = []
    pos = 0
    for match in TEMPLATE_REF_PATTERN.finditer(replacement):
        parts.append(replacement[pos : match.start()].replace("\\", "\\\\"))
        dollar, braced, bare = match.groups()
        if dollar:
            parts.append("$")
        else:
            parts.append(_group_ref(regex, braced if braced is not None else bare))
        pos = match.end()
    parts.append(replacement[pos:].replace("\\", "\\\\"))
    return "".join(parts)


@dataclass(frozen=True, slots=True)
class FilterRule:
    pattern: str
    replacement: str = ""
    regex: re.Pattern[str] = field(init=False, repr=False, compare=False)
    template: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            regex = re.compile(self.pattern)
        except re.error as exc:
            raise InvalidPattern(self.pattern, self.replacement, str(exc)) from exc
        object.__setattr__(self, "regex", regex)
        object.__setattr__(self, "template", compile_template(regex, self.replacement))

    def apply(self, text: str) -> tuple[str, bool]:
        """Replace the first match in ``text``.

        Returns ``(text, False)`` with the same string object when nothing
        matched, so callers can skip copying.
        """
        new_text, count = self.regex.subn(self.template, text, count=1)
        if not count:
            return text, False
        return new_text, True


RuleSet = tuple[FilterRule, ...]


def compile_rules(pairs: Iterable[tuple[str, str]]) -> RuleSet:
    return tuple(FilterRule(pattern, replacement) for pattern, replacement in pairs)
