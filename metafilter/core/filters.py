from __future__ import annotations

import logging
from collections.abc import Sequence

from .rules import FilterRule

logger = logging.getLogger(__name__)


def apply_once(text: str, rules: Sequence[FilterRule]) -> tuple[str, bool]:
    changed = False
    for rule in rules:
        text, fired = rule.apply(text)
        changed = changed or fired
    return text, changed


def apply_rules(text: str, rules: Sequence[FilterRule], *, max_passes: int | None = None) -> str:
    """Apply ``rules`` in order, pass after pass, until a pass changes nothing.

    Rules must not feed themselves (a replacement that always re-matches its
    own pattern never converges). ``max_passes`` caps the number of passes
    for untrusted rule sets; when the cap is hit the text is returned as it
    stands.

    >>> from metafilter.normalize.catalogs import remastered_filter_rules, trim_whitespace_filter_rules
    >>> rules = remastered_filter_rules() + trim_whitespace_filter_rules()
    >>> apply_rules("Here Comes The Sun (Remastered)", rules)
    'Here Comes The Sun'
    """
    if max_passes is not None and max_passes < 1:
        raise ValueError("max_passes must be >= 1")

    passes = 0
    while True:
        result, changed = apply_once(text, rules)
        passes += 1
        # A rule may replace a match with identical text.
        if not changed or result == text:
            break
        text = result
        if max_passes is not None and passes >= max_passes:
            logger.warning("Rule set did not converge after %d passes; returning %r", passes, text)
            return text

    logger.debug("Converged after %d pass(es)", passes)
    return result
