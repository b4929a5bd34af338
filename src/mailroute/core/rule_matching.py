"""Pure rule matching and ordering logic.

Every function in this module is a **pure** transformation — no I/O,
no side effects, fully deterministic, and trivially unit-testable.

* **Match** — case-insensitive substring test of a user fragment against
  a rule's ID and its literal matcher addresses.
* **Sort** — priority descending, absent priority counted as ``0``.
"""

from __future__ import annotations

from collections.abc import Sequence

from mailroute.core.models import MatchLiteral, Rule


# ---------------------------------------------------------------------------
# Match
# ---------------------------------------------------------------------------

def kinda_matches(fragment: str, candidate: str) -> bool:
    """Return ``True`` when *candidate* contains *fragment*, ignoring case."""
    return fragment.lower() in candidate.lower()


def rule_matches(fragment: str, rule: Rule) -> bool:
    """Return ``True`` when *fragment* identifies *rule*.

    Catch-all matchers never match: they carry no value to compare.
    """
    if kinda_matches(fragment, rule.id):
        return True
    return any(
        isinstance(matcher, MatchLiteral) and kinda_matches(fragment, matcher.address)
        for matcher in rule.matchers
    )


def find_matching_rules(fragment: str, rules: Sequence[Rule]) -> list[Rule]:
    """Return every rule in *rules* identified by *fragment*, in order."""
    return [rule for rule in rules if rule_matches(fragment, rule)]


# ---------------------------------------------------------------------------
# Sort
# ---------------------------------------------------------------------------

def sort_by_priority(rules: Sequence[Rule]) -> list[Rule]:
    """Sort highest priority first; ties keep the provider's order."""
    return sorted(rules, key=lambda rule: rule.priority or 0, reverse=True)
