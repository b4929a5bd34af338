"""Free-text parsing of a single CLI token into an action or matcher.

This is a narrow, lossy convenience layer: there is no textual syntax for
worker actions or multi-destination forwards.  Those only ever come back
from the provider.
"""

from __future__ import annotations

from mailroute.core.models import (
    Drop,
    Forward,
    MatchAll,
    MatchLiteral,
    RoutingAction,
    RoutingMatcher,
)

DROP_KEYWORD = "drop"
CATCH_ALL_KEYWORD = "*"


def parse_action(text: str) -> RoutingAction:
    """``"drop"`` → :class:`Drop`; anything else forwards to *text*."""
    if text == DROP_KEYWORD:
        return Drop()
    return Forward(destinations=(text,))


def parse_matcher(text: str) -> RoutingMatcher:
    """``"*"`` → :class:`MatchAll`; anything else is a literal address.

    No validation happens here — completing a bare local-part is the
    creation resolver's job.
    """
    if text == CATCH_ALL_KEYWORD:
        return MatchAll()
    return MatchLiteral(address=text)
