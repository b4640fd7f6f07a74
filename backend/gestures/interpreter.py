"""Gesture token to action mapping."""

import logging

from gestures.models import LEGACY_TOKENS, TOKEN_ACTIONS, ActionIdentifier

logger = logging.getLogger(__name__)


class GestureInterpreter:
    """Stateless lookup from a received gesture token to an ActionIdentifier."""

    def __init__(self, accept_legacy: bool = True) -> None:
        self._accept_legacy = accept_legacy

    def map(self, token: str) -> ActionIdentifier | None:
        """
        Return the action for `token`, or None if it is not in the vocabulary.

        Matching is exact and case-sensitive after trimming whitespace.
        Legacy emoji tokens are translated first when enabled.
        """
        token = token.strip()
        if self._accept_legacy:
            token = LEGACY_TOKENS.get(token, token)
        return TOKEN_ACTIONS.get(token)
