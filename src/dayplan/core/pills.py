"""Per-slot pill status tokens. Session scoped, never persisted."""

import logging
from dataclasses import dataclass, replace

from .errors import UnknownSlot
from .slots import SlotCalendar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PillToken:
    """The taken / not-taken status of one slot's pill."""

    slot_index: int
    label: str
    taken: bool = False


class PillStatusTrack:
    """
    Owns exactly one PillToken per calendar slot.

    Tokens are created once per session and never added or removed
    afterwards; only their `taken` flag changes, by swapping in an updated
    frozen token. A new session starts with every pill not taken.
    """

    def __init__(self, calendar: SlotCalendar):
        self._tokens: list[PillToken] = []
        self.initialize(calendar)

    def initialize(self, calendar: SlotCalendar) -> list[PillToken]:
        """Reset to one not-taken token per slot."""
        self._tokens = [PillToken(slot_index=i, label=label) for i, label in enumerate(calendar.slots())]
        return self.tokens()

    def tokens(self) -> list[PillToken]:
        return list(self._tokens)

    def get(self, slot_index: int) -> PillToken | None:
        if 0 <= slot_index < len(self._tokens):
            return self._tokens[slot_index]
        return None

    def set_taken(self, slot_index: int, taken: bool) -> PillToken:
        """Mark a slot's pill as taken or not taken. Idempotent."""
        token = self.get(slot_index)
        if token is None:
            raise UnknownSlot(slot_index)
        if token.taken != taken:
            token = replace(token, taken=taken)
            self._tokens[slot_index] = token
            logger.debug(f"Pill {token.label} marked {'taken' if taken else 'not taken'}")
        return token

    def taken_count(self) -> int:
        return sum(1 for t in self._tokens if t.taken)
