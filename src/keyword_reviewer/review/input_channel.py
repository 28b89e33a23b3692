"""Key input channel owned by the active review session."""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Iterator

from keyword_reviewer.core.exceptions import InputChannelError

logger = logging.getLogger(__name__)


class Decision(str, Enum):
    """Logical review inputs."""

    ACCEPT = "accept"
    REJECT = "reject"


KEY_BINDINGS: dict[str, Decision] = {
    "y": Decision.ACCEPT,
    "Y": Decision.ACCEPT,
    "n": Decision.REJECT,
    "N": Decision.REJECT,
}


def decision_for_key(key: str) -> Decision | None:
    """Map a key press to a decision; unbound keys map to None."""
    return KEY_BINDINGS.get(key)


KeyHandler = Callable[[str], bool]


class KeyInputChannel:
    """Delivers key presses to at most one attached handler.

    A session attaches its handler once for the duration of the review and
    detaches it on the way out, so a key press is never handled twice and
    no handler outlives its session.
    """

    def __init__(self, name: str = "review"):
        self.name = name
        self._handler: KeyHandler | None = None

    @property
    def is_attached(self) -> bool:
        return self._handler is not None

    def attach(self, handler: KeyHandler) -> None:
        """Attach a handler.

        Raises:
            InputChannelError: If a handler is already attached
        """
        if self._handler is not None:
            raise InputChannelError(f"Input channel '{self.name}' is already attached")
        self._handler = handler
        logger.debug(f"Attached key handler to channel '{self.name}'")

    def detach(self) -> None:
        """Detach the handler; a no-op when nothing is attached."""
        if self._handler is None:
            return
        self._handler = None
        logger.debug(f"Detached key handler from channel '{self.name}'")

    def dispatch(self, key: str) -> bool:
        """Deliver a key to the attached handler.

        Returns:
            Whether the handler changed state; False when detached
        """
        if self._handler is None:
            logger.debug(f"Ignoring key {key!r}: channel '{self.name}' is detached")
            return False
        return self._handler(key)

    @contextmanager
    def listening(self, handler: KeyHandler) -> Iterator["KeyInputChannel"]:
        """Attach ``handler`` for the duration of the block."""
        self.attach(handler)
        try:
            yield self
        finally:
            self.detach()
