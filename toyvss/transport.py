"""
In-process message exchange between DKG participants.

Messages are keyed by (kind, sender, recipient); recipient BROADCAST_ID means
the message is for everyone. Each key is written at most once per session and
receivers suspend until their key shows up. Anything with the same
publish/receive coroutines can stand in for a real network.
"""

import asyncio
import enum
import logging
from collections import namedtuple

from .errors import DuplicateMessage, TransportUnavailable
from .feldman import VssCommitment
from .params import BROADCAST_ID

logger = logging.getLogger(__name__)


class MessageKind(enum.Enum):
    COMMITMENT = "vss_com"
    SHARE = "vss_share"
    AGGREGATED_SECRET = "vss_secret"


MessageKey = namedtuple("MessageKey", ["kind", "sender", "recipient"])


class MessageKey(MessageKey):
    def __str__(self):
        return f"{self.kind.value}/{self.sender}->{self.recipient}"


_PAYLOAD_TYPES = {
    MessageKind.COMMITMENT: VssCommitment,
    MessageKind.SHARE: int,
    MessageKind.AGGREGATED_SECRET: int,
}


class MessageStore:
    """
    Shared key-value pool. A store is bound to the event loop that first
    waits on it and rebinds when used from a new loop.
    """

    def __init__(self):
        self._messages = {}
        self._loop = None
        self._cond = None

    def _condition(self) -> asyncio.Condition:
        loop = asyncio.get_running_loop()
        if self._loop is not loop:
            self._loop = loop
            self._cond = asyncio.Condition()
        return self._cond

    async def publish(self, kind: MessageKind, sender: int, recipient: int, value):
        if not isinstance(value, _PAYLOAD_TYPES[kind]):
            raise TypeError(f"{kind.name} payload must be {_PAYLOAD_TYPES[kind].__name__}, "
                            f"got {type(value).__name__}")
        key = MessageKey(kind, sender, recipient)
        cond = self._condition()
        async with cond:
            if key in self._messages:
                raise DuplicateMessage(key)
            self._messages[key] = value
            cond.notify_all()
        logger.debug("published %s", key)

    async def broadcast(self, kind: MessageKind, sender: int, value):
        await self.publish(kind, sender, BROADCAST_ID, value)

    async def receive(self, kind: MessageKind, sender: int, recipient: int, timeout=None):
        key = MessageKey(kind, sender, recipient)
        cond = self._condition()
        async with cond:
            try:
                await asyncio.wait_for(cond.wait_for(lambda: key in self._messages), timeout)
            except asyncio.TimeoutError:
                logger.error("Timed out after %ss waiting for %s", timeout, key)
                raise TransportUnavailable(key, timeout)
            value = self._messages[key]
        logger.debug("received %s", key)
        return value

    def __contains__(self, key):
        return key in self._messages

    def __len__(self):
        return len(self._messages)
