"""
Session parameters agreed by every participant before the DKG starts.
"""

import os
from collections import namedtuple

from .errors import InvalidSessionParams

# recipient id used for messages addressed to everyone
BROADCAST_ID = 0

# seconds to wait for a message, None waits forever
DEFAULT_RECV_TIMEOUT = None
RECV_TIMEOUT_ENV = "TOYVSS_RECV_TIMEOUT"


def default_recv_timeout():
    value = os.environ.get(RECV_TIMEOUT_ENV, "").strip()
    if not value:
        return DEFAULT_RECV_TIMEOUT
    try:
        timeout = float(value)
    except ValueError:
        raise InvalidSessionParams(f"{RECV_TIMEOUT_ENV} must be a number of seconds, got {value!r}")
    if timeout <= 0:
        raise InvalidSessionParams(f"{RECV_TIMEOUT_ENV} must be positive, got {value!r}")
    return timeout


_SessionParams = namedtuple("SessionParams", ["t", "members", "recv_timeout"])


class SessionParams(_SessionParams):
    """
    t: minimum number of participants needed to reconstruct.
    members: unique positive participant ids.
    recv_timeout: seconds to wait for any single message.
    """

    def __new__(cls, t, members, recv_timeout=None):
        members = tuple(members)
        if recv_timeout is None:
            recv_timeout = default_recv_timeout()
        if len(set(members)) != len(members):
            raise InvalidSessionParams(f"The members are not unique {list(members)}")
        if any(not isinstance(m, int) or m <= BROADCAST_ID for m in members):
            raise InvalidSessionParams(f"Member ids must be positive integers {list(members)}")
        if not 1 <= t <= len(members):
            raise InvalidSessionParams(f"Threshold {t} is not in [1, {len(members)}]")
        return super().__new__(cls, t, members, recv_timeout)

    @classmethod
    def from_t_n(cls, t, n, recv_timeout=None):
        return cls(t, range(1, n + 1), recv_timeout)

    @property
    def n(self):
        return len(self.members)
