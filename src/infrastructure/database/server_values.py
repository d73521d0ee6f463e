"""Store-side key generation and server value resolution."""

import secrets
import time
from collections.abc import Callable

from domain.entities.server_value import ServerTimestamp

# Lexicographic order of these characters matches their numeric order
PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"


def now_millis() -> int:
    return int(time.time() * 1000)


class PushKeyGenerator:
    """Generates 20-character, time-ordered collection keys.

    The first 8 characters encode the millisecond timestamp, the remaining
    12 are random. Keys generated within the same millisecond increment the
    random part so they still sort in creation order.
    """

    def __init__(self, now: Callable[[], int] = now_millis) -> None:
        self._now = now
        self._last_millis = -1
        self._last_random = [0] * 12

    def __call__(self) -> str:
        millis = self._now()
        if millis == self._last_millis:
            i = 11
            while i >= 0 and self._last_random[i] == 63:
                self._last_random[i] = 0
                i -= 1
            if i < 0:
                raise RuntimeError("push key space exhausted for this millisecond")
            self._last_random[i] += 1
        else:
            self._last_random = [secrets.randbelow(64) for _ in range(12)]
        self._last_millis = millis

        timestamp_chars = []
        for _ in range(8):
            timestamp_chars.append(PUSH_CHARS[millis % 64])
            millis //= 64

        return "".join(reversed(timestamp_chars)) + "".join(
            PUSH_CHARS[n] for n in self._last_random
        )


generate_push_key = PushKeyGenerator()


def resolve_timestamp(value: int | ServerTimestamp | None, now: Callable[[], int] = now_millis) -> int | None:
    """Replace ``ServerValue.TIMESTAMP`` with the store's current time."""
    if isinstance(value, ServerTimestamp):
        return now()
    return value
