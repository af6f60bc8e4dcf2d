"""Human-facing order numbers.

An order number is ``ORD-`` followed by a ULID: 48 bits of millisecond
timestamp and 80 bits of randomness, rendered as 26 Crockford base32
characters. Within one millisecond the random part is incremented instead of
redrawn, so numbers issued by one process are strictly increasing and never
repeat.
"""

import secrets
import threading
import time

PREFIX = "ORD-"

_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_RANDOM_BITS = 80
_RANDOM_MAX = (1 << _RANDOM_BITS) - 1
_TIME_MAX = (1 << 48) - 1
_LENGTH = 26


def _encode(value: int) -> str:
    chars = []
    for _ in range(_LENGTH):
        value, index = divmod(value, 32)
        chars.append(_ALPHABET[index])
    return "".join(reversed(chars))


class OrderNumberGenerator:
    """Monotonic ULID source, safe to share between threads."""

    def __init__(self, clock=time.time, entropy=secrets.randbits):
        self._clock = clock
        self._entropy = entropy
        self._lock = threading.Lock()
        self._last_ms = -1
        self._last_random = 0

    def _next_ulid(self) -> int:
        with self._lock:
            now_ms = int(self._clock() * 1000)

            if now_ms > self._last_ms:
                self._last_ms = now_ms
                self._last_random = self._entropy(_RANDOM_BITS)
            elif self._last_random < _RANDOM_MAX:
                # Same millisecond, or the clock stepped back
                self._last_random += 1
            else:
                self._last_ms += 1
                self._last_random = self._entropy(_RANDOM_BITS)

            if self._last_ms > _TIME_MAX:
                raise OverflowError("ULID timestamp exceeds 48 bits")

            return (self._last_ms << _RANDOM_BITS) | self._last_random

    def next(self) -> str:
        return PREFIX + _encode(self._next_ulid())


_generator = OrderNumberGenerator()


def next_order_number() -> str:
    return _generator.next()
