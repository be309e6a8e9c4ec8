"""
Wipeable storage for secret scalars.

Python integers are immutable and cannot be cleared, so secret scalars are kept
in a bytearray that is overwritten with zeros on disposal. Every type that holds
key material (DKG secret packages, signing nonces, secret shares, key packages,
randomized signing parameters) derives from Zeroizable and exposes an explicit
``zeroize()``; using a value after it was zeroized raises ProtocolError.

Zeroization is best effort: temporary integers created while a secret is used
are left to the garbage collector.
"""

import hmac
from typing import Iterable, Tuple, Type
from .ciphersuite import serialize_scalar
from .errors import FrostError, ProtocolError


class SecretScalar:
    """A scalar whose backing memory can be wiped."""

    __slots__ = ("_buffer",)

    def __init__(self, value: int):
        self._buffer = bytearray(serialize_scalar(value))

    @property
    def value(self) -> int:
        if self._buffer is None:
            raise ProtocolError("Secret scalar has been zeroized.")
        return int.from_bytes(self._buffer, "big")

    @property
    def is_zeroized(self) -> bool:
        return self._buffer is None

    def to_bytes(self) -> bytes:
        if self._buffer is None:
            raise ProtocolError("Secret scalar has been zeroized.")
        return bytes(self._buffer)

    def zeroize(self) -> None:
        if self._buffer is None:
            return
        for i in range(len(self._buffer)):
            self._buffer[i] = 0
        self._buffer = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretScalar):
            return NotImplemented
        if self._buffer is None or other._buffer is None:
            return False
        return hmac.compare_digest(bytes(self._buffer), bytes(other._buffer))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "zeroized" if self._buffer is None else "redacted"
        return f"{self.__class__.__name__}(<{state}>)"


def _secret_scalars(value) -> Iterable[SecretScalar]:
    if isinstance(value, SecretScalar):
        yield value
    elif isinstance(value, (tuple, list)):
        for item in value:
            yield from _secret_scalars(item)


class Zeroizable:
    """
    Mixin for secret-bearing values.

    Subclasses list the attributes holding SecretScalar values (or tuples of
    them) in ``_secret_fields``.
    """

    _secret_fields: Tuple[str, ...] = ()
    _zeroized: bool = False

    @property
    def zeroized(self) -> bool:
        return self._zeroized

    def zeroize(self) -> None:
        """Overwrite every secret scalar held by this value with zeros."""
        for name in self._secret_fields:
            for scalar in _secret_scalars(getattr(self, name, None)):
                scalar.zeroize()
        self._zeroized = True

    def _ensure_live(self, error: Type[FrostError] = ProtocolError) -> None:
        if self._zeroized:
            raise error(f"{self.__class__.__name__} has been zeroized.")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.zeroize()
