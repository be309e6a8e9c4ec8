"""
Participant identifiers.

An Identifier is a nonzero scalar modulo the group order. Identifiers are
totally ordered by their scalar value; every per-participant map is sorted by
identifier before it is hashed or encoded, which keeps transcripts
independent of insertion order.
"""

from __future__ import annotations
from functools import total_ordering
from typing import Union
from .ciphersuite import HID, serialize_scalar
from .constants import Q, SCALAR_SIZE
from .errors import InvalidIdentifier, SerializationError


@total_ordering
class Identifier:
    """Class representing a FROST participant identifier."""

    __slots__ = ("_value",)

    def __init__(self, value: int):
        """
        Construct an identifier from a positive integer.

        Raises:
        InvalidIdentifier: If the value is not an integer in [1, Q).
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidIdentifier("Identifier must be an integer.")
        if not 0 < value < Q:
            raise InvalidIdentifier(f"Identifier {value} is out of range [1, Q).")
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name, value):
        raise AttributeError("Identifier is immutable.")

    @classmethod
    def derive(cls, text: Union[str, bytes]) -> Identifier:
        """
        Derive an identifier from an arbitrary string by hashing it to a
        scalar, so participants can be named (e.g. by email address).
        """
        data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
        value = HID(data)
        if value == 0:
            raise InvalidIdentifier("Derived identifier is zero.")
        return cls(value)

    @classmethod
    def deserialize(cls, data: bytes) -> Identifier:
        """
        Decode the 32-byte big-endian scalar encoding of an identifier.

        Raises:
        SerializationError: If the input does not have the right length.
        InvalidIdentifier: If the scalar is zero or not reduced modulo Q.
        """
        if not isinstance(data, (bytes, bytearray)) or len(data) != SCALAR_SIZE:
            raise SerializationError(
                f"Identifier encoding must be exactly {SCALAR_SIZE} bytes."
            )
        return cls(int.from_bytes(data, "big"))

    @classmethod
    def from_hex(cls, hex_string: str) -> Identifier:
        try:
            data = bytes.fromhex(hex_string.strip())
        except (AttributeError, ValueError) as e:
            raise SerializationError("Identifier is not valid hex.") from e
        return cls.deserialize(data)

    @property
    def value(self) -> int:
        return self._value

    def serialize(self) -> bytes:
        return serialize_scalar(self._value)

    def hex(self) -> str:
        return self.serialize().hex()

    def __int__(self) -> int:
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other: Identifier) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        return self._value < other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __str__(self) -> str:
        if self._value < 2**16:
            return str(self._value)
        return self.hex()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self})"
