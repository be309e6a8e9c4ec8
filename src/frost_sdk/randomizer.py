"""
Rerandomized FROST.

A randomizer is a nonzero scalar ``a`` agreed on by the coordinator and the
signers for one signing session. Signing against the randomized verifying key
Y' = Y + a·G yields a signature that verifies under Y' and cannot be linked to
Y by anyone who does not know ``a``.
"""

from __future__ import annotations
from typing import Optional, Union
from .ciphersuite import HRAND, deserialize_scalar, serialize_scalar
from .constants import Q, SCALAR_SIZE
from .errors import SerializationError
from .keys import PublicKeyPackage
from .point import Point, G
from .secret import Zeroizable
from .signing import SigningPackage


def _verifying_key(verifying_key: Union[Point, PublicKeyPackage]) -> Point:
    if isinstance(verifying_key, PublicKeyPackage):
        return verifying_key.verifying_key
    return verifying_key


class Randomizer:
    """A nonzero scalar used to rerandomize the verifying key."""

    __slots__ = ("_value",)

    def __init__(self, value: int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise SerializationError("Randomizer must be an integer scalar.")
        if not 0 < value < Q:
            raise SerializationError("Randomizer must be a nonzero scalar.")
        self._value = value

    @classmethod
    def derive(
        cls,
        verifying_key: Union[Point, PublicKeyPackage],
        signing_package: SigningPackage,
        entropy: bytes = b"",
    ) -> Randomizer:
        """
        Derive the randomizer for a signing session.

        Parameters:
        verifying_key (Point | PublicKeyPackage): The group verifying key.
        signing_package (SigningPackage): The session's signing package.
        entropy (bytes, optional): Fresh randomness from the coordinator. The
        result is deterministic for fixed inputs.

        Returns:
        Randomizer: a = H(len(entropy), entropy, Y, signing package).
        """
        verifying_key = _verifying_key(verifying_key)
        value = HRAND(
            len(entropy).to_bytes(8, "big")
            + bytes(entropy)
            + verifying_key.sec_serialize()
            + signing_package.encode()
        )
        if value == 0:
            raise SerializationError("Derived randomizer is zero.")
        return cls(value)

    @classmethod
    def deserialize(cls, data: bytes) -> Randomizer:
        if not isinstance(data, (bytes, bytearray)) or len(data) != SCALAR_SIZE:
            raise SerializationError(f"Randomizer must be exactly {SCALAR_SIZE} bytes.")
        try:
            value = deserialize_scalar(bytes(data))
        except ValueError as e:
            raise SerializationError(f"Malformed randomizer: {e}") from e
        return cls(value)

    @classmethod
    def from_hex(cls, hex_string: str) -> Randomizer:
        try:
            data = bytes.fromhex(hex_string.strip())
        except (AttributeError, ValueError) as e:
            raise SerializationError("Randomizer is not valid hex.") from e
        return cls.deserialize(data)

    @property
    def value(self) -> int:
        return self._value

    def serialize(self) -> bytes:
        return serialize_scalar(self._value)

    def hex(self) -> str:
        return self.serialize().hex()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Randomizer):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(("Randomizer", self._value))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.hex()})"


class RandomizedParams(Zeroizable):
    """The randomizer of a session and the verifying key it produces."""

    def __init__(self, randomizer: Randomizer, randomized_verifying_key: Point):
        self._randomizer: Optional[Randomizer] = randomizer
        self._randomized_verifying_key = randomized_verifying_key

    @classmethod
    def from_randomizer(
        cls, verifying_key: Union[Point, PublicKeyPackage], randomizer: Randomizer
    ) -> RandomizedParams:
        verifying_key = _verifying_key(verifying_key)
        # Y' = Y + a·G
        return cls(randomizer, verifying_key + randomizer.value * G)

    @property
    def randomizer(self) -> Randomizer:
        self._ensure_live()
        return self._randomizer

    @property
    def randomized_verifying_key(self) -> Point:
        self._ensure_live()
        return self._randomized_verifying_key

    def zeroize(self) -> None:
        self._randomizer = None
        super().zeroize()


def randomized_params_from_public_key_and_signing_package(
    public_key_package: Union[Point, PublicKeyPackage],
    signing_package: SigningPackage,
    entropy: bytes = b"",
) -> RandomizedParams:
    """Derive a fresh randomizer for the session and the randomized key."""
    randomizer = Randomizer.derive(public_key_package, signing_package, entropy)
    return RandomizedParams.from_randomizer(public_key_package, randomizer)


def randomizer_from_params(params: RandomizedParams) -> Randomizer:
    return params.randomizer


def resolve_randomizer(
    randomizer: Union[None, Randomizer, RandomizedParams],
) -> Optional[Randomizer]:
    """Accept either a Randomizer or the RandomizedParams carrying one."""
    if isinstance(randomizer, RandomizedParams):
        return randomizer.randomizer
    return randomizer


def randomize_key(verifying_key: Point, randomizer: Optional[Randomizer]) -> Point:
    if randomizer is None:
        return verifying_key
    return verifying_key + randomizer.value * G
