"""
Data types of the two-round signing protocol: per-signer nonces and their
commitments, the signing package assembled by the coordinator, signature
shares and the final aggregated signature.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple, Union
from .ciphersuite import (
    deserialize_element,
    deserialize_scalar,
    nonce_generate,
    serialize_scalar,
)
from .constants import ELEMENT_SIZE, SIGNATURE_SIZE
from .errors import DuplicateIdentifier, NonceReuse, SerializationError
from .identifier import Identifier
from .point import Point, G
from .secret import SecretScalar, Zeroizable


@dataclass(eq=True)
class SigningCommitments:
    """Public commitments (D_i, E_i) to a signer's nonces."""

    identifier: Identifier
    hiding: Point
    binding: Point

    def encode(self) -> bytes:
        return (
            self.identifier.serialize()
            + self.hiding.sec_serialize()
            + self.binding.sec_serialize()
        )


@dataclass(eq=True)
class SigningNonces(Zeroizable):
    """
    A signer's secret nonce pair (d_i, e_i). Single use: signing consumes it
    and any further use raises NonceReuse.
    """

    _secret_fields = ("hiding", "binding")

    hiding: SecretScalar
    binding: SecretScalar
    commitments: SigningCommitments

    @classmethod
    def new(cls, identifier: Identifier, signing_share: SecretScalar) -> SigningNonces:
        # (d_i, e_i) ⭠ $ ℤ*_q x ℤ*_q
        hiding = nonce_generate(signing_share.value)
        binding = nonce_generate(signing_share.value)
        # (D_i, E_i) = (g^d_i, g^e_i)
        commitments = SigningCommitments(identifier, hiding * G, binding * G)
        return cls(SecretScalar(hiding), SecretScalar(binding), commitments)

    @property
    def consumed(self) -> bool:
        return self.zeroized

    def take(self) -> Tuple[int, int]:
        """Return (d_i, e_i) and consume the nonces."""
        self._ensure_live(NonceReuse)
        values = (self.hiding.value, self.binding.value)
        self.zeroize()
        return values


def encode_group_commitment_list(
    signing_commitments: Dict[Identifier, SigningCommitments],
) -> bytes:
    """Encode (i, D_i, E_i) for every signer, sorted by identifier."""
    return b"".join(
        signing_commitments[identifier].encode()
        for identifier in sorted(signing_commitments)
    )


class SigningPackage:
    """The message and every participating signer's commitments."""

    def __init__(
        self,
        signing_commitments: Dict[Identifier, SigningCommitments],
        message: bytes,
    ):
        for identifier, commitments in signing_commitments.items():
            if commitments.identifier != identifier:
                raise SerializationError(
                    f"Commitments keyed by {identifier} belong to {commitments.identifier}."
                )
        self.signing_commitments = {
            identifier: signing_commitments[identifier]
            for identifier in sorted(signing_commitments)
        }
        self.message = bytes(message)

    @classmethod
    def new(
        cls, message: Union[bytes, str], commitments: Iterable[SigningCommitments]
    ) -> SigningPackage:
        """
        Assemble a signing package from the collected commitments.

        Raises:
        DuplicateIdentifier: If two commitments carry the same identifier.
        """
        if isinstance(message, str):
            message = message.encode("utf-8")
        signing_commitments: Dict[Identifier, SigningCommitments] = {}
        for commitment in commitments:
            if commitment.identifier in signing_commitments:
                raise DuplicateIdentifier(
                    f"Duplicated commitments for participant {commitment.identifier}."
                )
            signing_commitments[commitment.identifier] = commitment
        return cls(signing_commitments, message)

    @property
    def identifiers(self) -> Tuple[Identifier, ...]:
        return tuple(self.signing_commitments)

    def encode(self) -> bytes:
        """Canonical byte encoding, used as hash input for randomizers."""
        return (
            encode_group_commitment_list(self.signing_commitments)
            + len(self.message).to_bytes(8, "big")
            + self.message
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SigningPackage):
            return NotImplemented
        return (
            self.message == other.message
            and self.signing_commitments == other.signing_commitments
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(message={self.message!r}, "
            f"signers={[str(identifier) for identifier in self.identifiers]})"
        )


@dataclass(eq=True)
class SignatureShare:
    """A signer's partial signature z_i."""

    identifier: Identifier
    share: int

    def serialize(self) -> bytes:
        return serialize_scalar(self.share)

    @classmethod
    def deserialize(cls, identifier: Identifier, data: bytes) -> SignatureShare:
        try:
            return cls(identifier, deserialize_scalar(data))
        except ValueError as e:
            raise SerializationError(f"Malformed signature share: {e}") from e


@dataclass(eq=True)
class Signature:
    """An aggregated Schnorr signature σ = (R, z)."""

    R: Point
    z: int

    def serialize(self) -> bytes:
        return self.R.sec_serialize() + serialize_scalar(self.z)

    def hex(self) -> str:
        return self.serialize().hex()

    @classmethod
    def deserialize(cls, data: bytes) -> Signature:
        """
        Decode the 65-byte encoding R || z.

        Raises:
        SerializationError: If the encoding is malformed.
        """
        if not isinstance(data, (bytes, bytearray)) or len(data) != SIGNATURE_SIZE:
            raise SerializationError(
                f"Signature encoding must be exactly {SIGNATURE_SIZE} bytes."
            )
        try:
            R = deserialize_element(bytes(data[:ELEMENT_SIZE]))
            z = deserialize_scalar(bytes(data[ELEMENT_SIZE:]))
        except ValueError as e:
            raise SerializationError(f"Malformed signature: {e}") from e
        return cls(R, z)

    @classmethod
    def from_hex(cls, hex_string: str) -> Signature:
        try:
            data = bytes.fromhex(hex_string.strip())
        except (AttributeError, ValueError) as e:
            raise SerializationError("Signature is not valid hex.") from e
        return cls.deserialize(data)
