"""Schnorr signature verification, plain and rerandomized."""

from typing import Union
from .aggregator import Aggregator
from .ciphersuite import deserialize_element
from .errors import SerializationError, SignatureInvalid
from .keys import PublicKeyPackage
from .point import Point, G
from .randomizer import RandomizedParams, Randomizer, randomize_key
from .signing import Signature

SignatureLike = Union[Signature, bytes, str]
VerifyingKeyLike = Union[PublicKeyPackage, Point, bytes, str]


def _as_bytes(value: Union[bytes, str], what: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return bytes.fromhex(value.strip())
        except ValueError as e:
            raise SerializationError(f"{what} is not valid hex.") from e
    raise SerializationError(f"Unsupported {what} type: {type(value).__name__}")


def _as_signature(signature: SignatureLike) -> Signature:
    if isinstance(signature, Signature):
        return signature
    return Signature.deserialize(_as_bytes(signature, "Signature"))


def _as_verifying_key(verifying_key: VerifyingKeyLike) -> Point:
    if isinstance(verifying_key, PublicKeyPackage):
        return verifying_key.verifying_key
    if isinstance(verifying_key, Point):
        return verifying_key
    try:
        return deserialize_element(_as_bytes(verifying_key, "Verifying key"))
    except ValueError as e:
        if isinstance(e, SerializationError):
            raise
        raise SerializationError(f"Malformed verifying key: {e}") from e


def _as_randomizer(randomizer: Union[Randomizer, RandomizedParams, bytes, str]) -> Randomizer:
    if isinstance(randomizer, Randomizer):
        return randomizer
    if isinstance(randomizer, RandomizedParams):
        return randomizer.randomizer
    return Randomizer.deserialize(_as_bytes(randomizer, "Randomizer"))


def _as_message(message: Union[bytes, str]) -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    if isinstance(message, (bytes, bytearray)):
        return bytes(message)
    raise SerializationError(f"Unsupported message type: {type(message).__name__}")


def _verify(message: bytes, signature: Signature, verifying_key: Point) -> None:
    if verifying_key.is_zero() or signature.R.is_zero():
        raise SignatureInvalid("Signature is invalid.")
    # c = H_2(R, Y, m)
    challenge = Aggregator.challenge_hash(signature.R, verifying_key, message)
    # g^z ≟ R + Y^c
    if signature.z * G != signature.R + (challenge * verifying_key):
        raise SignatureInvalid("Signature is invalid.")


def verify_signature(
    message: Union[bytes, str],
    signature: SignatureLike,
    verifying_key: VerifyingKeyLike,
) -> None:
    """
    Verify a signature under the group verifying key.

    Parameters:
    message (bytes | str): The signed message.
    signature (Signature | bytes | str): The signature or its 65-byte
    encoding (raw or hex).
    verifying_key (PublicKeyPackage | Point | bytes | str): The group key.

    Raises:
    SerializationError: If the signature or key encoding is malformed.
    SignatureInvalid: If the signature does not verify.
    """
    _verify(_as_message(message), _as_signature(signature), _as_verifying_key(verifying_key))


def verify_randomized_signature(
    randomizer: Union[Randomizer, RandomizedParams, bytes, str],
    message: Union[bytes, str],
    signature: SignatureLike,
    verifying_key: VerifyingKeyLike,
) -> None:
    """
    Verify a rerandomized signature under Y' = Y + a·G.

    Raises:
    SerializationError: If the randomizer, signature or key is malformed.
    SignatureInvalid: If the signature does not verify.
    """
    randomized_key = randomize_key(
        _as_verifying_key(verifying_key), _as_randomizer(randomizer)
    )
    _verify(_as_message(message), _as_signature(signature), randomized_key)
