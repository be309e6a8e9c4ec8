"""
Exchange encodings for protocol artifacts.

Every artifact that travels between participants (or is handed to the
caller for storage) converts to and from a JSON document. Documents are
objects carrying a ``header`` with the encoding version and ciphersuite,
followed by the artifact's fields; scalars and group elements are lowercase
hex of their canonical encodings and identifier-keyed maps are JSON objects
keyed by the identifier's hex, in identifier order. A bare Identifier or
Randomizer encodes as a JSON string.

``encode`` / ``decode`` give the same documents as opaque UTF-8 bytes.
Signing nonces and the DKG secret packages have no exchange encoding.
"""

import functools
import json
from typing import Any, Callable, Dict, Type, Union
from .ciphersuite import (
    deserialize_element,
    deserialize_scalar,
    serialize_element,
    serialize_scalar,
)
from .config import Configuration
from .constants import CIPHERSUITE_ID, ELEMENT_SIZE, SCALAR_SIZE, SERIALIZATION_VERSION
from .dkg import Round1Package, Round2Package
from .errors import FrostError, SerializationError
from .identifier import Identifier
from .keys import KeyPackage, PublicKeyPackage, SecretShare
from .point import Point
from .randomizer import Randomizer
from .signing import Signature, SignatureShare, SigningCommitments, SigningPackage

JSONInput = Union[str, bytes, bytearray, Dict[str, Any]]

HEADER = {"version": SERIALIZATION_VERSION, "ciphersuite": CIPHERSUITE_ID}


def bytes_to_hex(data: bytes) -> str:
    return bytes(data).hex()


def hex_to_bytes(hex_string: str) -> bytes:
    """
    Decode a hex string.

    Raises:
    SerializationError: If the string is not valid hex.
    """
    if not isinstance(hex_string, str):
        raise SerializationError("Expected a hex string.")
    try:
        return bytes.fromhex(hex_string)
    except ValueError as e:
        raise SerializationError(f"Invalid hex string: {e}") from e


def _scalar_to_hex(scalar: int) -> str:
    return serialize_scalar(scalar).hex()


def _scalar_from_hex(hex_string: str) -> int:
    return deserialize_scalar(hex_to_bytes(hex_string))


def _element_to_hex(element: Point) -> str:
    return serialize_element(element).hex()


def _element_from_hex(hex_string: str) -> Point:
    return deserialize_element(hex_to_bytes(hex_string))


def _identifier_from_hex(hex_string: str) -> Identifier:
    return Identifier.deserialize(hex_to_bytes(hex_string))


def _document(**fields) -> str:
    return json.dumps({"header": dict(HEADER), **fields})


def _load(data: JSONInput) -> Any:
    if isinstance(data, dict):
        return data
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("utf-8")
    return json.loads(data)


def _check_header(document: Any) -> Dict[str, Any]:
    if not isinstance(document, dict):
        raise SerializationError("Expected a JSON object.")
    header = document.get("header")
    if not isinstance(header, dict):
        raise SerializationError("Missing header.")
    if header.get("version") != SERIALIZATION_VERSION:
        raise SerializationError(f"Unsupported encoding version: {header.get('version')!r}")
    if header.get("ciphersuite") != CIPHERSUITE_ID:
        raise SerializationError(f"Unsupported ciphersuite: {header.get('ciphersuite')!r}")
    return document


def _decoder(with_header: bool = True) -> Callable:
    """Parse the document, check its header and map decoding failures."""

    def decorator(function: Callable) -> Callable:
        @functools.wraps(function)
        def wrapper(data: JSONInput):
            try:
                document = _load(data)
                if with_header:
                    document = _check_header(document)
                return function(document)
            except FrostError:
                raise
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise SerializationError(
                    f"Malformed {function.__name__[len('json_to_'):]}: {e}"
                ) from e

        return wrapper

    return decorator


# Configuration


def configuration_to_json(configuration: Configuration) -> str:
    fields: Dict[str, Any] = {
        "min_signers": configuration.min_signers,
        "max_signers": configuration.max_signers,
    }
    if configuration.secret:
        fields["secret"] = bytes_to_hex(configuration.secret)
    if configuration.identifiers is not None:
        fields["identifiers"] = [identifier.hex() for identifier in configuration.identifiers]
    return _document(**fields)


@_decoder()
def json_to_configuration(document) -> Configuration:
    identifiers = document.get("identifiers")
    if identifiers is not None:
        identifiers = [_identifier_from_hex(item) for item in identifiers]
    secret = document.get("secret")
    configuration = Configuration(
        min_signers=document["min_signers"],
        max_signers=document["max_signers"],
        secret=hex_to_bytes(secret) if secret else b"",
        identifiers=identifiers,
    )
    configuration.validate()
    return configuration


# Identifier and Randomizer


def identifier_to_json(identifier: Identifier) -> str:
    return json.dumps(identifier.hex())


@_decoder(with_header=False)
def json_to_identifier(document) -> Identifier:
    if not isinstance(document, str):
        raise SerializationError("Identifier must be a hex string.")
    return _identifier_from_hex(document)


def randomizer_to_json(randomizer: Randomizer) -> str:
    return json.dumps(randomizer.hex())


@_decoder(with_header=False)
def json_to_randomizer(document) -> Randomizer:
    if not isinstance(document, str):
        raise SerializationError("Randomizer must be a hex string.")
    return Randomizer.deserialize(hex_to_bytes(document))


# DKG


def round1_package_to_json(package: Round1Package) -> str:
    nonce_commitment, s = package.proof_of_knowledge
    return _document(
        commitment=[_element_to_hex(element) for element in package.commitment],
        proof_of_knowledge=_element_to_hex(nonce_commitment) + _scalar_to_hex(s),
    )


@_decoder()
def json_to_round1_package(document) -> Round1Package:
    proof = hex_to_bytes(document["proof_of_knowledge"])
    if len(proof) != ELEMENT_SIZE + SCALAR_SIZE:
        raise SerializationError("Proof of knowledge has the wrong length.")
    return Round1Package(
        commitment=tuple(_element_from_hex(item) for item in document["commitment"]),
        proof_of_knowledge=(
            deserialize_element(proof[:ELEMENT_SIZE]),
            deserialize_scalar(proof[ELEMENT_SIZE:]),
        ),
    )


def round2_package_to_json(package: Round2Package) -> str:
    package._ensure_live()
    return _document(signing_share=_scalar_to_hex(package.signing_share.value))


@_decoder()
def json_to_round2_package(document) -> Round2Package:
    return Round2Package(_scalar_from_hex(document["signing_share"]))


# Keys


def secret_share_to_json(secret_share: SecretShare) -> str:
    secret_share._ensure_live()
    return _document(
        identifier=secret_share.identifier.hex(),
        signing_share=_scalar_to_hex(secret_share.signing_share.value),
        commitment=[_element_to_hex(element) for element in secret_share.commitment],
    )


@_decoder()
def json_to_secret_share(document) -> SecretShare:
    return SecretShare(
        identifier=_identifier_from_hex(document["identifier"]),
        signing_share=_scalar_from_hex(document["signing_share"]),
        commitment=tuple(_element_from_hex(item) for item in document["commitment"]),
    )


def key_package_to_json(key_package: KeyPackage) -> str:
    key_package._ensure_live()
    return _document(
        identifier=key_package.identifier.hex(),
        signing_share=_scalar_to_hex(key_package.signing_share.value),
        verifying_share=_element_to_hex(key_package.verifying_share),
        verifying_key=_element_to_hex(key_package.verifying_key),
        min_signers=key_package.min_signers,
    )


@_decoder()
def json_to_key_package(document) -> KeyPackage:
    min_signers = document["min_signers"]
    if isinstance(min_signers, bool) or not isinstance(min_signers, int) or min_signers < 2:
        raise SerializationError("min_signers must be an integer of at least 2.")
    return KeyPackage(
        identifier=_identifier_from_hex(document["identifier"]),
        signing_share=_scalar_from_hex(document["signing_share"]),
        verifying_share=_element_from_hex(document["verifying_share"]),
        verifying_key=_element_from_hex(document["verifying_key"]),
        min_signers=min_signers,
    )


def public_key_package_to_json(public_key_package: PublicKeyPackage) -> str:
    fields: Dict[str, Any] = {
        "verifying_shares": {
            identifier.hex(): _element_to_hex(verifying_share)
            for identifier, verifying_share in public_key_package.verifying_shares.items()
        },
        "verifying_key": _element_to_hex(public_key_package.verifying_key),
    }
    if public_key_package.min_signers is not None:
        fields["min_signers"] = public_key_package.min_signers
    return _document(**fields)


@_decoder()
def json_to_public_key_package(document) -> PublicKeyPackage:
    min_signers = document.get("min_signers")
    if min_signers is not None and (
        isinstance(min_signers, bool) or not isinstance(min_signers, int)
    ):
        raise SerializationError("min_signers must be an integer.")
    return PublicKeyPackage(
        verifying_shares={
            _identifier_from_hex(key): _element_from_hex(value)
            for key, value in document["verifying_shares"].items()
        },
        verifying_key=_element_from_hex(document["verifying_key"]),
        min_signers=min_signers,
    )


# Signing


def signing_commitments_to_json(commitments: SigningCommitments) -> str:
    return _document(
        identifier=commitments.identifier.hex(),
        hiding=_element_to_hex(commitments.hiding),
        binding=_element_to_hex(commitments.binding),
    )


@_decoder()
def json_to_signing_commitments(document) -> SigningCommitments:
    return SigningCommitments(
        identifier=_identifier_from_hex(document["identifier"]),
        hiding=_element_from_hex(document["hiding"]),
        binding=_element_from_hex(document["binding"]),
    )


def signing_package_to_json(signing_package: SigningPackage) -> str:
    return _document(
        signing_commitments={
            identifier.hex(): {
                "hiding": _element_to_hex(commitments.hiding),
                "binding": _element_to_hex(commitments.binding),
            }
            for identifier, commitments in signing_package.signing_commitments.items()
        },
        message=bytes_to_hex(signing_package.message),
    )


@_decoder()
def json_to_signing_package(document) -> SigningPackage:
    signing_commitments = {}
    for key, value in document["signing_commitments"].items():
        identifier = _identifier_from_hex(key)
        signing_commitments[identifier] = SigningCommitments(
            identifier=identifier,
            hiding=_element_from_hex(value["hiding"]),
            binding=_element_from_hex(value["binding"]),
        )
    return SigningPackage(signing_commitments, hex_to_bytes(document["message"]))


def signature_share_to_json(signature_share: SignatureShare) -> str:
    return _document(
        identifier=signature_share.identifier.hex(),
        share=_scalar_to_hex(signature_share.share),
    )


@_decoder()
def json_to_signature_share(document) -> SignatureShare:
    return SignatureShare(
        identifier=_identifier_from_hex(document["identifier"]),
        share=_scalar_from_hex(document["share"]),
    )


def signature_to_json(signature: Signature) -> str:
    return _document(signature=signature.hex())


@_decoder()
def json_to_signature(document) -> Signature:
    return Signature.deserialize(hex_to_bytes(document["signature"]))


_CODECS: Dict[Type, tuple] = {
    Configuration: (configuration_to_json, json_to_configuration),
    Identifier: (identifier_to_json, json_to_identifier),
    Randomizer: (randomizer_to_json, json_to_randomizer),
    Round1Package: (round1_package_to_json, json_to_round1_package),
    Round2Package: (round2_package_to_json, json_to_round2_package),
    SecretShare: (secret_share_to_json, json_to_secret_share),
    KeyPackage: (key_package_to_json, json_to_key_package),
    PublicKeyPackage: (public_key_package_to_json, json_to_public_key_package),
    SigningCommitments: (signing_commitments_to_json, json_to_signing_commitments),
    SigningPackage: (signing_package_to_json, json_to_signing_package),
    SignatureShare: (signature_share_to_json, json_to_signature_share),
    Signature: (signature_to_json, json_to_signature),
}

_KINDS: Dict[str, Type] = {
    "configuration": Configuration,
    "identifier": Identifier,
    "randomizer": Randomizer,
    "round1_package": Round1Package,
    "round2_package": Round2Package,
    "secret_share": SecretShare,
    "key_package": KeyPackage,
    "public_key_package": PublicKeyPackage,
    "signing_commitments": SigningCommitments,
    "signing_package": SigningPackage,
    "signature_share": SignatureShare,
    "signature": Signature,
}


def to_json(obj: Any) -> str:
    codec = _CODECS.get(type(obj))
    if codec is None:
        raise SerializationError(f"{type(obj).__name__} has no exchange encoding.")
    return codec[0](obj)


def from_json(kind: Union[str, Type], data: JSONInput) -> Any:
    if isinstance(kind, str):
        if kind not in _KINDS:
            raise SerializationError(f"Unknown kind: {kind}")
        kind = _KINDS[kind]
    codec = _CODECS.get(kind)
    if codec is None:
        raise SerializationError(f"{getattr(kind, '__name__', kind)} has no exchange encoding.")
    return codec[1](data)


def encode(obj: Any) -> bytes:
    """Opaque byte encoding of a protocol artifact (UTF-8 JSON)."""
    return to_json(obj).encode("utf-8")


def decode(kind: Union[str, Type], data: bytes) -> Any:
    """
    Decode an artifact produced by ``encode``.

    Parameters:
    kind (str | type): The artifact type, or its snake_case name
    (e.g. ``"signing_package"``).
    data (bytes): The encoding.

    Raises:
    SerializationError: If the data is not a valid encoding of ``kind``.
    """
    if not isinstance(data, (bytes, bytearray)):
        raise SerializationError("Encoded data must be bytes.")
    try:
        text = bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise SerializationError("Encoded data is not UTF-8.") from e
    return from_json(kind, text)
