"""
This package implements FROST (Flexible Round-Optimized Schnorr Threshold)
signatures over secp256k1 with SHA-256: a quorum of min_signers out of
max_signers participants jointly produces a single Schnorr signature under a
group verifying key, without any party ever holding the full signing key.

Modules:
- point, ciphersuite, constants: curve arithmetic, encodings and the
  domain-separated hash functions.
- identifier: participant identifiers.
- dkg: the three-round distributed key generation and its state machine.
- trusted_dealer: key generation by a single trusted dealer.
- signing, participant, aggregator: the two-round signing protocol.
- randomizer: rerandomized signing under Y + a·G.
- verification: signature verification.
- serialization: JSON exchange encodings of every protocol artifact.
- config, errors, secret: configuration, error types and zeroizable secrets.
"""

from .constants import P, Q
from .point import Point, G
from .errors import (
    FrostError,
    CulpritError,
    InvalidConfiguration,
    InvalidIdentifier,
    DuplicateIdentifier,
    IncompletePackageSet,
    InvalidProofOfKnowledge,
    ShareVerificationFailed,
    IdentifierNotFound,
    NonceMismatch,
    NonceReuse,
    InvalidSignatureShare,
    InsufficientSigners,
    SignatureInvalid,
    SerializationError,
    ProtocolError,
)
from .identifier import Identifier
from .secret import SecretScalar
from .config import Configuration, validate_config
from .keys import KeyPackage, PublicKeyPackage, SecretShare
from .dkg import (
    DKGParticipant,
    DKGPhase,
    Round1Package,
    Round1SecretPackage,
    Round2Package,
    Round2SecretPackage,
    part1,
    part2,
    part3,
)
from .trusted_dealer import (
    TrustedKeyGeneration,
    trusted_dealer_keygen,
    trusted_dealer_key_packages,
    verify_and_get_key_package_from,
)
from .signing import (
    Signature,
    SignatureShare,
    SigningCommitments,
    SigningNonces,
    SigningPackage,
)
from .aggregator import Aggregator, aggregate
from .participant import commit, sign
from .randomizer import (
    RandomizedParams,
    Randomizer,
    randomized_params_from_public_key_and_signing_package,
    randomizer_from_params,
)
from .verification import verify_randomized_signature, verify_signature
from .serialization import bytes_to_hex, decode, encode, hex_to_bytes

__version__ = "0.1.0"
