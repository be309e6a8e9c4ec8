"""
Trusted-dealer key generation.

A single dealer samples the whole secret polynomial (or splits an existing
signing key), evaluates it at every participant's identifier and hands each
participant a SecretShare carrying the dealer's VSS commitment. The output is
equivalent to a successful DKG run, but the dealer transiently knows the full
signing key and must be trusted to forget it.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union
from .ciphersuite import random_scalar
from .config import Configuration, validate_signers
from .errors import DuplicateIdentifier, InvalidConfiguration
from .identifier import Identifier
from .keys import KeyPackage, PublicKeyPackage, SecretShare, evaluate_polynomial
from .point import G
from .secret import SecretScalar, Zeroizable

logger = logging.getLogger(__name__)


@dataclass
class TrustedKeyGeneration(Zeroizable):
    """The dealer's output: one secret share per participant and the public key package."""

    secret_shares: Dict[Identifier, SecretShare]
    public_key_package: PublicKeyPackage

    def zeroize(self) -> None:
        for secret_share in self.secret_shares.values():
            secret_share.zeroize()
        super().zeroize()


def _resolve_identifiers(
    configuration: Configuration,
    identifiers: Optional[Iterable[Union[int, Identifier]]],
) -> Tuple[Identifier, ...]:
    if identifiers is None:
        identifiers = configuration.identifiers
    if identifiers is None:
        return tuple(Identifier(i) for i in range(1, configuration.max_signers + 1))

    resolved = tuple(
        identifier if isinstance(identifier, Identifier) else Identifier(identifier)
        for identifier in identifiers
    )
    if len(set(resolved)) != len(resolved):
        raise DuplicateIdentifier("Duplicated identifier.")
    if len(resolved) != configuration.max_signers:
        raise InvalidConfiguration(
            f"Expected {configuration.max_signers} identifiers, got {len(resolved)}"
        )
    return resolved


def trusted_dealer_keygen(
    configuration: Configuration,
    identifiers: Optional[Sequence[Union[int, Identifier]]] = None,
) -> TrustedKeyGeneration:
    """
    Generate key shares for every participant in one call.

    Parameters:
    configuration (Configuration): The quorum, and optionally a secret key to
    split and the participant identifiers.
    identifiers (Sequence[Identifier], optional): Custom identifiers; defaults
    to the configuration's identifiers, then to 1..max_signers.

    Returns:
    TrustedKeyGeneration: The secret shares keyed by identifier and the
    public key package.

    Raises:
    InvalidConfiguration: If the signer counts or identifier count are invalid.
    DuplicateIdentifier: If custom identifiers collide.
    SerializationError: If the configured secret is not a valid signing key.
    """
    validate_signers(configuration.min_signers, configuration.max_signers)
    identifiers = _resolve_identifiers(configuration, identifiers)

    secret = configuration.secret_scalar()
    if secret is None:
        secret = random_scalar()

    # f(x) = a_0 + a_1 x + ... + a_(t-1) x^(t-1), a_0 = secret
    coefficients = (SecretScalar(secret),) + tuple(
        SecretScalar(random_scalar()) for _ in range(configuration.min_signers - 1)
    )
    values = tuple(coefficient.value for coefficient in coefficients)
    commitment = tuple(value * G for value in values)

    secret_shares = {
        identifier: SecretShare(
            identifier=identifier,
            signing_share=evaluate_polynomial(values, identifier),
            commitment=commitment,
        )
        for identifier in sorted(identifiers)
    }
    for coefficient in coefficients:
        coefficient.zeroize()

    for secret_share in secret_shares.values():
        secret_share.verify()

    public_key_package = PublicKeyPackage.from_commitment(secret_shares, commitment)
    logger.info(
        f"Dealt {configuration.min_signers}-of-{configuration.max_signers} key shares"
    )
    return TrustedKeyGeneration(secret_shares, public_key_package)


def verify_and_get_key_package_from(secret_share: SecretShare) -> KeyPackage:
    """
    Check a dealer-issued secret share against its commitment and derive the
    participant's key package.

    Raises:
    ShareVerificationFailed: If the share does not match the commitment.
    """
    return KeyPackage.from_secret_share(secret_share)


def trusted_dealer_key_packages(
    configuration: Configuration,
    identifiers: Optional[Sequence[Union[int, Identifier]]] = None,
) -> Tuple[Dict[Identifier, KeyPackage], PublicKeyPackage]:
    """Run the dealer and verify every share into a key package."""
    generation = trusted_dealer_keygen(configuration, identifiers)
    key_packages = {
        identifier: verify_and_get_key_package_from(secret_share)
        for identifier, secret_share in generation.secret_shares.items()
    }
    generation.zeroize()
    return key_packages, generation.public_key_package
