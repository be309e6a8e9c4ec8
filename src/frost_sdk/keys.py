"""
Key material shared by the DKG, the trusted dealer and the signing protocol,
together with the polynomial arithmetic behind Shamir secret sharing and
Feldman verifiable secret sharing (VSS).

A SecretShare is what a trusted dealer hands to a participant; once checked
against its VSS commitment it becomes a KeyPackage, the participant's
long-term signing material. The PublicKeyPackage holds the group verifying
key and every participant's verifying share and is safe to publish.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union
from .constants import Q
from .errors import (
    DuplicateIdentifier,
    IdentifierNotFound,
    InvalidConfiguration,
    ShareVerificationFailed,
)
from .identifier import Identifier
from .point import Point, G
from .secret import SecretScalar, Zeroizable

VerifiableSecretSharingCommitment = Tuple[Point, ...]


def evaluate_polynomial(coefficients: Sequence[int], x: Union[int, Identifier]) -> int:
    """
    Evaluate the polynomial at a given point x using Horner's method.

    Parameters:
    coefficients (Sequence[int]): The coefficients, constant term first.
    x (int | Identifier): The point at which the polynomial is evaluated.

    Returns:
    int: The value of the polynomial at x, reduced modulo Q.
    """
    if not coefficients:
        raise ValueError("Polynomial coefficients must be initialized.")
    x = int(x)

    y = 0
    for coefficient in reversed(coefficients):
        y = (y * x + coefficient) % Q
    return y


def evaluate_vss(
    commitment: VerifiableSecretSharingCommitment, identifier: Identifier
) -> Point:
    """
    Compute the public image g^f(i) of a share from the coefficient
    commitments, without knowing the polynomial.
    """
    if not commitment:
        raise ValueError("Coefficient commitments must not be empty.")

    x = int(identifier)
    # ∑ 𝜙_k * i^k, 0 ≤ k ≤ t - 1
    expected = Point()  # Point at infinity
    for k, coefficient_commitment in enumerate(commitment):
        expected += pow(x, k, Q) * coefficient_commitment

    return expected


def sum_commitments(
    commitments: Iterable[VerifiableSecretSharingCommitment],
) -> VerifiableSecretSharingCommitment:
    """Add coefficient commitments element-wise into the group commitment."""
    commitments = tuple(commitments)
    if not commitments:
        raise ValueError("At least one commitment is required.")
    if len({len(commitment) for commitment in commitments}) != 1:
        raise ValueError("All commitments must have the same length.")

    return tuple(sum(column, Point()) for column in zip(*commitments))


def lagrange_coefficient(
    identifiers: Sequence[Identifier], identifier: Identifier, x: int = 0
) -> int:
    """
    Calculate the Lagrange coefficient of ``identifier`` over ``identifiers``.

    Parameters:
    identifiers (Sequence[Identifier]): Identifiers of the signing set.
    identifier (Identifier): The identifier whose coefficient is computed.
    x (int, optional): The evaluation point, 0 for the constant term.

    Returns:
    int: λ_i(x) modulo Q.

    Raises:
    DuplicateIdentifier: If duplicate identifiers are found.
    IdentifierNotFound: If identifier is not in identifiers.
    """
    if len(identifiers) != len(set(identifiers)):
        raise DuplicateIdentifier("Participant identifiers must be unique.")
    if identifier not in identifiers:
        raise IdentifierNotFound(f"Identifier {identifier} is not in the signing set.")

    # λ_i(x) = ∏ (x - p_j)/(p_i - p_j), j ≠ i
    numerator = 1
    denominator = 1
    own = int(identifier)
    for other in identifiers:
        if other == identifier:
            continue
        numerator = (numerator * (x - int(other))) % Q
        denominator = (denominator * (own - int(other))) % Q
    return (numerator * pow(denominator, Q - 2, Q)) % Q


@dataclass(eq=True)
class SecretShare(Zeroizable):
    """A share produced by a trusted dealer, with the dealer's VSS commitment."""

    _secret_fields = ("signing_share",)

    identifier: Identifier
    signing_share: SecretScalar
    commitment: VerifiableSecretSharingCommitment

    def __post_init__(self):
        if isinstance(self.signing_share, int):
            self.signing_share = SecretScalar(self.signing_share)
        self.commitment = tuple(self.commitment)

    def verify(self) -> Tuple[Point, Point]:
        """
        Check the share against the dealer's commitment.

        Returns:
        Tuple[Point, Point]: The verifying share and the group verifying key.

        Raises:
        ShareVerificationFailed: If g^s_i does not match the commitment.
        """
        self._ensure_live()
        verifying_share = self.signing_share.value * G
        if verifying_share != evaluate_vss(self.commitment, self.identifier):
            raise ShareVerificationFailed(self.identifier)
        return verifying_share, self.commitment[0]


@dataclass(eq=True)
class KeyPackage(Zeroizable):
    """A participant's long-term signing material. Never transmitted."""

    _secret_fields = ("signing_share",)

    identifier: Identifier
    signing_share: SecretScalar
    verifying_share: Point
    verifying_key: Point
    min_signers: int

    def __post_init__(self):
        if isinstance(self.signing_share, int):
            self.signing_share = SecretScalar(self.signing_share)

    @classmethod
    def from_secret_share(cls, secret_share: SecretShare) -> "KeyPackage":
        """Verify a dealer-issued share and derive the key package from it."""
        verifying_share, verifying_key = secret_share.verify()
        return cls(
            identifier=secret_share.identifier,
            signing_share=SecretScalar(secret_share.signing_share.value),
            verifying_share=verifying_share,
            verifying_key=verifying_key,
            min_signers=len(secret_share.commitment),
        )


@dataclass(eq=True)
class PublicKeyPackage:
    """The group verifying key and every participant's verifying share."""

    verifying_shares: Dict[Identifier, Point]
    verifying_key: Point
    min_signers: Optional[int] = field(default=None)

    def __post_init__(self):
        self.verifying_shares = {
            identifier: self.verifying_shares[identifier]
            for identifier in sorted(self.verifying_shares)
        }

    @classmethod
    def from_commitment(
        cls,
        identifiers: Iterable[Identifier],
        commitment: VerifiableSecretSharingCommitment,
    ) -> "PublicKeyPackage":
        """
        Derive the public key package from the group VSS commitment: the
        verifying key is its constant term and each verifying share is the
        commitment evaluated at the participant's identifier.
        """
        if len(commitment) < 2:
            raise InvalidConfiguration("The group commitment must have min_signers entries.")
        return cls(
            verifying_shares={
                identifier: evaluate_vss(commitment, identifier)
                for identifier in identifiers
            },
            verifying_key=commitment[0],
            min_signers=len(commitment),
        )
