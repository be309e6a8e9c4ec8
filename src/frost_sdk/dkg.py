"""
Distributed key generation for FROST.

Each participant runs three rounds:

1. ``part1`` samples a secret polynomial of degree min_signers - 1, commits
   to its coefficients and proves knowledge of the constant term. The public
   Round1Package is broadcast to every other participant.
2. ``part2`` checks every received proof of knowledge and evaluates the secret
   polynomial at each other participant's identifier, producing one
   Round2Package per recipient to be delivered privately.
3. ``part3`` checks every received share against its sender's commitment,
   sums them into the final signing share and derives the group verifying key
   and every verifying share.

The round functions are pure: the caller keeps the secret packages between
rounds. DKGParticipant wraps them in a state machine that keeps those secrets
and rejects calls made out of order.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from .ciphersuite import HDKG, random_scalar
from .config import validate_signers
from .constants import Q
from .errors import (
    IncompletePackageSet,
    InvalidProofOfKnowledge,
    ProtocolError,
    ShareVerificationFailed,
)
from .identifier import Identifier
from .keys import (
    KeyPackage,
    PublicKeyPackage,
    VerifiableSecretSharingCommitment,
    evaluate_polynomial,
    evaluate_vss,
    sum_commitments,
)
from .point import Point, G
from .secret import SecretScalar, Zeroizable

logger = logging.getLogger(__name__)

ProofOfKnowledge = Tuple[Point, int]


@dataclass(eq=True)
class Round1SecretPackage(Zeroizable):
    """The secret polynomial of a participant. Never leaves its owner."""

    _secret_fields = ("coefficients",)

    identifier: Identifier
    coefficients: Tuple[SecretScalar, ...]
    commitment: VerifiableSecretSharingCommitment
    min_signers: int
    max_signers: int


@dataclass(eq=True)
class Round1Package:
    """Coefficient commitments and proof of knowledge, broadcast to all."""

    commitment: VerifiableSecretSharingCommitment
    proof_of_knowledge: ProofOfKnowledge

    def __post_init__(self):
        self.commitment = tuple(self.commitment)
        self.proof_of_knowledge = tuple(self.proof_of_knowledge)


@dataclass(eq=True)
class Round2SecretPackage(Zeroizable):
    """State kept by a participant between rounds 2 and 3."""

    _secret_fields = ("secret_share",)

    identifier: Identifier
    commitment: VerifiableSecretSharingCommitment
    secret_share: SecretScalar
    min_signers: int
    max_signers: int


@dataclass(eq=True)
class Round2Package(Zeroizable):
    """A secret share addressed to exactly one recipient."""

    _secret_fields = ("signing_share",)

    signing_share: SecretScalar

    def __post_init__(self):
        if isinstance(self.signing_share, int):
            self.signing_share = SecretScalar(self.signing_share)


def _as_identifier(identifier: Union[int, Identifier]) -> Identifier:
    if isinstance(identifier, Identifier):
        return identifier
    return Identifier(identifier)


def _challenge(identifier: Identifier, verifying_key: Point, nonce_commitment: Point) -> int:
    # c_i = H(i, g^a_i_0, R_i)
    return HDKG(
        identifier.serialize()
        + verifying_key.sec_serialize()
        + nonce_commitment.sec_serialize()
    )


def compute_proof_of_knowledge(
    identifier: Identifier,
    coefficients: Tuple[SecretScalar, ...],
    commitment: VerifiableSecretSharingCommitment,
) -> ProofOfKnowledge:
    """
    Compute a Schnorr proof of knowledge of the first coefficient, binding it
    to the participant's identifier.
    """
    # k ⭠ ℤ_q
    nonce = random_scalar()
    # R_i = g^k
    nonce_commitment = nonce * G
    c = _challenge(identifier, commitment[0], nonce_commitment)
    # μ_i = k + a_i_0 * c_i
    s = (nonce + coefficients[0].value * c) % Q
    # σ_i = (R_i, μ_i)
    return (nonce_commitment, s)


def verify_proof_of_knowledge(
    identifier: Identifier,
    commitment: VerifiableSecretSharingCommitment,
    proof: ProofOfKnowledge,
) -> None:
    """
    Verify the proof of knowledge sent by ``identifier``.

    Raises:
    InvalidProofOfKnowledge: If the proof is malformed or does not verify.
    """
    if len(proof) != 2:
        raise InvalidProofOfKnowledge(identifier)

    # R_l, μ_l
    nonce_commitment, s = proof
    if not isinstance(nonce_commitment, Point) or not isinstance(s, int):
        raise InvalidProofOfKnowledge(identifier)
    if nonce_commitment.is_zero() or commitment[0].is_zero():
        raise InvalidProofOfKnowledge(identifier)

    c = _challenge(identifier, commitment[0], nonce_commitment)
    # R_l ≟ g^μ_l * 𝜙_l_0^-c_l
    expected_nonce_commitment = (s * G) + ((Q - c) * commitment[0])
    if nonce_commitment != expected_nonce_commitment:
        raise InvalidProofOfKnowledge(identifier)


def part1(
    identifier: Union[int, Identifier], max_signers: int, min_signers: int
) -> Tuple[Round1SecretPackage, Round1Package]:
    """
    First round of the DKG.

    Parameters:
    identifier (Identifier): This participant's identifier.
    max_signers (int): The total number of participants.
    min_signers (int): The signing threshold.

    Returns:
    Tuple[Round1SecretPackage, Round1Package]: The secret to keep for round 2
    and the package to broadcast.

    Raises:
    InvalidConfiguration: If the signer counts are invalid.
    """
    identifier = _as_identifier(identifier)
    validate_signers(min_signers, max_signers)

    # (a_i_0, . . ., a_i_(t - 1)) ⭠ $ ℤ_q
    coefficients = tuple(SecretScalar(random_scalar()) for _ in range(min_signers))
    # C_i = ⟨𝜙_i_0, ..., 𝜙_i_(t - 1)⟩
    commitment = tuple(coefficient.value * G for coefficient in coefficients)
    proof_of_knowledge = compute_proof_of_knowledge(identifier, coefficients, commitment)

    secret_package = Round1SecretPackage(
        identifier=identifier,
        coefficients=coefficients,
        commitment=commitment,
        min_signers=min_signers,
        max_signers=max_signers,
    )
    logger.debug(f"DKG round 1 complete for participant {identifier}")
    return secret_package, Round1Package(commitment, proof_of_knowledge)


def _check_package_set(
    own: Identifier, packages: Mapping[Identifier, Any], max_signers: int, kind: str
) -> None:
    if len(packages) != max_signers - 1:
        raise IncompletePackageSet(
            f"Expected exactly {max_signers - 1} {kind} packages, received {len(packages)}."
        )
    if own in packages:
        raise IncompletePackageSet(
            f"The {kind} packages must not include the participant's own package."
        )


def part2(
    secret_package: Round1SecretPackage,
    round1_packages: Mapping[Identifier, Round1Package],
) -> Tuple[Round2SecretPackage, Dict[Identifier, Round2Package]]:
    """
    Second round of the DKG.

    Parameters:
    secret_package (Round1SecretPackage): The secret from round 1. It is
    zeroized once this round succeeds.
    round1_packages (Mapping[Identifier, Round1Package]): The round 1
    packages of every other participant, keyed by sender.

    Returns:
    Tuple[Round2SecretPackage, Dict[Identifier, Round2Package]]: The secret
    to keep for round 3 and one package per recipient.

    Raises:
    IncompletePackageSet: If the package set has the wrong size or shape.
    InvalidProofOfKnowledge: If a sender's proof of knowledge is invalid.
    """
    secret_package._ensure_live()
    own = secret_package.identifier
    _check_package_set(own, round1_packages, secret_package.max_signers, "round 1")

    for sender in sorted(round1_packages):
        package = round1_packages[sender]
        if len(package.commitment) != secret_package.min_signers:
            raise IncompletePackageSet(
                f"Commitment from participant {sender} must have "
                f"{secret_package.min_signers} entries."
            )
        try:
            verify_proof_of_knowledge(sender, package.commitment, package.proof_of_knowledge)
        except InvalidProofOfKnowledge:
            logger.warning(f"Participant {sender} sent an invalid proof of knowledge")
            raise

    coefficients = tuple(coefficient.value for coefficient in secret_package.coefficients)
    # (l, f_i(l))
    round2_packages = {
        recipient: Round2Package(evaluate_polynomial(coefficients, recipient))
        for recipient in sorted(round1_packages)
    }
    round2_secret = Round2SecretPackage(
        identifier=own,
        commitment=secret_package.commitment,
        secret_share=SecretScalar(evaluate_polynomial(coefficients, own)),
        min_signers=secret_package.min_signers,
        max_signers=secret_package.max_signers,
    )

    secret_package.zeroize()
    logger.debug(f"DKG round 2 complete for participant {own}")
    return round2_secret, round2_packages


def part3(
    secret_package: Round2SecretPackage,
    round1_packages: Mapping[Identifier, Round1Package],
    round2_packages: Mapping[Identifier, Round2Package],
) -> Tuple[KeyPackage, PublicKeyPackage]:
    """
    Third and final round of the DKG.

    Parameters:
    secret_package (Round2SecretPackage): The secret from round 2. It is
    zeroized once this round succeeds.
    round1_packages (Mapping[Identifier, Round1Package]): The round 1
    packages received in round 2, keyed by sender.
    round2_packages (Mapping[Identifier, Round2Package]): The round 2
    packages addressed to this participant, keyed by sender. They are
    zeroized once this round succeeds.

    Returns:
    Tuple[KeyPackage, PublicKeyPackage]: This participant's key package and
    the group's public key package.

    Raises:
    IncompletePackageSet: If either package set has the wrong size or the
    senders of the two sets differ.
    ShareVerificationFailed: If a received share does not match its sender's
    commitment.
    """
    secret_package._ensure_live()
    own = secret_package.identifier
    max_signers = secret_package.max_signers
    _check_package_set(own, round1_packages, max_signers, "round 1")
    _check_package_set(own, round2_packages, max_signers, "round 2")
    if set(round1_packages) != set(round2_packages):
        raise IncompletePackageSet(
            "The senders of the round 1 and round 2 packages do not match."
        )

    # s_i = ∑ f_l(i), 1 ≤ l ≤ n
    signing_share = secret_package.secret_share.value
    for sender in sorted(round2_packages):
        commitment = round1_packages[sender].commitment
        if len(commitment) != secret_package.min_signers:
            raise IncompletePackageSet(
                f"Commitment from participant {sender} must have "
                f"{secret_package.min_signers} entries."
            )
        share = round2_packages[sender].signing_share.value
        # g^f_l(i) ≟ ∏ 𝜙_l_k^i^k
        if share * G != evaluate_vss(commitment, own):
            logger.warning(f"Participant {sender} sent a share that does not match its commitment")
            raise ShareVerificationFailed(sender)
        signing_share = (signing_share + share) % Q

    group_commitment = sum_commitments(
        (secret_package.commitment,)
        + tuple(round1_packages[sender].commitment for sender in sorted(round1_packages))
    )
    identifiers = sorted(set(round1_packages) | {own})
    public_key_package = PublicKeyPackage.from_commitment(identifiers, group_commitment)

    key_package = KeyPackage(
        identifier=own,
        signing_share=SecretScalar(signing_share),
        verifying_share=signing_share * G,
        verifying_key=public_key_package.verifying_key,
        min_signers=secret_package.min_signers,
    )

    secret_package.zeroize()
    for package in round2_packages.values():
        package.zeroize()
    logger.info(f"DKG finalized for participant {own}")
    return key_package, public_key_package


class DKGPhase(Enum):
    START = "start"
    ROUND1_DONE = "round1_done"
    ROUND2_DONE = "round2_done"
    FINALIZED = "finalized"
    ABANDONED = "abandoned"


class DKGParticipant:
    """
    A participant's DKG session as a state machine.

    The phase tag and the payload it carries move strictly forward:
    START → ROUND1_DONE (Round1SecretPackage) → ROUND2_DONE
    (Round2SecretPackage and the received round 1 packages) → FINALIZED
    (KeyPackage and PublicKeyPackage). A failed round leaves the phase
    unchanged so the caller can retry with corrected inputs.
    """

    def __init__(
        self, identifier: Union[int, Identifier], max_signers: int, min_signers: int
    ):
        validate_signers(min_signers, max_signers)
        self.identifier = _as_identifier(identifier)
        self.max_signers = max_signers
        self.min_signers = min_signers
        self._phase = DKGPhase.START
        self._payload: Any = None

    @property
    def phase(self) -> DKGPhase:
        return self._phase

    def _require(self, phase: DKGPhase, action: str) -> None:
        if self._phase is not phase:
            raise ProtocolError(
                f"Cannot {action} in phase {self._phase.value}; expected {phase.value}."
            )

    def round1(self) -> Round1Package:
        """Run round 1 and return the package to broadcast."""
        self._require(DKGPhase.START, "run round 1")
        secret_package, package = part1(self.identifier, self.max_signers, self.min_signers)
        self._phase, self._payload = DKGPhase.ROUND1_DONE, secret_package
        return package

    def round2(
        self, round1_packages: Mapping[Identifier, Round1Package]
    ) -> Dict[Identifier, Round2Package]:
        """Run round 2 and return the packages to deliver to each recipient."""
        self._require(DKGPhase.ROUND1_DONE, "run round 2")
        round1_packages = {
            sender: package
            for sender, package in round1_packages.items()
            if sender != self.identifier
        }
        secret_package, packages = part2(self._payload, round1_packages)
        self._phase, self._payload = DKGPhase.ROUND2_DONE, (secret_package, round1_packages)
        return packages

    def finalize(
        self,
        round2_packages: Mapping[Identifier, Round2Package],
        round1_packages: Optional[Mapping[Identifier, Round1Package]] = None,
    ) -> Tuple[KeyPackage, PublicKeyPackage]:
        """
        Run round 3. The round 1 packages seen in round 2 are reused unless
        ``round1_packages`` is given.
        """
        self._require(DKGPhase.ROUND2_DONE, "finalize")
        secret_package, seen_round1_packages = self._payload
        if round1_packages is None:
            round1_packages = seen_round1_packages
        result = part3(secret_package, round1_packages, round2_packages)
        self._phase, self._payload = DKGPhase.FINALIZED, result
        return result

    @property
    def key_package(self) -> KeyPackage:
        self._require(DKGPhase.FINALIZED, "read the key package")
        return self._payload[0]

    @property
    def public_key_package(self) -> PublicKeyPackage:
        self._require(DKGPhase.FINALIZED, "read the public key package")
        return self._payload[1]

    def abandon(self) -> None:
        """Zeroize any secret held by the session and end it."""
        if self._phase is DKGPhase.ROUND1_DONE:
            self._payload.zeroize()
        elif self._phase is DKGPhase.ROUND2_DONE:
            self._payload[0].zeroize()
        elif self._phase is DKGPhase.FINALIZED:
            self._payload[0].zeroize()
        self._phase, self._payload = DKGPhase.ABANDONED, None
