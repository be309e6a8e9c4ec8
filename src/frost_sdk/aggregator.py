"""
This module defines the Aggregator class used by the coordinator of a FROST
signing session. The Aggregator derives the per-signer binding factors, the
group commitment and the challenge from a signing package, checks every
signature share against the signer's verifying share and combines the shares
into the final Schnorr signature.

The binding-factor, group-commitment and challenge computations are
classmethods so that signers reuse them when producing their shares.
"""

import logging
from typing import Dict, Iterable, Mapping, Union
from .ciphersuite import H1, H2, H4, H5
from .constants import Q
from .errors import (
    DuplicateIdentifier,
    IdentifierNotFound,
    IncompletePackageSet,
    InsufficientSigners,
    InvalidSignatureShare,
)
from .identifier import Identifier
from .keys import PublicKeyPackage, lagrange_coefficient
from .point import Point, G
from .randomizer import RandomizedParams, Randomizer, randomize_key, resolve_randomizer
from .signing import (
    Signature,
    SignatureShare,
    SigningPackage,
    encode_group_commitment_list,
)

logger = logging.getLogger(__name__)

# Without a recorded threshold no signature can come from fewer than two shares.
MIN_SIGNERS_FLOOR = 2


class Aggregator:
    """Class representing the signature aggregator."""

    def __init__(
        self,
        signing_package: SigningPackage,
        public_key_package: PublicKeyPackage,
        randomizer: Union[None, Randomizer, RandomizedParams] = None,
    ):
        """
        Initialize the Aggregator for one signing session.

        Parameters:
        signing_package (SigningPackage): The message and the signers'
        commitments.
        public_key_package (PublicKeyPackage): The group verifying key and
        every participant's verifying share.
        randomizer (Randomizer, optional): The session randomizer when the
        signature is rerandomized.
        """
        self.signing_package = signing_package
        self.public_key_package = public_key_package
        # a
        self.randomizer = resolve_randomizer(randomizer)
        # Y (or Y' = Y + a·G)
        self.verifying_key = randomize_key(
            public_key_package.verifying_key, self.randomizer
        )
        # ρ_i, i ∈ S
        self.binding_factors = self.binding_factors_for(
            self.verifying_key, signing_package
        )
        # R
        self.group_commitment = self.group_commitment_for(
            signing_package, self.binding_factors
        )
        # c = H_2(R, Y, m)
        self.challenge = self.challenge_hash(
            self.group_commitment, self.verifying_key, signing_package.message
        )

    @classmethod
    def binding_factors_for(
        cls, verifying_key: Point, signing_package: SigningPackage
    ) -> Dict[Identifier, int]:
        """
        Compute the binding factor of every signer in the package.

        Parameters:
        verifying_key (Point): The (possibly randomized) group verifying key.
        signing_package (SigningPackage): The message and commitments.

        Returns:
        Dict[Identifier, int]: ρ_i keyed by signer identifier.
        """
        # Y || H_4(m) || H_5(B)
        prefix = (
            verifying_key.sec_serialize()
            + H4(signing_package.message)
            + H5(encode_group_commitment_list(signing_package.signing_commitments))
        )
        # ρ_i = H_1(Y, m, B, i), i ∈ S
        return {
            identifier: H1(prefix + identifier.serialize())
            for identifier in signing_package.identifiers
        }

    @classmethod
    def group_commitment_for(
        cls, signing_package: SigningPackage, binding_factors: Mapping[Identifier, int]
    ) -> Point:
        """
        Calculate the group commitment by aggregating the signers' commitments.

        Raises:
        IdentifierNotFound: If a signer has no binding factor.
        """
        # R
        group_commitment = Point()  # Point at infinity
        for identifier, commitments in signing_package.signing_commitments.items():
            if identifier not in binding_factors:
                raise IdentifierNotFound(f"No binding factor for participant {identifier}.")
            # R = ∑ D_i + ρ_i * E_i, i ∈ S
            group_commitment += commitments.hiding + (
                binding_factors[identifier] * commitments.binding
            )

        return group_commitment

    @classmethod
    def challenge_hash(
        cls, group_commitment: Point, verifying_key: Point, message: bytes
    ) -> int:
        """
        Compute the challenge binding the group commitment, verifying key and
        message.
        """
        # c = H_2(R, Y, m)
        return H2(
            group_commitment.sec_serialize() + verifying_key.sec_serialize() + message
        )

    def verify_signature_share(self, signature_share: SignatureShare) -> None:
        """
        Check one signature share against the signer's verifying share.

        Raises:
        IdentifierNotFound: If the signer is not part of the session.
        InvalidSignatureShare: If the share does not verify.
        """
        identifier = signature_share.identifier
        commitments = self.signing_package.signing_commitments.get(identifier)
        verifying_share = self.public_key_package.verifying_shares.get(identifier)
        if commitments is None or verifying_share is None:
            raise IdentifierNotFound(f"Participant {identifier} is not a signer.")

        lagrange = lagrange_coefficient(self.signing_package.identifiers, identifier)
        # R_i = D_i + ρ_i * E_i
        commitment_share = commitments.hiding + (
            self.binding_factors[identifier] * commitments.binding
        )
        # g^z_i ≟ R_i + Y_i^(c * λ_i)
        expected = commitment_share + ((self.challenge * lagrange) % Q) * verifying_share
        if signature_share.share * G != expected:
            raise InvalidSignatureShare(identifier)

    def signature(self, signature_shares: Iterable[SignatureShare]) -> Signature:
        """
        Compute the final signature from verified signature shares.

        Parameters:
        signature_shares (Iterable[SignatureShare]): The shares of every signer.

        Returns:
        Signature: σ = (R, z).

        Raises:
        InvalidSignatureShare: If any share does not verify; ``culprit`` names
        the signer.
        """
        z = 0
        for signature_share in signature_shares:
            try:
                self.verify_signature_share(signature_share)
            except InvalidSignatureShare:
                logger.warning(
                    f"Participant {signature_share.identifier} sent an invalid signature share"
                )
                raise
            # z = ∑ z_i, i ∈ S
            z = (z + signature_share.share) % Q

        if self.randomizer is not None:
            # z = z + c * a
            z = (z + self.challenge * self.randomizer.value) % Q

        # σ = (R, z)
        return Signature(self.group_commitment, z)


def _collect_shares(
    signature_shares: Union[Mapping[Identifier, SignatureShare], Iterable[SignatureShare]],
) -> Dict[Identifier, SignatureShare]:
    if isinstance(signature_shares, Mapping):
        signature_shares = signature_shares.values()
    collected: Dict[Identifier, SignatureShare] = {}
    for signature_share in signature_shares:
        if signature_share.identifier in collected:
            raise DuplicateIdentifier(
                f"Duplicated signature share for participant {signature_share.identifier}."
            )
        collected[signature_share.identifier] = signature_share
    return {identifier: collected[identifier] for identifier in sorted(collected)}


def aggregate(
    signing_package: SigningPackage,
    signature_shares: Union[Mapping[Identifier, SignatureShare], Iterable[SignatureShare]],
    public_key_package: PublicKeyPackage,
    randomizer: Union[None, Randomizer, RandomizedParams] = None,
) -> Signature:
    """
    Verify every signature share and combine them into a signature.

    Parameters:
    signing_package (SigningPackage): The package the signers signed.
    signature_shares (Mapping | Iterable[SignatureShare]): One share per
    signer in the package.
    public_key_package (PublicKeyPackage): The group's public key package.
    randomizer (Randomizer, optional): The session randomizer, if any.

    Returns:
    Signature: The aggregated signature.

    Raises:
    InsufficientSigners: If fewer than min_signers shares were given.
    IdentifierNotFound: If a share comes from a participant that did not commit.
    IncompletePackageSet: If a committed signer's share is missing.
    InvalidSignatureShare: If a share does not verify.
    """
    shares = _collect_shares(signature_shares)
    min_signers = public_key_package.min_signers or MIN_SIGNERS_FLOOR
    if len(shares) < min_signers:
        raise InsufficientSigners(
            f"Need at least {min_signers} signature shares, received {len(shares)}."
        )

    committed = set(signing_package.signing_commitments)
    unknown = sorted(set(shares) - committed)
    if unknown:
        raise IdentifierNotFound(
            f"Signature share from participant {unknown[0]} has no commitment."
        )
    missing = sorted(committed - set(shares))
    if missing:
        raise IncompletePackageSet(
            f"Missing signature share for participant {missing[0]}."
        )

    aggregator = Aggregator(signing_package, public_key_package, randomizer)
    signature = aggregator.signature(shares.values())
    logger.info(f"Aggregated signature from {len(shares)} signers")
    return signature
