"""
Signer-side operations of the two-round signing protocol.

Round one, ``commit``, draws a fresh pair of nonces bound to the signer's
signing share and publishes their commitments. Round two, ``sign``, consumes
those nonces to produce the signer's share of the signature over the
coordinator's signing package.
"""

import logging
from typing import Tuple, Union
from .constants import Q
from .errors import IdentifierNotFound, InsufficientSigners, NonceMismatch, NonceReuse
from .aggregator import Aggregator
from .keys import KeyPackage, lagrange_coefficient
from .randomizer import RandomizedParams, Randomizer, randomize_key, resolve_randomizer
from .signing import SignatureShare, SigningCommitments, SigningNonces, SigningPackage

logger = logging.getLogger(__name__)


def commit(key_package: KeyPackage) -> Tuple[SigningNonces, SigningCommitments]:
    """
    Generate the nonces for one signing session.

    Returns:
    Tuple[SigningNonces, SigningCommitments]: The nonces to keep secret until
    ``sign`` and the commitments to send to the coordinator.
    """
    key_package._ensure_live()
    nonces = SigningNonces.new(key_package.identifier, key_package.signing_share)
    return nonces, nonces.commitments


def sign(
    signing_package: SigningPackage,
    nonces: SigningNonces,
    key_package: KeyPackage,
    randomizer: Union[None, Randomizer, RandomizedParams] = None,
) -> SignatureShare:
    """
    Produce this participant's signature share.

    Parameters:
    signing_package (SigningPackage): The message and every signer's
    commitments, as assembled by the coordinator.
    nonces (SigningNonces): The nonces from ``commit``. They are consumed.
    key_package (KeyPackage): This participant's key package.
    randomizer (Randomizer, optional): The session randomizer for a
    rerandomized signature.

    Returns:
    SignatureShare: z_i for this participant.

    Raises:
    IdentifierNotFound: If the participant has no commitments in the package.
    InsufficientSigners: If the package holds fewer than min_signers signers.
    NonceReuse: If the nonces were already used or disposed.
    NonceMismatch: If the nonces do not match the recorded commitments.
    """
    key_package._ensure_live()
    identifier = key_package.identifier
    commitments = signing_package.signing_commitments.get(identifier)
    if commitments is None:
        raise IdentifierNotFound(
            f"Participant {identifier} has no commitments in the signing package."
        )
    if len(signing_package.signing_commitments) < key_package.min_signers:
        raise InsufficientSigners(
            f"Need at least {key_package.min_signers} signers, the package has "
            f"{len(signing_package.signing_commitments)}."
        )
    if nonces.consumed:
        raise NonceReuse("Signing nonces have already been used.")
    if nonces.commitments != commitments:
        raise NonceMismatch(
            f"Nonces do not match the commitments recorded for participant {identifier}."
        )

    # (d_i, e_i)
    hiding, binding = nonces.take()

    randomizer = resolve_randomizer(randomizer)
    verifying_key = randomize_key(key_package.verifying_key, randomizer)
    binding_factors = Aggregator.binding_factors_for(verifying_key, signing_package)
    group_commitment = Aggregator.group_commitment_for(signing_package, binding_factors)
    # c = H_2(R, Y, m)
    challenge = Aggregator.challenge_hash(
        group_commitment, verifying_key, signing_package.message
    )
    # λ_i
    lagrange = lagrange_coefficient(signing_package.identifiers, identifier)

    # z_i = d_i + (e_i * ρ_i) + λ_i * s_i * c
    share = (
        hiding
        + (binding * binding_factors[identifier])
        + (lagrange * key_package.signing_share.value * challenge)
    ) % Q

    logger.debug(f"Participant {identifier} produced a signature share")
    return SignatureShare(identifier, share)
