"""
Error types raised by the FROST protocol functions.

Every failure is reported to the caller as a subclass of FrostError. FrostError
derives from ValueError, so code that only distinguishes "bad input" keeps
working. Errors that are caused by a misbehaving participant carry the
offending identifier in ``culprit`` so the coordinator can assign blame.
"""

from typing import Any, Optional


class FrostError(ValueError):
    """Base exception for all FROST protocol errors."""


class InvalidConfiguration(FrostError):
    """min_signers / max_signers (or the identifier list) are not usable."""


class InvalidIdentifier(FrostError):
    """An identifier is zero, out of range or otherwise malformed."""


class DuplicateIdentifier(FrostError):
    """The same identifier appears more than once."""


class IncompletePackageSet(FrostError):
    """A round received the wrong set of packages."""


class IdentifierNotFound(FrostError):
    """The identifier is not part of the signing package."""


class NonceMismatch(FrostError):
    """The nonces do not match the commitments recorded for the signer."""


class NonceReuse(FrostError):
    """
    The nonces were already consumed or disposed.

    This signals a caller bug: the same nonces must never be offered again.
    """


class InsufficientSigners(FrostError):
    """Fewer than min_signers participants took part."""


class SignatureInvalid(FrostError):
    """A well-formed signature failed to verify."""


class SerializationError(FrostError):
    """An exchange encoding could not be decoded."""


class ProtocolError(FrostError):
    """A protocol step was invoked out of order or on a disposed secret."""


class CulpritError(FrostError):
    """Base class for errors that identify a misbehaving participant."""

    description = "Invalid contribution"

    def __init__(self, culprit: Any, message: Optional[str] = None):
        self.culprit = culprit
        super().__init__(message or f"{self.description} from participant {culprit}")


class InvalidProofOfKnowledge(CulpritError):
    """A DKG round 1 proof of knowledge did not verify."""

    description = "Invalid proof of knowledge"


class ShareVerificationFailed(CulpritError):
    """A secret share did not match the sender's commitment."""

    description = "Secret share does not match commitment"


class InvalidSignatureShare(CulpritError):
    """A signature share did not verify against the signer's verifying share."""

    description = "Invalid signature share"
