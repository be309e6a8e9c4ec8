"""
Primitives of the FROST(secp256k1, SHA-256) ciphersuite: scalar and element
encodings, random scalars, nonce generation and the domain-separated hash
functions H1 to H5, plus the HID, HDKG and HRAND hashes used for identifier
derivation, DKG proofs of knowledge and signature randomization.

The hash-to-field functions use expand_message_xmd with SHA-256 and reduce 48
uniform bytes modulo the group order, so their output is statistically close
to uniform over Z_q.
"""

from hashlib import sha256
import secrets
from .constants import Q, CONTEXT_STRING, SCALAR_SIZE
from .point import Point

# expand_message_xmd parameters for SHA-256
_B_IN_BYTES = 32
_S_IN_BYTES = 64
# ceil((ceil(log2(q)) + 128) / 8)
_FIELD_L = 48


def serialize_scalar(scalar: int) -> bytes:
    """Encode a scalar as 32 big-endian bytes."""
    return (scalar % Q).to_bytes(SCALAR_SIZE, "big")


def deserialize_scalar(data: bytes) -> int:
    """
    Decode a 32-byte big-endian scalar.

    Raises:
    ValueError: If the input has the wrong length or is not reduced modulo Q.
    """
    if not isinstance(data, (bytes, bytearray)) or len(data) != SCALAR_SIZE:
        raise ValueError(f"Scalar encoding must be exactly {SCALAR_SIZE} bytes.")
    scalar = int.from_bytes(data, "big")
    if scalar >= Q:
        raise ValueError("Scalar is not reduced modulo the group order.")
    return scalar


def serialize_element(element: Point) -> bytes:
    """Encode a group element in SEC 1 compressed form."""
    return element.sec_serialize()


def deserialize_element(data: bytes) -> Point:
    """Decode a SEC 1 compressed, non-identity group element."""
    return Point.sec_deserialize(data)


def random_scalar() -> int:
    """Sample a uniformly random nonzero scalar."""
    while True:
        scalar = secrets.randbits(256) % Q
        if scalar:
            return scalar


def expand_message_xmd(msg: bytes, dst: bytes, len_in_bytes: int) -> bytes:
    """
    expand_message_xmd from RFC 9380 instantiated with SHA-256.

    Parameters:
    msg (bytes): The input message.
    dst (bytes): The domain separation tag, at most 255 bytes.
    len_in_bytes (int): The number of uniform bytes to produce.

    Returns:
    bytes: len_in_bytes pseudo-random bytes.
    """
    ell = -(-len_in_bytes // _B_IN_BYTES)
    if ell > 255 or len_in_bytes > 65535 or len(dst) > 255:
        raise ValueError("expand_message_xmd parameters out of range.")

    dst_prime = dst + len(dst).to_bytes(1, "big")
    z_pad = b"\x00" * _S_IN_BYTES
    l_i_b_str = len_in_bytes.to_bytes(2, "big")

    b_0 = sha256(z_pad + msg + l_i_b_str + b"\x00" + dst_prime).digest()
    b_i = sha256(b_0 + b"\x01" + dst_prime).digest()
    uniform_bytes = b_i
    for i in range(2, ell + 1):
        chained = bytes(x ^ y for x, y in zip(b_0, b_i))
        b_i = sha256(chained + i.to_bytes(1, "big") + dst_prime).digest()
        uniform_bytes += b_i

    return uniform_bytes[:len_in_bytes]


def hash_to_field(msg: bytes, tag: bytes) -> int:
    """Hash a message to a scalar under the ciphersuite domain ``tag``."""
    uniform_bytes = expand_message_xmd(msg, CONTEXT_STRING + tag, _FIELD_L)
    return int.from_bytes(uniform_bytes, "big") % Q


def H1(msg: bytes) -> int:
    """Binding factor hash."""
    return hash_to_field(msg, b"rho")


def H2(msg: bytes) -> int:
    """Challenge hash."""
    return hash_to_field(msg, b"chal")


def H3(msg: bytes) -> int:
    """Nonce hash."""
    return hash_to_field(msg, b"nonce")


def H4(msg: bytes) -> bytes:
    """Message hash."""
    digest = sha256()
    digest.update(CONTEXT_STRING)
    digest.update(b"msg")
    digest.update(msg)
    return digest.digest()


def H5(msg: bytes) -> bytes:
    """Commitment list hash."""
    digest = sha256()
    digest.update(CONTEXT_STRING)
    digest.update(b"com")
    digest.update(msg)
    return digest.digest()


def HID(msg: bytes) -> int:
    """Identifier derivation hash."""
    return hash_to_field(msg, b"id")


def HDKG(msg: bytes) -> int:
    """DKG proof of knowledge challenge hash."""
    return hash_to_field(msg, b"dkg")


def HRAND(msg: bytes) -> int:
    """Randomizer derivation hash."""
    return hash_to_field(msg, b"randomizer")


def nonce_generate(secret: int) -> int:
    """
    Generate a signing nonce bound to both fresh randomness and the signer's
    secret, so a weak random number generator alone cannot leak the nonce.
    """
    random_bytes = secrets.token_bytes(32)
    return H3(random_bytes + serialize_scalar(secret))
