"""
Constants for the FROST(secp256k1, SHA-256) ciphersuite. The curve operates
over a finite field of prime order P, with a base point G of order Q,
specified by its coordinates G_x and G_y. The remaining values fix the sizes
of the wire encodings and the domain separation of every hash.
"""

# The prime modulus of the field
P: int = 2**256 - 2**32 - 977

# The order of the curve
Q: int = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# Curve equation y^2 = x^3 + B
B: int = 7

# X-coordinate of the generator point G
G_x: int = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798

# Y-coordinate of the generator point G
G_y: int = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8

# Serialized sizes in bytes
SCALAR_SIZE: int = 32
ELEMENT_SIZE: int = 33
SIGNATURE_SIZE: int = ELEMENT_SIZE + SCALAR_SIZE

# Ciphersuite context string, prefixed to every domain separation tag
CONTEXT_STRING: bytes = b"FROST-secp256k1-SHA256-v1"

# Exchange format header
SERIALIZATION_VERSION: int = 0
CIPHERSUITE_ID: str = CONTEXT_STRING.decode("ascii")
