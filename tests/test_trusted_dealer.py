import unittest

from frost_sdk import G, Identifier, Q
from frost_sdk.ciphersuite import random_scalar, serialize_scalar
from frost_sdk.config import Configuration
from frost_sdk.errors import (
    DuplicateIdentifier,
    InvalidConfiguration,
    ProtocolError,
    SerializationError,
    ShareVerificationFailed,
)
from frost_sdk.keys import SecretShare, lagrange_coefficient
from frost_sdk.trusted_dealer import (
    trusted_dealer_key_packages,
    trusted_dealer_keygen,
    verify_and_get_key_package_from,
)


class Tests(unittest.TestCase):
    def test_keygen(self):
        generation = trusted_dealer_keygen(Configuration(2, 3))
        public_key_package = generation.public_key_package

        self.assertEqual(
            list(generation.secret_shares), [Identifier(1), Identifier(2), Identifier(3)]
        )
        self.assertEqual(public_key_package.min_signers, 2)

        key_packages = {
            identifier: verify_and_get_key_package_from(secret_share)
            for identifier, secret_share in generation.secret_shares.items()
        }
        for identifier, key_package in key_packages.items():
            self.assertEqual(key_package.verifying_key, public_key_package.verifying_key)
            self.assertEqual(
                key_package.verifying_share, public_key_package.verifying_shares[identifier]
            )
            self.assertEqual(key_package.min_signers, 2)

    def test_split_secret(self):
        secret = random_scalar()
        configuration = Configuration(2, 3, secret=serialize_scalar(secret))
        key_packages, public_key_package = trusted_dealer_key_packages(configuration)

        self.assertEqual(public_key_package.verifying_key, secret * G)

        subset = [Identifier(1), Identifier(3)]
        recovered = sum(
            lagrange_coefficient(subset, identifier)
            * key_packages[identifier].signing_share.value
            for identifier in subset
        ) % Q
        self.assertEqual(recovered, secret)

    def test_custom_identifiers(self):
        identifiers = [Identifier.derive(name) for name in ("alice", "bob", "carol")]
        key_packages, public_key_package = trusted_dealer_key_packages(
            Configuration(2, 3), identifiers
        )
        self.assertEqual(set(key_packages), set(identifiers))
        self.assertEqual(list(public_key_package.verifying_shares), sorted(identifiers))

        configuration = Configuration(2, 3, identifiers=identifiers)
        key_packages, _ = trusted_dealer_key_packages(configuration)
        self.assertEqual(set(key_packages), set(identifiers))

    def test_invalid_inputs(self):
        with self.assertRaises(InvalidConfiguration):
            trusted_dealer_keygen(Configuration(1, 3))
        with self.assertRaises(InvalidConfiguration):
            trusted_dealer_keygen(Configuration(4, 3))
        with self.assertRaises(InvalidConfiguration):
            trusted_dealer_keygen(Configuration(2, 3), [1, 2])
        with self.assertRaises(DuplicateIdentifier):
            trusted_dealer_keygen(Configuration(2, 3), [1, 2, 2])
        with self.assertRaises(SerializationError):
            trusted_dealer_keygen(Configuration(2, 3, secret=b"\x00" * 32))
        with self.assertRaises(SerializationError):
            trusted_dealer_keygen(Configuration(2, 3, secret=Q.to_bytes(32, "big")))

    def test_tampered_share(self):
        generation = trusted_dealer_keygen(Configuration(2, 3))
        share = generation.secret_shares[Identifier(2)]
        tampered = SecretShare(
            share.identifier, (share.signing_share.value + 1) % Q, share.commitment
        )
        with self.assertRaises(ShareVerificationFailed) as context:
            verify_and_get_key_package_from(tampered)
        self.assertEqual(context.exception.culprit, Identifier(2))

    def test_generation_context_manager(self):
        with trusted_dealer_keygen(Configuration(2, 3)) as generation:
            share = generation.secret_shares[Identifier(2)]
            key_package = verify_and_get_key_package_from(share)
        self.assertTrue(generation.zeroized)
        for secret_share in generation.secret_shares.values():
            self.assertTrue(secret_share.zeroized)
        self.assertEqual(key_package.signing_share.value * G, key_package.verifying_share)

    def test_zeroize(self):
        generation = trusted_dealer_keygen(Configuration(2, 3))
        share = generation.secret_shares[Identifier(1)]
        generation.zeroize()
        self.assertTrue(share.zeroized)
        self.assertTrue(share.signing_share.is_zeroized)
        with self.assertRaises(ProtocolError):
            verify_and_get_key_package_from(share)

        key_packages, _ = trusted_dealer_key_packages(Configuration(2, 3))
        with key_packages[Identifier(1)] as key_package:
            self.assertEqual(key_package.signing_share.value * G, key_package.verifying_share)
        self.assertTrue(key_package.zeroized)
        with self.assertRaises(ProtocolError):
            key_package.signing_share.value


if __name__ == "__main__":
    unittest.main()
