import unittest

from frost_sdk import G, Identifier, Q
from frost_sdk.aggregator import Aggregator, aggregate
from frost_sdk.config import Configuration
from frost_sdk.dkg import DKGParticipant
from frost_sdk.errors import (
    DuplicateIdentifier,
    IdentifierNotFound,
    IncompletePackageSet,
    InsufficientSigners,
    InvalidSignatureShare,
    NonceMismatch,
    NonceReuse,
    SignatureInvalid,
)
from frost_sdk.participant import commit, sign
from frost_sdk.signing import Signature, SignatureShare, SigningPackage
from frost_sdk.trusted_dealer import trusted_dealer_key_packages
from frost_sdk.verification import verify_signature


class Tests(unittest.TestCase):
    def setUp(self):
        self.key_packages, self.public_key_package = trusted_dealer_key_packages(
            Configuration(3, 5)
        )

    def run_round1(self, identifiers):
        nonces = {}
        commitments = []
        for identifier in identifiers:
            nonces[identifier], signer_commitments = commit(self.key_packages[identifier])
            commitments.append(signer_commitments)
        return nonces, commitments

    def sign_with(self, identifiers, message):
        nonces, commitments = self.run_round1(identifiers)
        signing_package = SigningPackage.new(message, commitments)
        shares = [
            sign(signing_package, nonces[identifier], self.key_packages[identifier])
            for identifier in identifiers
        ]
        return aggregate(signing_package, shares, self.public_key_package)

    def test_sign(self):
        signers = [Identifier(1), Identifier(3), Identifier(5)]
        signature = self.sign_with(signers, b"hello")

        self.assertIsNone(verify_signature(b"hello", signature, self.public_key_package))
        self.assertIsNone(
            verify_signature(
                b"hello", signature.serialize(), self.public_key_package.verifying_key
            )
        )
        self.assertEqual(len(signature.serialize()), 65)
        with self.assertRaises(SignatureInvalid):
            verify_signature(b"world", signature, self.public_key_package)

    def test_any_quorum(self):
        for signers in ([2, 4, 5], [1, 2, 3, 4], [1, 2, 3, 4, 5]):
            identifiers = [Identifier(i) for i in signers]
            signature = self.sign_with(identifiers, "world")
            verify_signature("world", signature, self.public_key_package)

    def test_commitment_order(self):
        identifiers = [Identifier(4), Identifier(1), Identifier(2)]
        nonces, commitments = self.run_round1(identifiers)
        signing_package = SigningPackage.new(b"order", commitments)
        self.assertEqual(
            signing_package.identifiers, (Identifier(1), Identifier(2), Identifier(4))
        )
        self.assertEqual(signing_package, SigningPackage.new(b"order", reversed(commitments)))

        shares = {
            identifier: sign(signing_package, nonces[identifier], self.key_packages[identifier])
            for identifier in identifiers
        }
        signature = aggregate(signing_package, shares, self.public_key_package)
        verify_signature(b"order", signature, self.public_key_package)

    def test_duplicate_commitments(self):
        _, commitments = self.run_round1([Identifier(1), Identifier(2)])
        with self.assertRaises(DuplicateIdentifier):
            SigningPackage.new(b"msg", commitments + commitments[:1])

    def test_insufficient_signers(self):
        identifiers = [Identifier(1), Identifier(2)]
        nonces, commitments = self.run_round1(identifiers)
        signing_package = SigningPackage.new(b"msg", commitments)
        with self.assertRaises(InsufficientSigners):
            sign(signing_package, nonces[Identifier(1)], self.key_packages[Identifier(1)])
        self.assertFalse(nonces[Identifier(1)].consumed)

    def test_signer_not_in_package(self):
        nonces, commitments = self.run_round1([Identifier(1), Identifier(2), Identifier(3)])
        signing_package = SigningPackage.new(b"msg", commitments)
        outsider_nonces, _ = commit(self.key_packages[Identifier(4)])
        with self.assertRaises(IdentifierNotFound):
            sign(signing_package, outsider_nonces, self.key_packages[Identifier(4)])

    def test_nonce_reuse(self):
        identifiers = [Identifier(1), Identifier(2), Identifier(3)]
        nonces, commitments = self.run_round1(identifiers)
        signing_package = SigningPackage.new(b"msg", commitments)
        first = Identifier(1)

        sign(signing_package, nonces[first], self.key_packages[first])
        self.assertTrue(nonces[first].consumed)
        with self.assertRaises(NonceReuse):
            sign(signing_package, nonces[first], self.key_packages[first])

        other_package = SigningPackage.new(b"other message", commitments)
        with self.assertRaises(NonceReuse):
            sign(other_package, nonces[first], self.key_packages[first])

        disposed = nonces[Identifier(2)]
        disposed.zeroize()
        with self.assertRaises(NonceReuse):
            sign(signing_package, disposed, self.key_packages[Identifier(2)])

    def test_nonce_mismatch(self):
        identifiers = [Identifier(1), Identifier(2), Identifier(3)]
        nonces, commitments = self.run_round1(identifiers)
        signing_package = SigningPackage.new(b"msg", commitments)
        with self.assertRaises(NonceMismatch):
            sign(signing_package, nonces[Identifier(2)], self.key_packages[Identifier(1)])
        self.assertFalse(nonces[Identifier(2)].consumed)

    def test_invalid_share_names_culprit(self):
        identifiers = [Identifier(1), Identifier(2), Identifier(3)]
        nonces, commitments = self.run_round1(identifiers)
        signing_package = SigningPackage.new(b"msg", commitments)
        shares = [
            sign(signing_package, nonces[identifier], self.key_packages[identifier])
            for identifier in identifiers
        ]
        shares[1] = SignatureShare(shares[1].identifier, (shares[1].share + 1) % Q)

        with self.assertRaises(InvalidSignatureShare) as context:
            aggregate(signing_package, shares, self.public_key_package)
        self.assertEqual(context.exception.culprit, Identifier(2))

    def test_aggregate_share_set(self):
        identifiers = [Identifier(1), Identifier(2), Identifier(3), Identifier(4)]
        nonces, commitments = self.run_round1(identifiers)
        signing_package = SigningPackage.new(b"msg", commitments)
        shares = [
            sign(signing_package, nonces[identifier], self.key_packages[identifier])
            for identifier in identifiers
        ]

        with self.assertRaises(InsufficientSigners):
            aggregate(signing_package, shares[:2], self.public_key_package)
        with self.assertRaises(IncompletePackageSet):
            aggregate(signing_package, shares[:3], self.public_key_package)
        stranger = SignatureShare(Identifier(5), shares[0].share)
        with self.assertRaises(IdentifierNotFound):
            aggregate(signing_package, shares[:3] + [stranger], self.public_key_package)
        with self.assertRaises(DuplicateIdentifier):
            aggregate(signing_package, shares + shares[:1], self.public_key_package)

        signature = aggregate(signing_package, shares, self.public_key_package)
        verify_signature(b"msg", signature, self.public_key_package)

    def test_aggregator_matches_signature_equation(self):
        identifiers = [Identifier(1), Identifier(2), Identifier(3)]
        nonces, commitments = self.run_round1(identifiers)
        signing_package = SigningPackage.new(b"equation", commitments)
        shares = [
            sign(signing_package, nonces[identifier], self.key_packages[identifier])
            for identifier in identifiers
        ]

        aggregator = Aggregator(signing_package, self.public_key_package)
        for share in shares:
            aggregator.verify_signature_share(share)
        signature = aggregator.signature(shares)

        self.assertEqual(signature.R, aggregator.group_commitment)
        self.assertEqual(
            signature.z * G,
            signature.R + aggregator.challenge * self.public_key_package.verifying_key,
        )
        self.assertEqual(Signature.deserialize(signature.serialize()), signature)


class DKGSigningTests(unittest.TestCase):
    def test_sign_after_dkg(self):
        participants = [DKGParticipant(i, 3, 2) for i in (1, 2, 3)]
        round1 = {p.identifier: p.round1() for p in participants}
        inbox = {p.identifier: {} for p in participants}
        for participant in participants:
            for recipient, package in participant.round2(round1).items():
                inbox[recipient][participant.identifier] = package
        results = {
            p.identifier: p.finalize(inbox[p.identifier]) for p in participants
        }
        public_key_package = results[Identifier(1)][1]

        signers = [Identifier(2), Identifier(3)]
        nonces, commitments = {}, []
        for identifier in signers:
            nonces[identifier], signer_commitments = commit(results[identifier][0])
            commitments.append(signer_commitments)
        signing_package = SigningPackage.new(b"dkg", commitments)
        shares = [
            sign(signing_package, nonces[identifier], results[identifier][0])
            for identifier in signers
        ]
        signature = aggregate(signing_package, shares, public_key_package)
        verify_signature(b"dkg", signature, public_key_package)


if __name__ == "__main__":
    unittest.main()
