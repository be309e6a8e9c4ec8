import unittest

from frost_sdk import Point, G, Q
from frost_sdk.ciphersuite import (
    H1,
    H2,
    H4,
    H5,
    deserialize_element,
    deserialize_scalar,
    expand_message_xmd,
    nonce_generate,
    random_scalar,
    serialize_scalar,
)
from frost_sdk.constants import P


class Tests(unittest.TestCase):
    def test_generator_encoding(self):
        self.assertEqual(
            G.sec_serialize().hex(),
            "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798",
        )
        self.assertEqual(
            (2 * G).sec_serialize().hex(),
            "02c6047f9441ed7d6d3045406e95c07cd85c778e4b8cef3ca7abac09b95c709ee5",
        )
        self.assertEqual(Point.sec_deserialize(G.sec_serialize()), G)
        self.assertTrue(G.is_on_curve())

    def test_arithmetic(self):
        self.assertTrue((Q * G).is_zero())
        self.assertEqual(G + G, 2 * G)
        self.assertEqual(3 * G - G, 2 * G)
        self.assertTrue((G + -G).is_zero())
        self.assertEqual(G + Point(), G)
        self.assertEqual((Q + 5) * G, 5 * G)

        a, b = random_scalar(), random_scalar()
        self.assertEqual(a * G + b * G, ((a + b) % Q) * G)

    def test_deserialize_rejects(self):
        with self.assertRaises(ValueError):
            Point().sec_serialize()
        with self.assertRaises(ValueError):
            Point.sec_deserialize(b"\x02" + b"\x00" * 31)
        with self.assertRaises(ValueError):
            Point.sec_deserialize(b"\x04" + G.sec_serialize()[1:])
        with self.assertRaises(ValueError):
            Point.sec_deserialize(b"\x02" + P.to_bytes(32, "big"))
        x = next(x for x in range(1, 100) if pow(x**3 + 7, (P - 1) // 2, P) != 1)
        with self.assertRaises(ValueError):
            deserialize_element(b"\x02" + x.to_bytes(32, "big"))

        self.assertFalse(Point(x, 1).is_on_curve())
        for point in (G, 7 * G, -G):
            self.assertTrue(Point.sec_deserialize(point.sec_serialize()).is_on_curve())

    def test_scalars(self):
        self.assertEqual(serialize_scalar(1), b"\x00" * 31 + b"\x01")
        self.assertEqual(deserialize_scalar(serialize_scalar(Q - 1)), Q - 1)
        with self.assertRaises(ValueError):
            deserialize_scalar(Q.to_bytes(32, "big"))
        with self.assertRaises(ValueError):
            deserialize_scalar(b"\x01" * 31)

    def test_expand_message_xmd(self):
        uniform_bytes = expand_message_xmd(
            b"", b"QUUX-V01-CS02-with-expander-SHA256-128", 0x20
        )
        self.assertEqual(
            uniform_bytes.hex(),
            "68a985b87eb6b46952128911f2a4412bbc302a9d759667f87f7a21d803f07235",
        )
        self.assertEqual(len(expand_message_xmd(b"abc", b"tag", 48)), 48)

    def test_hashes(self):
        self.assertNotEqual(H1(b"input"), H2(b"input"))
        self.assertEqual(H1(b"input"), H1(b"input"))
        self.assertTrue(0 <= H1(b"input") < Q)
        self.assertEqual(len(H4(b"message")), 32)
        self.assertNotEqual(H4(b"message"), H5(b"message"))

    def test_nonce_generate(self):
        secret = random_scalar()
        self.assertNotEqual(nonce_generate(secret), nonce_generate(secret))
        self.assertTrue(0 <= nonce_generate(secret) < Q)


if __name__ == "__main__":
    unittest.main()
