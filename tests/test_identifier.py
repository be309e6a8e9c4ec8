import unittest

from frost_sdk import Identifier, Q
from frost_sdk.errors import InvalidIdentifier, SerializationError


class Tests(unittest.TestCase):
    def test_construction(self):
        self.assertEqual(Identifier(1).value, 1)
        self.assertEqual(Identifier(Q - 1).value, Q - 1)
        for value in (0, -1, Q, Q + 1):
            with self.assertRaises(InvalidIdentifier):
                Identifier(value)
        with self.assertRaises(InvalidIdentifier):
            Identifier("1")
        with self.assertRaises(InvalidIdentifier):
            Identifier(True)

    def test_ordering(self):
        a, b, c = Identifier(1), Identifier(2), Identifier(300)
        self.assertTrue(a < b < c)
        self.assertTrue(c > a)
        self.assertTrue(a <= Identifier(1))
        self.assertTrue(c >= b)
        self.assertEqual(sorted([c, a, b]), [a, b, c])
        self.assertEqual(Identifier(7), Identifier(7))
        self.assertNotEqual(Identifier(7), Identifier(8))
        self.assertEqual(len({Identifier(7), Identifier(7), Identifier(8)}), 2)

    def test_immutable(self):
        identifier = Identifier(5)
        with self.assertRaises(AttributeError):
            identifier._value = 6
        self.assertEqual(identifier.value, 5)

    def test_derive(self):
        alice = Identifier.derive("alice@example.com")
        self.assertEqual(alice, Identifier.derive("alice@example.com"))
        self.assertEqual(alice, Identifier.derive(b"alice@example.com"))
        self.assertNotEqual(alice, Identifier.derive("bob@example.com"))
        self.assertTrue(0 < alice.value < Q)

    def test_serialize(self):
        identifier = Identifier(1)
        self.assertEqual(identifier.serialize(), b"\x00" * 31 + b"\x01")
        self.assertEqual(identifier.hex(), "00" * 31 + "01")
        self.assertEqual(Identifier.deserialize(identifier.serialize()), identifier)
        self.assertEqual(Identifier.from_hex(identifier.hex()), identifier)

        derived = Identifier.derive("carol")
        self.assertEqual(Identifier.from_hex(derived.hex()), derived)

    def test_deserialize_rejects(self):
        with self.assertRaises(InvalidIdentifier):
            Identifier.deserialize(b"\x00" * 32)
        with self.assertRaises(InvalidIdentifier):
            Identifier.deserialize(Q.to_bytes(32, "big"))
        with self.assertRaises(SerializationError):
            Identifier.deserialize(b"\x01")
        with self.assertRaises(SerializationError):
            Identifier.from_hex("not hex")

    def test_str(self):
        self.assertEqual(str(Identifier(3)), "3")
        self.assertEqual(str(Identifier(2**20)), Identifier(2**20).hex())
        self.assertEqual(int(Identifier(9)), 9)


if __name__ == "__main__":
    unittest.main()
