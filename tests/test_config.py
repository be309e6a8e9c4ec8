import os
import tempfile
import unittest

from frost_sdk import Identifier
from frost_sdk.config import Configuration, validate_config
from frost_sdk.errors import InvalidConfiguration, InvalidIdentifier


class Tests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def write(self, content):
        path = os.path.join(self.tmpdir.name, "scheme.toml")
        with open(path, "w") as f:
            f.write(content)
        return path

    def test_from_file(self):
        path = self.write(
            'min_signers = 2\nmax_signers = 3\nidentifiers = ["alice", "bob", "carol"]\n'
        )
        configuration = Configuration.from_file(path)
        self.assertEqual(configuration.min_signers, 2)
        self.assertEqual(configuration.max_signers, 3)
        self.assertEqual(configuration.identifiers[0], Identifier.derive("alice"))
        self.assertEqual(configuration.secret, b"")

    def test_numeric_identifiers_and_secret(self):
        path = self.write(
            "min_signers = 2\nmax_signers = 2\nidentifiers = [7, 9]\n"
            f'secret = "{"00" * 31 + "2a"}"\n'
        )
        configuration = Configuration.from_file(path)
        self.assertEqual(configuration.identifiers, [Identifier(7), Identifier(9)])
        self.assertEqual(configuration.secret_scalar(), 42)

    def test_invalid_files(self):
        path = os.path.join(self.tmpdir.name, "latin1.toml")
        with open(path, "wb") as f:
            f.write(b"min_signers = 2\nmax_signers = 3\n# \xff\xfe\n")
        with self.assertRaises(InvalidConfiguration):
            Configuration.from_file(path)
        with self.assertRaises(InvalidConfiguration):
            Configuration.from_file(os.path.join(self.tmpdir.name, "missing.toml"))
        with self.assertRaises(InvalidConfiguration):
            Configuration.from_file(self.write("min_signers = = 2"))
        with self.assertRaises(InvalidConfiguration):
            Configuration.from_file(self.write("min_signers = 2\n"))
        with self.assertRaises(InvalidConfiguration):
            Configuration.from_file(self.write("min_signers = 3\nmax_signers = 2\n"))
        with self.assertRaises(InvalidConfiguration):
            Configuration.from_file(
                self.write('min_signers = 2\nmax_signers = 2\nsecret = "xyz"\n')
            )
        with self.assertRaises(InvalidConfiguration):
            Configuration.from_file(
                self.write("min_signers = 2\nmax_signers = 3\nidentifiers = [1, 2]\n")
            )
        with self.assertRaises(InvalidIdentifier):
            Configuration.from_file(
                self.write("min_signers = 2\nmax_signers = 2\nidentifiers = [0, 1]\n")
            )

    def test_validate_config(self):
        validate_config(Configuration(2, 2))
        validate_config(Configuration(3, 5))
        for min_signers, max_signers in ((1, 3), (0, 0), (1, 1), (4, 3), (2, 1)):
            with self.assertRaises(InvalidConfiguration):
                validate_config(Configuration(min_signers, max_signers))
        with self.assertRaises(InvalidConfiguration):
            validate_config(Configuration("2", 3))


if __name__ == "__main__":
    unittest.main()
