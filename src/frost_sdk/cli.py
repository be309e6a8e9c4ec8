"""
Command-line front end.

    frost-sdk validate-config scheme.toml
    frost-sdk keygen scheme.toml --out-dir keys/
    frost-sdk sign --key-dir keys/ --message "hello"
    frost-sdk verify --public-key-package keys/public_key_package.json \\
        --message "hello" --signature <hex>

``keygen`` runs the trusted dealer and writes one key package per
participant plus the public key package. ``sign`` runs a complete signing
session locally over the key packages found in a directory, which is useful
for testing a deployment; real participants exchange the same artifacts over
their own transport.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional
from . import serialization
from .aggregator import aggregate
from .config import Configuration
from .errors import FrostError
from .keys import KeyPackage, PublicKeyPackage
from .participant import commit, sign
from .randomizer import Randomizer, RandomizedParams
from .signing import SigningPackage
from .trusted_dealer import trusted_dealer_key_packages
from .verification import verify_randomized_signature, verify_signature

logger = logging.getLogger(__name__)

PUBLIC_KEY_PACKAGE_FILE = "public_key_package.json"
KEY_PACKAGE_PREFIX = "key_package_"


def validate_config_command(args) -> int:
    configuration = Configuration.from_file(args.config)
    print(
        f"Configuration is valid: {configuration.min_signers}-of-"
        f"{configuration.max_signers}"
    )
    return 0


def keygen(args) -> int:
    configuration = Configuration.from_file(args.config)
    key_packages, public_key_package = trusted_dealer_key_packages(configuration)

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    for identifier, key_package in key_packages.items():
        path = out_dir / f"{KEY_PACKAGE_PREFIX}{identifier.hex()}.json"
        path.write_text(serialization.key_package_to_json(key_package))
        key_package.zeroize()
        logger.debug(f"Wrote key package for participant {identifier} to {path}")
    (out_dir / PUBLIC_KEY_PACKAGE_FILE).write_text(
        serialization.public_key_package_to_json(public_key_package)
    )

    print(public_key_package.verifying_key.sec_serialize().hex())
    return 0


def _load_key_packages(key_dir: Path) -> List[KeyPackage]:
    key_packages = [
        serialization.decode(KeyPackage, path.read_bytes())
        for path in sorted(key_dir.glob(f"{KEY_PACKAGE_PREFIX}*.json"))
    ]
    return sorted(key_packages, key=lambda key_package: key_package.identifier)


def sign_command(args) -> int:
    key_dir = Path(args.key_dir)
    public_key_package = serialization.decode(
        PublicKeyPackage, (key_dir / PUBLIC_KEY_PACKAGE_FILE).read_bytes()
    )
    key_packages = _load_key_packages(key_dir)
    if not key_packages:
        raise FrostError(f"No key packages found in {key_dir}")

    signers = args.signers or key_packages[0].min_signers
    key_packages = key_packages[:signers]
    message = args.message.encode("utf-8")

    # Round 1
    nonces = {}
    commitments = []
    for key_package in key_packages:
        nonces[key_package.identifier], signer_commitments = commit(key_package)
        commitments.append(signer_commitments)
    signing_package = SigningPackage.new(message, commitments)

    randomized_params: Optional[RandomizedParams] = None
    if args.randomize:
        randomizer = Randomizer.derive(public_key_package, signing_package, args.entropy.encode())
        randomized_params = RandomizedParams.from_randomizer(public_key_package, randomizer)

    # Round 2
    signature_shares = [
        sign(signing_package, nonces[key_package.identifier], key_package, randomized_params)
        for key_package in key_packages
    ]
    signature = aggregate(
        signing_package, signature_shares, public_key_package, randomized_params
    )

    print(signature.hex())
    if randomized_params is not None:
        print(randomized_params.randomizer.hex())
        randomized_params.zeroize()
    for key_package in key_packages:
        key_package.zeroize()
    return 0


def verify_command(args) -> int:
    if args.public_key_package:
        verifying_key = serialization.decode(
            PublicKeyPackage, Path(args.public_key_package).read_bytes()
        )
    else:
        verifying_key = args.verifying_key

    if args.randomizer:
        verify_randomized_signature(
            args.randomizer, args.message, args.signature, verifying_key
        )
    else:
        verify_signature(args.message, args.signature, verifying_key)
    print("Signature is valid.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="frost-sdk", description="FROST threshold Schnorr signatures."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    subparsers = parser.add_subparsers()

    parser_validate = subparsers.add_parser(
        "validate-config", help="Check a scheme configuration file."
    )
    parser_validate.add_argument("config", type=str, help="Path to the TOML file.")
    parser_validate.set_defaults(func=validate_config_command)

    parser_keygen = subparsers.add_parser(
        "keygen", help="Deal key packages with a trusted dealer."
    )
    parser_keygen.add_argument("config", type=str, help="Path to the TOML file.")
    parser_keygen.add_argument(
        "--out-dir", type=str, required=True, help="Directory for the key packages."
    )
    parser_keygen.set_defaults(func=keygen)

    parser_sign = subparsers.add_parser(
        "sign", help="Run a local signing session over dealt key packages."
    )
    parser_sign.add_argument(
        "--key-dir", type=str, required=True, help="Directory written by keygen."
    )
    parser_sign.add_argument("--message", type=str, required=True, help="Message to sign.")
    parser_sign.add_argument(
        "--signers", type=int, default=None, help="Number of signers (default: min_signers)."
    )
    parser_sign.add_argument(
        "--randomize", action="store_true", help="Produce a rerandomized signature."
    )
    parser_sign.add_argument(
        "--entropy", type=str, default="", help="Extra entropy for the randomizer."
    )
    parser_sign.set_defaults(func=sign_command)

    parser_verify = subparsers.add_parser("verify", help="Verify a signature.")
    key_group = parser_verify.add_mutually_exclusive_group(required=True)
    key_group.add_argument(
        "--public-key-package", type=str, help="Path to the public key package."
    )
    key_group.add_argument("--verifying-key", type=str, help="Group verifying key (hex).")
    parser_verify.add_argument("--message", type=str, required=True, help="Message to verify.")
    parser_verify.add_argument(
        "--signature", type=str, required=True, help="Signature (hex)."
    )
    parser_verify.add_argument(
        "--randomizer", type=str, default=None, help="Randomizer (hex) of a rerandomized signature."
    )
    parser_verify.set_defaults(func=verify_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return 2

    try:
        return args.func(args)
    except FrostError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.error(f"I/O error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
