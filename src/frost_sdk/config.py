"""Threshold scheme configuration."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

import toml

from .ciphersuite import deserialize_scalar
from .errors import InvalidConfiguration, InvalidIdentifier, SerializationError
from .identifier import Identifier

logger = logging.getLogger(__name__)


@dataclass
class Configuration:
    """Signing quorum of a threshold key.

    ``secret`` optionally carries the 32-byte encoding of an existing signing
    key, which trusted-dealer keygen then splits instead of sampling a fresh
    one. ``identifiers`` optionally names the participants.
    """

    min_signers: int
    max_signers: int
    secret: bytes = b""
    identifiers: Optional[List[Identifier]] = None

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "Configuration":
        """Load a configuration from a TOML file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Configuration instance

        Raises:
            InvalidConfiguration: If the file is missing or invalid
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise InvalidConfiguration(f"Configuration file not found: {config_path}")

        logger.info(f"Loading configuration from {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = toml.load(f)
        except (OSError, UnicodeDecodeError, toml.TomlDecodeError) as e:
            raise InvalidConfiguration(f"Failed to parse configuration file: {e}") from e

        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_data: dict) -> "Configuration":
        try:
            secret_hex = config_data.get("secret", "")
            secret = bytes.fromhex(secret_hex) if secret_hex else b""
            identifiers = config_data.get("identifiers")
            if identifiers is not None:
                identifiers = [_parse_identifier(item) for item in identifiers]
            configuration = cls(
                min_signers=config_data["min_signers"],
                max_signers=config_data["max_signers"],
                secret=secret,
                identifiers=identifiers,
            )
        except KeyError as e:
            raise InvalidConfiguration(f"Missing required configuration key: {e}") from e
        except (TypeError, ValueError) as e:
            if isinstance(e, InvalidIdentifier):
                raise
            raise InvalidConfiguration(f"Invalid configuration: {e}") from e

        configuration.validate()
        return configuration

    def validate(self) -> None:
        """Validate configuration.

        Raises:
            InvalidConfiguration: If configuration is invalid
        """
        validate_config(self)

    def secret_scalar(self) -> Optional[int]:
        """Return the configured secret as a scalar, or None if there is none."""
        if not self.secret:
            return None
        try:
            scalar = deserialize_scalar(self.secret)
        except ValueError as e:
            raise SerializationError(f"Malformed signing key: {e}") from e
        if scalar == 0:
            raise SerializationError("Malformed signing key: the key is zero.")
        return scalar


def _parse_identifier(item) -> Identifier:
    if isinstance(item, int):
        return Identifier(item)
    if isinstance(item, str):
        return Identifier.derive(item)
    raise InvalidIdentifier(f"Unsupported identifier entry: {item!r}")


def validate_signers(min_signers: int, max_signers: int) -> None:
    """Check 2 <= min_signers <= max_signers without generating any keys."""
    for name, value in (("min_signers", min_signers), ("max_signers", max_signers)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidConfiguration(f"{name} must be an integer.")
    if max_signers < 2:
        raise InvalidConfiguration("max_signers must be at least 2")
    if min_signers < 2:
        raise InvalidConfiguration("min_signers must be at least 2")
    if min_signers > max_signers:
        raise InvalidConfiguration("min_signers must not be larger than max_signers")


def validate_config(config: Configuration) -> None:
    """Validate a configuration without performing any key generation.

    Raises:
        InvalidConfiguration: If the signer counts or identifier list are invalid
    """
    validate_signers(config.min_signers, config.max_signers)
    if config.identifiers is not None:
        if len(config.identifiers) != config.max_signers:
            raise InvalidConfiguration(
                f"Expected {config.max_signers} identifiers, got {len(config.identifiers)}"
            )
