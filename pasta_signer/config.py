"""Runtime configuration using msgspec Struct."""

from __future__ import annotations

import argparse
import os

import msgspec

from .constants import NetworkId

ENV_LOG_LEVEL = "PASTA_SIGNER_LOG_LEVEL"
ENV_NETWORK = "PASTA_SIGNER_NETWORK"

_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Config(msgspec.Struct, frozen=True):
    """Settings shared by the command line front end and the library."""

    log_level: str = "WARNING"

    # default network for commands that do not name one
    network: str = "testnet"

    def __post_init__(self) -> None:
        if self.log_level.upper() not in _VALID_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_VALID_LEVELS)}, got {self.log_level}")
        NetworkId.parse(self.network)

    @property
    def normalized_log_level(self) -> str:
        return self.log_level.upper()

    @property
    def network_id(self) -> NetworkId:
        return NetworkId.parse(self.network)


def _convert(config_dict: dict) -> Config:
    # direct construction: __post_init__ raises ValueError on bad values
    return Config(**config_dict)


def _env_dict() -> dict:
    return {
        "log_level": os.getenv(ENV_LOG_LEVEL, "WARNING"),
        "network": os.getenv(ENV_NETWORK, "testnet"),
    }


def load_config_from_env() -> Config:
    """Configuration from ``PASTA_SIGNER_*`` environment variables."""
    return _convert(_env_dict())


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        choices=sorted(_VALID_LEVELS),
        default=None,
        help=f"Logging level (default: ${ENV_LOG_LEVEL} or WARNING)",
    )
    parser.add_argument(
        "--network",
        choices=[n.value for n in NetworkId],
        default=None,
        help=f"Network id for domain separation (default: ${ENV_NETWORK} or testnet)",
    )


def get_config(args: argparse.Namespace) -> Config:
    """Environment configuration overridden by parsed CLI arguments."""
    config_dict = _env_dict()
    if getattr(args, "log_level", None):
        config_dict["log_level"] = args.log_level
    if getattr(args, "network", None):
        config_dict["network"] = args.network
    return _convert(config_dict)

