"""
ECDSA / secp256k1 key handling for dualcall.

The funding key signs every deployment and contract transaction.
It is read from PRIVATE_KEY (process environment or a local .env file)
and falls back to the well-known development key below.

Dependencies: eth-account (no full web3.py needed)
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount


# Development key, address 0xdf7fd4830f4cc1440b469615e9996e9fde92608f
DEFAULT_PRIVATE_KEY = "0x4b2216c76f1b4c60c44d41986863e7337bc1a317d6a9366adfd8966fe2ac05f6"

DEFAULT_ENV = Path(".env")

_KEY_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load the funding private key.

    Args:
        env_path: Optional .env file to load first (default: ./.env)

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If the configured key is not 32 bytes of hex
    """
    env_path = env_path or DEFAULT_ENV

    if env_path.exists():
        load_dotenv(env_path, override=False)

    private_key = os.environ.get("PRIVATE_KEY", "").strip() or DEFAULT_PRIVATE_KEY

    # Ensure lowercase 0x prefix
    if private_key[:2] in ("0x", "0X"):
        private_key = "0x" + private_key[2:]
    else:
        private_key = "0x" + private_key

    if not _KEY_RE.match(private_key):
        raise ValueError("PRIVATE_KEY must be 32 bytes of hex")

    return private_key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: 0x-prefixed hex private key.
                     If None, uses load_private_key().
    """
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(private_key)


def get_address(private_key: Optional[str] = None) -> str:
    """Checksummed address for a private key."""
    return get_account(private_key).address
