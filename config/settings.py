"""Project configuration settings.

Constants for the vault file format, key derivation defaults and runtime
paths. Paths and log level may be overridden from the environment.
"""

from pathlib import Path
import os

# Security / crypto
SALT_LENGTH = 32
NONCE_LENGTH = 12  # AES-GCM 96-bit nonce
KEY_LENGTH = 32    # AES-256
AUTH_TAG_LENGTH = 16  # GCM tag length

# Argon2id defaults, only used when a new vault is created
KDF_MEMORY_COST = 65536  # KiB (64 MB)
KDF_TIME_COST = 3
KDF_PARALLELISM = 4

# Upper bounds accepted from a file header
KDF_MAX_MEMORY_COST = 4 * 1024 * 1024  # KiB (4 GiB)
KDF_MAX_TIME_COST = 64

# File format
MAGIC = b"CLIP"
FORMAT_VERSION = 3

# Vault
DEFAULT_VAULT_PATH = Path(os.environ.get("VAULT_PATH", "vault_data/vault.clip"))
TMP_SUFFIX = ".tmp"

# Logging
LOG_LEVEL = os.environ.get("CLIPASS_LOG_LEVEL", "WARNING").upper()

__all__ = [
	'SALT_LENGTH','NONCE_LENGTH','KEY_LENGTH','AUTH_TAG_LENGTH',
	'KDF_MEMORY_COST','KDF_TIME_COST','KDF_PARALLELISM','KDF_MAX_MEMORY_COST','KDF_MAX_TIME_COST',
	'MAGIC','FORMAT_VERSION','DEFAULT_VAULT_PATH','TMP_SUFFIX','LOG_LEVEL'
]
