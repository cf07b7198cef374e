"""Configuration package for clipass.

Application code imports constants from `config.settings`; they are
re-exported here so `from config import KEY_LENGTH` keeps working.
"""

from .settings import (
	SALT_LENGTH, NONCE_LENGTH, KEY_LENGTH, AUTH_TAG_LENGTH,
	KDF_MEMORY_COST, KDF_TIME_COST, KDF_PARALLELISM, KDF_MAX_MEMORY_COST, KDF_MAX_TIME_COST,
	MAGIC, FORMAT_VERSION, DEFAULT_VAULT_PATH, TMP_SUFFIX, LOG_LEVEL,
)

__all__ = [
	'SALT_LENGTH', 'NONCE_LENGTH', 'KEY_LENGTH', 'AUTH_TAG_LENGTH',
	'KDF_MEMORY_COST', 'KDF_TIME_COST', 'KDF_PARALLELISM', 'KDF_MAX_MEMORY_COST', 'KDF_MAX_TIME_COST',
	'MAGIC', 'FORMAT_VERSION', 'DEFAULT_VAULT_PATH', 'TMP_SUFFIX', 'LOG_LEVEL'
]
