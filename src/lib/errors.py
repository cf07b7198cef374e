"""Exception hierarchy shared by the vault core and the CLI.

Every failure the core reports derives from `VaultError` so callers can
catch one type at the session boundary and decide whether to re-prompt.
"""
from __future__ import annotations

class VaultError(Exception):
	pass

class IoError(VaultError):
	"""Filesystem read/write failure, or a file too short to be a vault."""

class HeaderError(VaultError):
	"""Bad magic, incompatible format version or truncated header."""

class CryptoError(VaultError):
	"""Authentication failure: wrong password or tampered data.

	The two cases are deliberately indistinguishable.
	"""

class KdfError(CryptoError):
	"""Key derivation parameters rejected or working memory unavailable."""

class SerializationError(VaultError):
	"""Decrypted payload could not be decoded into entries."""

class EntryError(VaultError): ...

class NotFound(EntryError):
	def __init__(self, entry_id: str):
		super().__init__(f"Entry not found: {entry_id}")
		self.entry_id = entry_id

class AlreadyExists(EntryError):
	def __init__(self, entry_id: str):
		super().__init__(f"Entry already exists: {entry_id}")
		self.entry_id = entry_id

class InvalidCommand(VaultError): ...
