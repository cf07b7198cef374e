"""Session: the single owner of an open vault and the path it came from.

Front ends (click commands, the interactive shell) go through this object
instead of keeping module-level state.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional
from .crypto import KdfParams
from .vault import Vault, VaultStorage, EntryIds

log = logging.getLogger(__name__)

class Session:
	def __init__(self, vault: Vault, path: Path, created: bool = False):
		self.vault = vault
		self.path = Path(path)
		self.created = created
		self.running = False

	@classmethod
	def open_or_create(cls, path: Path | str | None, password: str, kdf: Optional[KdfParams] = None) -> 'Session':
		"""Load the vault at `path`, or start an empty one if nothing is there yet.

		`kdf` only applies to a new vault; existing files carry their own.
		"""
		storage = VaultStorage(path)
		if storage.exists():
			return cls(storage.load(password), storage.path)
		log.info("No vault at %s; creating a new one", storage.path)
		return cls(Vault.create(password, kdf, storage.crypto), storage.path, created=True)

	def create_entry(self, entry_id: str, value: str) -> None:
		self.vault.create_entry(entry_id, value)

	def read_entry(self, entry_id: str) -> str:
		return self.vault.read_entry(entry_id)

	def update_entry(self, entry_id: str, value: str) -> None:
		self.vault.update_entry(entry_id, value)

	def delete_entry(self, entry_id: str) -> None:
		self.vault.delete_entry(entry_id)

	def list_entries(self) -> EntryIds:
		return self.vault.list_entries()

	def save(self, path: Path | str | None = None) -> Path:
		target = Path(path) if path is not None else self.path
		self.vault.save(target)
		self.created = False
		return target

	@property
	def created_at(self) -> str:
		return self.vault.created.isoformat(sep=' ')

	@property
	def modified_at(self) -> str:
		return self.vault.modified.isoformat(sep=' ')

	def close(self) -> None:
		self.running = False
		self.vault.close()

	def __enter__(self):
		return self

	def __exit__(self, *exc):
		self.close()
		return False
