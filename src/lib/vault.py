"""Vault store and persistence.

`Vault` holds the decrypted entries together with the key, salt and KDF
parameters needed to write them back. `VaultStorage` turns a vault into the
on-disk container (header + AES-GCM ciphertext) and back.
"""
from __future__ import annotations
import contextlib, json, os, time, logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, Optional
from config import settings
from config.settings import TMP_SUFFIX
from .crypto import VaultCrypto, KdfParams, SecretKey
from .errors import VaultError, IoError, SerializationError, NotFound, AlreadyExists
from .header import VaultHeader, HEADER_SIZE

log = logging.getLogger(__name__)

def _now() -> int:
	return int(time.time())

def encode_entries(entries: Dict[str, str]) -> bytes:
	try:
		return json.dumps(entries, ensure_ascii=False, separators=(',', ':')).encode('utf-8')
	except UnicodeEncodeError as e:
		raise SerializationError(f"Entry is not valid text: {e.reason}") from e

def decode_entries(payload: bytes) -> Dict[str, str]:
	try:
		data = json.loads(payload.decode('utf-8'))
	except (UnicodeDecodeError, json.JSONDecodeError) as e:
		raise SerializationError(f"Invalid vault payload: {e}") from e
	if not isinstance(data, dict):
		raise SerializationError("Vault payload is not a mapping")
	for k, v in data.items():
		if not isinstance(v, str):
			raise SerializationError(f"Entry {k!r} has a non-string value")
	return data


class EntryIds:
	"""Restartable, lazy view of entry ids. Values are not reachable from it."""

	__slots__ = ('_entries',)

	def __init__(self, entries: Dict[str, str]):
		self._entries = entries

	def __iter__(self) -> Iterator[str]:
		return iter(self._entries)

	def __len__(self):
		return len(self._entries)

	def __contains__(self, entry_id):
		return entry_id in self._entries


class Vault:
	def __init__(self, key: SecretKey, salt: bytes, kdf: KdfParams, created_at: int,
			modified_at: Optional[int] = None, entries: Optional[Dict[str, str]] = None):
		self._key = key
		self._entries: Dict[str, str] = dict(entries or {})
		self.salt = salt
		self.kdf = kdf
		self.created_at = created_at
		self.modified_at = created_at if modified_at is None else modified_at
		self.dirty = False

	@classmethod
	def create(cls, password: str, kdf: Optional[KdfParams] = None, crypto: Optional[VaultCrypto] = None) -> 'Vault':
		"""New empty vault: fresh salt, key derived with `kdf` (defaults if None)."""
		crypto = crypto or VaultCrypto()
		kdf = kdf or KdfParams.default()
		salt = crypto.generate_salt()
		key = crypto.derive_key(password, salt, kdf)
		log.info("Created new vault")
		return cls(key, salt, kdf, _now())

	@classmethod
	def load(cls, password: str, path: Path | str) -> 'Vault':
		return VaultStorage(path).load(password)

	def save(self, path: Path | str) -> None:
		VaultStorage(path).save(self)

	# -- entries --

	def create_entry(self, entry_id: str, value: str) -> None:
		if entry_id in self._entries:
			raise AlreadyExists(entry_id)
		self._entries[entry_id] = value
		self.dirty = True

	def read_entry(self, entry_id: str) -> str:
		try:
			return self._entries[entry_id]
		except KeyError:
			raise NotFound(entry_id) from None

	def update_entry(self, entry_id: str, value: str) -> None:
		if entry_id not in self._entries:
			raise NotFound(entry_id)
		self._entries[entry_id] = value
		self.dirty = True

	def delete_entry(self, entry_id: str) -> None:
		try:
			del self._entries[entry_id]
		except KeyError:
			raise NotFound(entry_id) from None
		self.dirty = True

	def list_entries(self) -> EntryIds:
		return EntryIds(self._entries)

	def __contains__(self, entry_id):
		return entry_id in self._entries

	def __len__(self):
		return len(self._entries)

	# -- display --

	@property
	def created(self) -> datetime:
		return datetime.fromtimestamp(self.created_at)

	@property
	def modified(self) -> datetime:
		return datetime.fromtimestamp(self.modified_at)

	# -- key lifetime --

	@property
	def closed(self) -> bool:
		return self._key.wiped

	def close(self) -> None:
		"""Wipe the key and drop the entries. The vault cannot be saved afterwards."""
		self._key.wipe()
		self._entries.clear()

	def __enter__(self):
		return self

	def __exit__(self, *exc):
		self.close()
		return False

	def __repr__(self):
		return f"Vault(entries={len(self._entries)}, dirty={self.dirty}, closed={self.closed})"


class VaultStorage:
	def __init__(self, path: Path | str | None = None, crypto: VaultCrypto | None = None):
		# Resolve path dynamically to honor environment overrides in tests
		if path is not None:
			self.path = Path(path)
		else:
			env_path = os.environ.get('VAULT_PATH')
			self.path = Path(env_path) if env_path else settings.DEFAULT_VAULT_PATH
		self.crypto = crypto or VaultCrypto()

	def exists(self) -> bool:
		return self.path.exists()

	def save(self, vault: Vault) -> None:
		"""Encrypt and persist the vault; a fresh nonce is drawn on every call.

		`modified_at` only advances when entries changed since the last
		load or save.
		"""
		modified_at = max(_now(), vault.modified_at) if vault.dirty else vault.modified_at
		nonce = self.crypto.generate_nonce()
		header = VaultHeader(vault.created_at, modified_at, vault.kdf, vault.salt, nonce)
		aad = header.serialize()
		blob = aad + self.crypto.encrypt(vault._key, nonce, encode_entries(vault._entries), aad)
		self._write(blob)
		vault.modified_at = modified_at
		vault.dirty = False
		log.info("Vault saved -> %s (%d entries)", self.path, len(vault))

	def load(self, password: str) -> Vault:
		raw = self._read()
		if len(raw) < HEADER_SIZE:
			raise IoError(f"File too small to be a vault: {self.path}")
		header = VaultHeader.deserialize(raw)
		key = self.crypto.derive_key(password, header.salt, header.kdf)
		try:
			plain = self.crypto.decrypt(key, header.nonce, raw[HEADER_SIZE:], raw[:HEADER_SIZE])
			entries = decode_entries(plain)
		except VaultError:
			key.wipe()
			raise
		log.info("Vault loaded <- %s (%d entries)", self.path, len(entries))
		return Vault(key, header.salt, header.kdf, header.created_at, header.modified_at, entries)

	def _read(self) -> bytes:
		try:
			return self.path.read_bytes()
		except OSError as e:
			raise IoError(f"Cannot read vault {self.path}: {e.strerror or e}") from e

	def _write(self, blob: bytes) -> None:
		tmp = self.path.with_name(self.path.name + TMP_SUFFIX)
		try:
			self.path.parent.mkdir(parents=True, exist_ok=True)
			with open(tmp, 'wb') as f:
				f.write(blob)
				f.flush()
				os.fsync(f.fileno())
			os.replace(tmp, self.path)
		except OSError as e:
			with contextlib.suppress(OSError):
				tmp.unlink(missing_ok=True)
			raise IoError(f"Cannot write vault {self.path}: {e.strerror or e}") from e
