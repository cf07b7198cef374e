"""Cryptographic primitives: Argon2id key derivation and AES-256-GCM.

Keys live in a `SecretKey`, a mutable buffer that is zeroed by `wipe()`,
on context exit, and when the object is collected.
"""
from __future__ import annotations
import logging, secrets
from dataclasses import dataclass
from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from config.settings import (
	SALT_LENGTH, NONCE_LENGTH, KEY_LENGTH, AUTH_TAG_LENGTH,
	KDF_MEMORY_COST, KDF_TIME_COST, KDF_PARALLELISM, KDF_MAX_MEMORY_COST, KDF_MAX_TIME_COST
)
from .errors import CryptoError, KdfError

log = logging.getLogger(__name__)

ARGON2_VERSION = 0x13
_U32_MAX = 0xFFFFFFFF
_MAX_LANES = 0xFFFFFF

@dataclass(frozen=True)
class KdfParams:
	memory_cost: int  # KiB
	time_cost: int    # iterations
	parallelism: int  # lanes

	@classmethod
	def default(cls) -> 'KdfParams':
		return cls(KDF_MEMORY_COST, KDF_TIME_COST, KDF_PARALLELISM)

	def validate(self) -> None:
		"""Reject values Argon2id cannot run with or the header cannot store."""
		for name in ('memory_cost', 'time_cost', 'parallelism'):
			value = getattr(self, name)
			if not isinstance(value, int) or isinstance(value, bool):
				raise KdfError(f"{name} must be an integer")
			if not 1 <= value <= _U32_MAX:
				raise KdfError(f"{name} out of range: {value}")
		if self.parallelism > _MAX_LANES:
			raise KdfError(f"parallelism out of range: {self.parallelism}")
		if self.memory_cost > KDF_MAX_MEMORY_COST:
			raise KdfError(f"memory_cost above limit: {self.memory_cost}")
		if self.time_cost > KDF_MAX_TIME_COST:
			raise KdfError(f"time_cost above limit: {self.time_cost}")
		if self.memory_cost < 8 * self.parallelism:
			raise KdfError("memory_cost must be at least 8 KiB per lane")


class SecretKey:
	"""Owner of raw key bytes. The buffer is zeroed on wipe."""

	__slots__ = ('_buf', '_live')

	def __init__(self, buf: bytearray):
		if len(buf) != KEY_LENGTH:
			raise CryptoError(f"Key must be {KEY_LENGTH} bytes")
		self._buf = buf
		self._live = True

	@property
	def wiped(self) -> bool:
		return not self._live

	def buffer(self) -> bytearray:
		if not self._live:
			raise CryptoError("Key has been wiped")
		return self._buf

	def wipe(self) -> None:
		self._buf[:] = bytes(len(self._buf))
		self._live = False

	def __len__(self):
		return len(self._buf)

	def __enter__(self):
		return self

	def __exit__(self, *exc):
		self.wipe()
		return False

	def __del__(self):
		try:
			self.wipe()
		except AttributeError:  # partially constructed
			pass

	def __repr__(self):
		return 'SecretKey(<wiped>)' if self.wiped else 'SecretKey(<redacted>)'

	def __copy__(self):
		raise TypeError('SecretKey cannot be copied')

	def __deepcopy__(self, memo):
		raise TypeError('SecretKey cannot be copied')

	def __reduce__(self):
		raise TypeError('SecretKey cannot be pickled')


class VaultCrypto:
	def generate_salt(self) -> bytes:
		return secrets.token_bytes(SALT_LENGTH)

	def generate_nonce(self) -> bytes:
		return secrets.token_bytes(NONCE_LENGTH)

	def derive_key(self, password: str, salt: bytes, params: KdfParams) -> SecretKey:
		"""Derive the 32-byte vault key with Argon2id v0x13.

		Deterministic for a given password, salt and params. Raises KdfError
		for invalid params or when Argon2 cannot allocate its memory.
		"""
		params.validate()
		if len(salt) != SALT_LENGTH:
			raise KdfError(f"Salt must be {SALT_LENGTH} bytes")
		try:
			secret = password.encode('utf-8')
		except UnicodeEncodeError as e:
			raise KdfError("Password is not valid text") from e
		log.debug("Deriving key (m=%d KiB, t=%d, p=%d)", params.memory_cost, params.time_cost, params.parallelism)
		try:
			raw = hash_secret_raw(
				secret=secret,
				salt=salt,
				time_cost=params.time_cost,
				memory_cost=params.memory_cost,
				parallelism=params.parallelism,
				hash_len=KEY_LENGTH,
				type=Type.ID,
				version=ARGON2_VERSION,
			)
		except (HashingError, MemoryError, OverflowError) as e:
			raise KdfError(f"Key derivation failed: {e}") from e
		buf = bytearray(KEY_LENGTH)
		n = min(len(raw), KEY_LENGTH)
		buf[:n] = raw[:n]
		del raw, secret
		return SecretKey(buf)

	def encrypt(self, key: SecretKey, nonce: bytes, data: bytes, aad: bytes) -> bytes:
		"""AES-256-GCM encrypt; returns ciphertext + tag. `aad` is authenticated only."""
		if len(nonce) != NONCE_LENGTH: raise CryptoError("Bad nonce length")
		cipher = Cipher(algorithms.AES(key.buffer()), modes.GCM(nonce))
		enc = cipher.encryptor()
		enc.authenticate_additional_data(aad)
		ct = enc.update(data) + enc.finalize()
		return ct + enc.tag

	def decrypt(self, key: SecretKey, nonce: bytes, blob: bytes, aad: bytes) -> bytes:
		if len(nonce) != NONCE_LENGTH: raise CryptoError("Bad nonce length")
		if len(blob) < AUTH_TAG_LENGTH: raise CryptoError("Ciphertext too short")
		ct = blob[:-AUTH_TAG_LENGTH]; tag = blob[-AUTH_TAG_LENGTH:]
		cipher = Cipher(algorithms.AES(key.buffer()), modes.GCM(nonce, tag))
		dec = cipher.decryptor()
		dec.authenticate_additional_data(aad)
		try:
			return dec.update(ct) + dec.finalize()
		except InvalidTag as e:
			raise CryptoError("Decryption failed: wrong password or corrupted vault") from e
