"""Fixed-layout vault file header (format v3).

File layout::

    [magic 4][version u16][header_size u16]
    [created_at u64][modified_at u64]
    [memory_cost u32][time_cost u32][parallelism u32]
    [salt 32][nonce 12]
    [AES-GCM ciphertext + tag ... until EOF]

All integers are little-endian. The serialized header is the associated
data of the AES-GCM payload, so editing any byte of it breaks decryption.
"""
from __future__ import annotations
import logging, struct
from dataclasses import dataclass
from config.settings import MAGIC, FORMAT_VERSION, SALT_LENGTH, NONCE_LENGTH
from .crypto import KdfParams
from .errors import HeaderError

log = logging.getLogger(__name__)

_PREAMBLE = struct.Struct('<4sHH')
_BODY = struct.Struct(f'<QQIII{SALT_LENGTH}s{NONCE_LENGTH}s')
HEADER_SIZE = _PREAMBLE.size + _BODY.size

@dataclass
class VaultHeader:
	created_at: int
	modified_at: int
	kdf: KdfParams
	salt: bytes
	nonce: bytes
	version: int = FORMAT_VERSION
	header_size: int = HEADER_SIZE

	def serialize(self) -> bytes:
		if len(self.salt) != SALT_LENGTH: raise HeaderError('Bad salt length')
		if len(self.nonce) != NONCE_LENGTH: raise HeaderError('Bad nonce length')
		try:
			return _PREAMBLE.pack(MAGIC, FORMAT_VERSION, HEADER_SIZE) + _BODY.pack(
				self.created_at, self.modified_at,
				self.kdf.memory_cost, self.kdf.time_cost, self.kdf.parallelism,
				self.salt, self.nonce,
			)
		except struct.error as e:
			raise HeaderError(f'Header field out of range: {e}') from e

	@classmethod
	def deserialize(cls, data: bytes) -> 'VaultHeader':
		"""Parse a header from the start of `data`.

		Magic and version are checked before anything else is read; trailing
		bytes (the ciphertext) are ignored.
		"""
		if len(data) < len(MAGIC):
			raise HeaderError('Truncated header')
		if data[:len(MAGIC)] != MAGIC:
			raise HeaderError('Bad magic: not a clipass vault')
		if len(data) < _PREAMBLE.size:
			raise HeaderError('Truncated header')
		_magic, version, declared = _PREAMBLE.unpack_from(data, 0)
		if version != FORMAT_VERSION:
			raise HeaderError(f'Incompatible vault version {version} (expected {FORMAT_VERSION})')
		if len(data) < HEADER_SIZE:
			raise HeaderError('Truncated header')
		if declared != HEADER_SIZE:
			log.warning('Declared header size %d differs from %d', declared, HEADER_SIZE)
		created, modified, m_cost, t_cost, lanes, salt, nonce = _BODY.unpack_from(data, _PREAMBLE.size)
		log.debug('Parsed header v%d (created=%d, modified=%d)', version, created, modified)
		return cls(
			created_at=created, modified_at=modified,
			kdf=KdfParams(m_cost, t_cost, lanes),
			salt=salt, nonce=nonce,
			version=version, header_size=declared,
		)
