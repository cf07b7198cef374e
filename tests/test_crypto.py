import copy
import pytest
from src.lib.crypto import VaultCrypto, KdfParams, SecretKey
from src.lib.errors import CryptoError, KdfError

def test_derive_key_consistency(fast_kdf):
	c = VaultCrypto()
	salt = c.generate_salt()
	k1 = c.derive_key('secret', salt, fast_kdf)
	k2 = c.derive_key('secret', salt, fast_kdf)
	assert bytes(k1.buffer()) == bytes(k2.buffer()) and len(k1) == 32

def test_derive_key_depends_on_salt_and_params(fast_kdf):
	c = VaultCrypto(); salt = c.generate_salt()
	base = bytes(c.derive_key('pw', salt, fast_kdf).buffer())
	assert bytes(c.derive_key('pw', c.generate_salt(), fast_kdf).buffer()) != base
	assert bytes(c.derive_key('pw', salt, KdfParams(1024, 2, 1)).buffer()) != base
	assert bytes(c.derive_key('pw2', salt, fast_kdf).buffer()) != base

def test_default_params():
	assert KdfParams.default() == KdfParams(65536, 3, 4)

def test_derive_with_default_params():
	c = VaultCrypto()
	key = c.derive_key('pw', c.generate_salt(), KdfParams.default())
	assert len(key) == 32

@pytest.mark.parametrize('params', [
	KdfParams(1024, 0, 1),
	KdfParams(1024, 1, 0),
	KdfParams(4, 1, 1),
	KdfParams(1024, 1, 1 << 24),
	KdfParams(1 << 32, 1, 1),
	KdfParams(1024.0, 1, 1),
])
def test_invalid_params_rejected(params):
	c = VaultCrypto()
	with pytest.raises(KdfError):
		c.derive_key('pw', c.generate_salt(), params)

def test_kdf_error_is_crypto_error(fast_kdf):
	with pytest.raises(CryptoError):
		VaultCrypto().derive_key('pw', b'short', fast_kdf)

def test_nonce_fresh_and_sized():
	c = VaultCrypto()
	nonces = {c.generate_nonce() for _ in range(50)}
	assert len(nonces) == 50
	assert all(len(n) == 12 for n in nonces)

def test_encrypt_decrypt_with_aad(fast_kdf):
	c = VaultCrypto(); key = c.derive_key('pw', c.generate_salt(), fast_kdf)
	nonce = c.generate_nonce()
	for payload in [b'', b'a', b'{"k":"v"}', b'x' * 4096]:
		blob = c.encrypt(key, nonce, payload, b'header')
		assert len(blob) == len(payload) + 16
		assert c.decrypt(key, nonce, blob, b'header') == payload

def test_decrypt_rejects_changed_aad(fast_kdf):
	c = VaultCrypto(); key = c.derive_key('pw', c.generate_salt(), fast_kdf)
	nonce = c.generate_nonce()
	blob = c.encrypt(key, nonce, b'data', b'header')
	with pytest.raises(CryptoError):
		c.decrypt(key, nonce, blob, b'Header')

def test_decrypt_wrong_key(fast_kdf):
	c = VaultCrypto()
	k1 = c.derive_key('pw', c.generate_salt(), fast_kdf)
	k2 = c.derive_key('pw', c.generate_salt(), fast_kdf)
	nonce = c.generate_nonce()
	blob = c.encrypt(k1, nonce, b'data', b'')
	with pytest.raises(CryptoError):
		c.decrypt(k2, nonce, blob, b'')

def test_decrypt_corrupted_or_short(fast_kdf):
	c = VaultCrypto(); key = c.derive_key('pw', c.generate_salt(), fast_kdf)
	nonce = c.generate_nonce()
	blob = c.encrypt(key, nonce, b'data', b'')
	with pytest.raises(CryptoError):
		c.decrypt(key, nonce, blob[:-1] + bytes([blob[-1] ^ 1]), b'')
	with pytest.raises(CryptoError):
		c.decrypt(key, nonce, blob[:10], b'')
	with pytest.raises(CryptoError):
		c.decrypt(key, nonce[:8], blob, b'')

def test_secret_key_wipe(fast_kdf):
	c = VaultCrypto()
	key = c.derive_key('pw', c.generate_salt(), fast_kdf)
	buf = key.buffer()
	assert any(buf)
	with key:
		pass
	assert key.wiped
	assert buf == bytearray(32)
	with pytest.raises(CryptoError):
		key.buffer()
	with pytest.raises(CryptoError):
		c.encrypt(key, c.generate_nonce(), b'data', b'')

def test_secret_key_not_copyable():
	key = SecretKey(bytearray(b'k' * 32))
	assert 'k' not in repr(key)
	with pytest.raises(TypeError):
		copy.copy(key)
	with pytest.raises(TypeError):
		copy.deepcopy(key)

def test_secret_key_length_checked():
	with pytest.raises(CryptoError):
		SecretKey(bytearray(16))

@pytest.mark.parametrize('params', [
	KdfParams(4 * 1024 * 1024 + 1, 1, 1),
	KdfParams(1024, 65, 1),
])
def test_costs_above_limits_rejected(params):
	with pytest.raises(KdfError, match='above limit'):
		params.validate()

def test_limits_admit_defaults():
	KdfParams.default().validate()
	KdfParams(4 * 1024 * 1024, 64, 4).validate()

def test_unencodable_password(fast_kdf):
	c = VaultCrypto()
	with pytest.raises(KdfError):
		c.derive_key('pw\ud800', c.generate_salt(), fast_kdf)
