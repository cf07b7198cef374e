import pytest
from src.lib import crypto
from src.lib.crypto import KdfParams

FAST_KDF = KdfParams(memory_cost=1024, time_cost=1, parallelism=1)

@pytest.fixture
def fast_kdf():
	return FAST_KDF

@pytest.fixture
def cheap_defaults(monkeypatch):
	"""Make KdfParams.default() cheap for code paths that create vaults implicitly."""
	monkeypatch.setattr(crypto, 'KDF_MEMORY_COST', FAST_KDF.memory_cost)
	monkeypatch.setattr(crypto, 'KDF_TIME_COST', FAST_KDF.time_cost)
	monkeypatch.setattr(crypto, 'KDF_PARALLELISM', FAST_KDF.parallelism)
	return FAST_KDF
