import pytest
from src.lib.session import Session
from src.lib.errors import CryptoError, AlreadyExists, NotFound

def test_open_or_create_new(tmp_path, fast_kdf):
	path = tmp_path / 'vault.clip'
	s = Session.open_or_create(path, 'hunter2', fast_kdf)
	assert s.created and s.path == path
	assert not path.exists()
	s.save()
	assert path.exists() and not s.created

def test_hunter2_scenario(tmp_path, fast_kdf):
	path = tmp_path / 'vault.clip'
	with Session.open_or_create(path, 'hunter2', fast_kdf) as s:
		s.create_entry('email', 'a@b.com')
		s.save()
	with Session.open_or_create(path, 'hunter2') as s:
		assert not s.created
		assert s.read_entry('email') == 'a@b.com'
	with pytest.raises(CryptoError):
		Session.open_or_create(path, 'wrong')

def test_entry_operations(tmp_path, fast_kdf):
	s = Session.open_or_create(tmp_path / 'v.clip', 'pw', fast_kdf)
	s.create_entry('k', 'v1')
	with pytest.raises(AlreadyExists):
		s.create_entry('k', 'v2')
	s.update_entry('k', 'v3')
	assert s.read_entry('k') == 'v3'
	assert list(s.list_entries()) == ['k']
	s.delete_entry('k')
	with pytest.raises(NotFound):
		s.read_entry('k')

def test_save_to_other_path(tmp_path, fast_kdf):
	s = Session.open_or_create(tmp_path / 'a.clip', 'pw', fast_kdf)
	s.create_entry('k', 'v')
	assert s.save(tmp_path / 'b.clip') == tmp_path / 'b.clip'
	assert Session.open_or_create(tmp_path / 'b.clip', 'pw').read_entry('k') == 'v'

def test_timestamps_for_display(tmp_path, fast_kdf):
	s = Session.open_or_create(tmp_path / 'v.clip', 'pw', fast_kdf)
	assert s.created_at == s.vault.created.isoformat(sep=' ')
	assert s.modified_at[:4].isdigit()

def test_close_stops_and_wipes(tmp_path, fast_kdf):
	s = Session.open_or_create(tmp_path / 'v.clip', 'pw', fast_kdf)
	s.running = True
	s.close()
	assert not s.running and s.vault.closed
