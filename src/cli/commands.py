"""CLI commands implemented with click.

Every command takes an optional --vault path (falls back to $VAULT_PATH,
then the default location) and prompts for the master password.
"""
from __future__ import annotations
import json, click
from pathlib import Path
from config.settings import FORMAT_VERSION
from src.lib.errors import VaultError, IoError
from src.lib.session import Session
from src.lib.vault import Vault, VaultStorage
from src.cli.shell import Shell

vault_option = click.option('--vault', 'vault_path', type=click.Path(dir_okay=False, path_type=Path), default=None, help='Vault file (default: $VAULT_PATH).')
password_option = click.option('--password', prompt=True, hide_input=True)

def _fail(e: Exception):
	click.echo(f'Error: {e}', err=True)
	raise SystemExit(1)

def _open(vault_path, password) -> Session:
	vs = VaultStorage(vault_path)
	if not vs.exists():
		raise IoError(f'No vault at {vs.path}; run `init` first')
	return Session.open_or_create(vs.path, password)

@click.group()
def cli():
	"""clipass - encrypted password vault"""

@cli.command()
@vault_option
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--force', is_flag=True, help='Recreate if vault already exists.')
def init(vault_path, password, force):
	"""Initialise a new encrypted vault (use --force to recreate)."""
	vs = VaultStorage(vault_path)
	if vs.exists() and not force:
		_fail(IoError(f'Vault exists at {vs.path} (use --force to recreate)'))
	if not password:
		_fail(ValueError('Master password cannot be empty'))
	try:
		with Vault.create(password, crypto=vs.crypto) as v:
			vs.save(v)
		click.echo(f'Vault created at {vs.path}.')
	except VaultError as e:
		_fail(e)

@cli.command()
@vault_option
@password_option
def info(vault_path, password):
	"""Show vault metadata (never values)."""
	try:
		with _open(vault_path, password) as s:
			meta = {
				'path': str(s.path),
				'version': FORMAT_VERSION,
				'created': s.created_at,
				'modified': s.modified_at,
				'entries': len(s.vault),
				'kdf': {'memory_cost': s.vault.kdf.memory_cost, 'time_cost': s.vault.kdf.time_cost, 'parallelism': s.vault.kdf.parallelism},
			}
			click.echo(json.dumps(meta, indent=2))
	except VaultError as e:
		_fail(e)

@cli.command('list')
@vault_option
@password_option
def list_entries(vault_path, password):
	"""List entry ids; values stay masked."""
	try:
		with _open(vault_path, password) as s:
			for entry_id in sorted(s.list_entries()):
				click.echo(f'- {entry_id}: ******')
	except VaultError as e:
		_fail(e)

@cli.command('get')
@click.argument('entry_id')
@vault_option
@password_option
def get_entry(entry_id, vault_path, password):
	"""Print the value of ENTRY_ID."""
	try:
		with _open(vault_path, password) as s:
			click.echo(s.read_entry(entry_id))
	except VaultError as e:
		_fail(e)

@cli.command('add')
@click.argument('entry_id')
@vault_option
@password_option
@click.option('--value', prompt=True, hide_input=True)
def add_entry(entry_id, vault_path, password, value):
	"""Add a new entry and save."""
	try:
		with _open(vault_path, password) as s:
			s.create_entry(entry_id, value)
			s.save()
		click.echo(f'Added {entry_id}.')
	except VaultError as e:
		_fail(e)

@cli.command('update')
@click.argument('entry_id')
@vault_option
@password_option
@click.option('--value', prompt=True, hide_input=True)
def update_entry(entry_id, vault_path, password, value):
	"""Replace the value of an existing entry and save."""
	try:
		with _open(vault_path, password) as s:
			s.update_entry(entry_id, value)
			s.save()
		click.echo(f'Updated {entry_id}.')
	except VaultError as e:
		_fail(e)

@cli.command('delete')
@click.argument('entry_id')
@vault_option
@password_option
def delete_entry(entry_id, vault_path, password):
	"""Delete an entry and save."""
	try:
		with _open(vault_path, password) as s:
			s.delete_entry(entry_id)
			s.save()
		click.echo(f'Deleted {entry_id}.')
	except VaultError as e:
		_fail(e)

@cli.command()
@click.argument('path', required=False, type=click.Path(dir_okay=False, path_type=Path))
@vault_option
def shell(path, vault_path):
	"""Interactive session on PATH; creates the vault if it does not exist."""
	vs = VaultStorage(path or vault_path)
	if vs.exists():
		password = click.prompt('Password', hide_input=True)
	else:
		click.echo(f'No vault at {vs.path}; a new one will be created.')
		password = click.prompt('New master password', hide_input=True, confirmation_prompt=True)
	try:
		with Session.open_or_create(vs.path, password) as s:
			Shell(s).run()
	except VaultError as e:
		_fail(e)
