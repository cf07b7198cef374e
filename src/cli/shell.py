"""Interactive prompt loop over an open session.

Commands: help, list, get <id>, new, update <id>, delete <id>, save, quit.
Errors are printed and the loop carries on; `quit` saves before leaving.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import click
from src.lib.errors import VaultError, InvalidCommand, AlreadyExists
from src.lib.session import Session

HELP = """commands:
	- list: list all entries
	- get <id>: show an entry's value
	- new: add an entry
	- update <id>: replace an entry's value
	- delete <id>: remove an entry
	- save: write the vault to disk
	- help: show this help
	- quit: save and exit"""

_WITH_ARG = ('get', 'update', 'delete')
_NO_ARG = ('help', 'list', 'new', 'save', 'quit')

@dataclass(frozen=True)
class Command:
	name: str
	arg: Optional[str] = None

def parse_command(line: str) -> Command:
	parts = line.split()
	if not parts:
		raise InvalidCommand('Empty command')
	name = parts[0]
	if name in _WITH_ARG:
		if len(parts) < 2:
			raise InvalidCommand(f"Missing argument for '{name}'")
		return Command(name, parts[1])
	if name in _NO_ARG:
		return Command(name)
	raise InvalidCommand(f'Invalid command: {name}')


class Shell:
	def __init__(self, session: Session):
		self.session = session

	def run(self) -> None:
		click.echo('clipass shell - type help to show available commands')
		self.session.running = True
		while self.session.running:
			try:
				line = click.prompt('>', default='', show_default=False)
			except click.Abort:
				click.echo('\nAborted; unsaved changes discarded.')
				break
			try:
				out = self.dispatch(parse_command(line))
			except VaultError as e:
				click.echo(f'Error: {e}')
				continue
			if out:
				click.echo(out)

	def dispatch(self, cmd: Command) -> str:
		s = self.session
		if cmd.name == 'help':
			return HELP
		if cmd.name == 'list':
			ids = sorted(s.list_entries())
			return '\n'.join(f'- {i}: ******' for i in ids) or '(empty)'
		if cmd.name == 'get':
			return s.read_entry(cmd.arg)
		if cmd.name == 'new':
			entry_id = click.prompt('id')
			if entry_id in s.vault:
				raise AlreadyExists(entry_id)
			s.create_entry(entry_id, click.prompt('value', hide_input=True))
			return f'Added {entry_id}.'
		if cmd.name == 'update':
			s.read_entry(cmd.arg)
			s.update_entry(cmd.arg, click.prompt('value', hide_input=True))
			return f'Updated {cmd.arg}.'
		if cmd.name == 'delete':
			s.delete_entry(cmd.arg)
			return f'Deleted {cmd.arg}.'
		if cmd.name == 'save':
			return f'Saved to {s.save()}.'
		if cmd.name == 'quit':
			s.save()
			s.running = False
			return 'Saved. Bye.'
		raise InvalidCommand(f'Invalid command: {cmd.name}')
