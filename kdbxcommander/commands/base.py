#  _  __
# | |/ /___ ___ _ __  ___ _ _ ®
# | ' </ -_) -_) '_ \/ -_) '_|
# |_|\_\___\___| .__/\___|_|
#              |_|
#
# Keeper Commander
# Copyright 2022 Keeper Security Inc.
# Contact: ops@keepersecurity.com
#

import abc
import argparse
import shlex
import sys
from collections import OrderedDict
from typing import Optional, Any, Dict, List, NamedTuple, Union

from tabulate import tabulate

from ..error import GrammarError, VaultNotOpenedError, PathNotFoundError, WrongKindError
from ..vault import VaultGroup, VaultEntry

commands = OrderedDict()     # type: Dict[str, Command]
command_info = OrderedDict()


class ParseError(Exception):
    pass


class ValueHint:
    Other = 'other'
    Path = 'path'


class ParsedCommand(NamedTuple):
    name: str
    command: 'Command'
    options: Dict[str, Any]


def register_commands(commands, command_info):
    from .group import register_commands as group_commands, register_command_info as group_command_info
    group_commands(commands)
    group_command_info(command_info)

    from .entry import register_commands as entry_commands, register_command_info as entry_command_info
    entry_commands(commands)
    entry_command_info(command_info)

    from .database import register_commands as database_commands, register_command_info as database_command_info
    database_commands(commands)
    database_command_info(command_info)


def raise_parse_exception(m):
    raise ParseError(m)


def suppress_exit(*args):
    raise ParseError()


def command_parser(prog, description):    # type: (str, str) -> argparse.ArgumentParser
    parser = argparse.ArgumentParser(prog=prog, description=description, add_help=False, allow_abbrev=False)
    parser.error = raise_parse_exception
    parser.exit = suppress_exit
    return parser


def add_positional(parser, dest, help, value_hint=ValueHint.Other, optional=False):
    # type: (argparse.ArgumentParser, str, str, str, bool) -> argparse.Action
    if optional:
        action = parser.add_argument(dest, nargs='?', type=str, default='', action='store', help=help)
    else:
        action = parser.add_argument(dest, type=str, action='store', help=help)
    action.value_hint = value_hint
    return action


def get_value_hint(action):    # type: (argparse.Action) -> str
    return getattr(action, 'value_hint', ValueHint.Other)


def parse_command_line(line):    # type: (str) -> ParsedCommand
    """Parse a shell line against the command grammar. Does not look at the vault."""
    try:
        tokens = shlex.split(line)
    except ValueError as e:
        raise GrammarError('', str(e))
    if len(tokens) == 0:
        raise GrammarError('', 'Empty command')

    name, args = tokens[0], tokens[1:]
    command = commands.get(name)
    if command is None:
        raise GrammarError(name, f'Invalid command: {name}', name)

    parser = command.get_parser()
    if parser is None:
        if args:
            raise GrammarError(name, f'unrecognized arguments: {" ".join(args)}', args[0])
        return ParsedCommand(name, command, {})

    try:
        opts, extra = parser.parse_known_args(args)
    except ParseError as e:
        raise GrammarError(name, str(e) or 'invalid arguments', name)
    if extra:
        raise GrammarError(name, f'unrecognized arguments: {" ".join(extra)}', extra[0])
    return ParsedCommand(name, command, vars(opts))


def dump_report_data(data, headers, title=None, row_number=False):
    # type: (List[List], List[str], Optional[str], bool) -> None
    if title:
        print(title)
    if row_number:
        headers = ['#'] + list(headers)
        data = [[i + 1] + list(row) for i, row in enumerate(data)]
    print(tabulate(data, headers=headers))


class Command(abc.ABC):
    def execute(self, params, **kwargs):     # type: (Any, Any) -> Any
        raise NotImplementedError()

    def get_parser(self):   # type: () -> Optional[argparse.ArgumentParser]
        return None

    def clean_up(self):
        print('', end='\r', file=sys.stderr, flush=True)


class NodeMixin:
    @staticmethod
    def get_session(params, command):
        if params.session is None:
            raise VaultNotOpenedError(command)
        return params.session

    @staticmethod
    def resolve_node(params, path, command):
        # type: (Any, str, str) -> Union[VaultGroup, VaultEntry]
        session = NodeMixin.get_session(params, command)
        node = session.navigation.resolve(path)
        if node is None:
            raise PathNotFoundError(command, path)
        return node

    @staticmethod
    def resolve_entry(params, path, command):    # type: (Any, str, str) -> VaultEntry
        session = NodeMixin.get_session(params, command)
        node = session.navigation.resolve(path)
        if isinstance(node, VaultEntry):
            return node
        raise WrongKindError(command, path, 'entry')
