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

import logging
import os

from .base import Command, ValueHint, command_parser, add_positional
from .. import vault
from ..error import CommandError


def register_commands(commands):
    commands['open'] = DatabaseOpenCommand()
    commands['close'] = DatabaseCloseCommand()


def register_command_info(command_info):
    for p in [open_parser, close_parser]:
        command_info[p.prog] = p.description


open_parser = command_parser('open', 'Open a KeePass database.')
open_parser.add_argument('-k', '--keyfile', dest='keyfile', action='store', help='key file for the database')
add_positional(open_parser, 'path', 'path to KDBX file', value_hint=ValueHint.Other)
add_positional(open_parser, 'password', 'database password', value_hint=ValueHint.Other)

close_parser = command_parser('close', 'Close the opened database.')


class DatabaseOpenCommand(Command):
    def get_parser(self):
        return open_parser

    def execute(self, params, **kwargs):
        path = kwargs.get('path') or ''
        if params.session is not None:
            raise CommandError('open', 'Database already opened')
        if not path:
            raise CommandError('open', 'Database path is required')

        filename = os.path.expanduser(path)
        keyfile = kwargs.get('keyfile')
        if keyfile:
            keyfile = os.path.expanduser(keyfile)
        database = vault.load_database(filename, kwargs.get('password'), keyfile=keyfile)
        params.set_vault(database)
        logging.debug('Opened %s', os.path.abspath(filename))
        print(f'{path} successfully opened')


class DatabaseCloseCommand(Command):
    def get_parser(self):
        return close_parser

    def execute(self, params, **kwargs):
        if params.session is None:
            raise CommandError('close', 'No database opened')
        print('Closing database')
        params.set_vault(None)
