# -*- coding: utf-8 -*-
#  _  __
# | |/ /___ ___ _ __  ___ _ _ ®
# | ' </ -_) -_) '_ \/ -_) '_|
# |_|\_\___\___| .__/\___|_|
#              |_|
#
# Keeper Commander
# Copyright 2018 Keeper Security Inc.
# Contact: ops@keepersecurity.com
#


import argparse
import getpass
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from . import cli
from .clipboard import CLIPBOARD_MODES
from .commands import commands
from .error import Error
from .params import ShellParams


def get_params_from_config(config_filename=None):    # type: (Optional[str]) -> ShellParams
    if os.getenv("KDBX_COMMANDER_DEBUG"):
        logging.getLogger().setLevel(logging.DEBUG)
        logging.info('Debug ON')

    def get_env_config():
        path = os.getenv('KDBX_COMMANDER_CONFIG_FILE')
        if path:
            logging.debug(f'Setting config file from KDBX_COMMANDER_CONFIG_FILE env variable {path}')
        return path

    config_filename = config_filename or get_env_config()
    if not config_filename:
        config_filename = 'config.json'
        if os.path.isfile(config_filename):
            config_filename = os.path.join(os.getcwd(), config_filename)
        else:
            config_filename = os.path.join(Path.home().joinpath('.kdbx-commander'), config_filename)
    else:
        config_filename = os.path.expanduser(config_filename)

    params = ShellParams(config_filename=config_filename)
    if os.path.exists(config_filename):
        try:
            with open(params.config_filename) as config_file:
                params.config = json.load(config_file)
            if not isinstance(params.config, dict):
                raise ValueError('JSON object expected')
            params.db_file = params.config.get('db_file') or None
            params.keyfile = params.config.get('keyfile') or None
            if params.config.get('clipboard') in CLIPBOARD_MODES:
                params.clipboard = params.config['clipboard']
            if params.config.get('commands'):
                params.commands.extend(params.config['commands'])
            if params.config.get('debug') is True:
                params.debug = True
        except IOError as ioe:
            logging.warning('Error: Unable to open config file %s: %s', params.config_filename, ioe)
        except ValueError as e:
            params.config = {}
            logging.error('Unable to parse JSON configuration file "%s": %s', os.path.abspath(params.config_filename), e)

    return params


def usage(m):
    print(m)
    parser.print_help()
    sys.exit(1)


parser = argparse.ArgumentParser(prog='kdbx-commander', add_help=False, allow_abbrev=False)
parser.add_argument('--db-file', '-f', dest='db_file', action='store', help='KeePass database file to open.')
parser.add_argument('--keyfile', '-k', dest='keyfile', action='store', help='Key file for the database.')
parser.add_argument('--password', '-p', dest='password', action='store', help='Database password.')
parser.add_argument('--version', dest='version', action='store_true', help='Display version')
parser.add_argument('--config', dest='config', action='store', help='Config file to use')
parser.add_argument('--debug', dest='debug', action='store_true', help='Turn on debug mode')
parser.add_argument('--batch-mode', dest='batch_mode', action='store_true', help='Run in batch or basic UI mode.')
parser.add_argument('--clipboard', dest='clipboard', action='store', choices=CLIPBOARD_MODES,
                    help='Clipboard transport: OSC52 escape sequence or system clipboard.')
parser.add_argument('--help', '-h', dest='help', action='store_true', help='Show this help.')
parser.add_argument('file', nargs='?', type=str, action='store', help='KeePass database file to open.')
parser.error = usage


def open_database(params):    # type: (ShellParams) -> bool
    password = params.password
    if password is None:
        password = os.getenv('DB_PASSWORD')
    if password is None and not params.batch_mode:
        password = getpass.getpass(prompt=f'Password for {params.db_file}: ')
    try:
        commands['open'].execute(params, path=params.db_file, password=password, keyfile=params.keyfile)
        return True
    except Error as e:
        logging.error('%s', e)
    return False


def main():
    logging.basicConfig(format='%(message)s')

    opts = parser.parse_args(sys.argv[1:])
    if opts.help:
        usage('')

    if opts.version:
        print(f'KDBX Commander, version {__version__}')
        return

    params = get_params_from_config(opts.config)

    if opts.batch_mode:
        params.batch_mode = True

    if opts.debug:
        params.debug = opts.debug

    logging.getLogger().setLevel(logging.WARNING if params.batch_mode else logging.DEBUG if params.debug else logging.INFO)

    if opts.clipboard:
        params.clipboard = opts.clipboard
    if opts.keyfile:
        params.keyfile = opts.keyfile
    if opts.password:
        params.password = opts.password
    if opts.db_file or opts.file:
        params.db_file = opts.db_file or opts.file

    if params.db_file:
        try:
            if not open_database(params) and params.batch_mode:
                sys.exit(1)
        except (KeyboardInterrupt, EOFError):
            print('')
            sys.exit(1)

    errno = cli.loop(params)
    sys.exit(errno)


if __name__ == '__main__':
    main()
