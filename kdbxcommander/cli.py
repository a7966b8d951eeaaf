#  _  __
# | |/ /___ ___ _ __  ___ _ _ ®
# | ' </ -_) -_) '_ \/ -_) '_|
# |_|\_\___\___| .__/\___|_|
#              |_|
#
# Keeper Commander
# Copyright 2021 Keeper Security Inc.
# Contact: ops@keepersecurity.com
#

import logging
import os
from typing import Union

from prompt_toolkit import PromptSession
from prompt_toolkit.enums import EditingMode
from prompt_toolkit.shortcuts import CompleteStyle

from . import display
from .autocomplete import CommandCompleter, CommandValidator
from .commands import commands, command_info, parse_command_line
from .commands.base import Command
from .error import CommandError, Error, GrammarError, InvariantError
from .params import ShellParams

current_command = None  # type: Union[None, Command]
stack = []

QUIT_COMMANDS = ('q', 'quit')
SHELL_COMMANDS = QUIT_COMMANDS + ('h', 'history', 'c', 'clear', 'debug', 'help')


class DebugManager:
    """Console debug toggle."""

    def __init__(self):
        self.logger = logging.getLogger()

    def is_console_debug_on(self):
        return self.logger.level == logging.DEBUG

    def set_console_debug(self, enabled, batch_mode):
        level = logging.DEBUG if enabled else (logging.WARNING if batch_mode else logging.INFO)
        self.logger.setLevel(level)
        for h in self.logger.handlers:
            if isinstance(h, logging.StreamHandler):
                h.setLevel(level)

    def toggle_console_debug(self, batch_mode):
        new_state = not self.is_console_debug_on()
        self.set_console_debug(new_state, batch_mode)
        logging.info(f'Debug {"ON" if new_state else "OFF"}')
        return new_state


debug_manager = DebugManager()


def do_command(params, command_line):    # type: (ShellParams, str) -> None
    command_line = command_line.strip()
    if not command_line:
        return

    words = command_line.split()
    builtin = words[0].lower()

    if builtin in ('h', 'history'):
        display.formatted_history(stack)
        return

    if len(stack) == 0 or stack[0] != command_line:
        stack.insert(0, command_line)

    if builtin in ('c', 'clear'):
        print(chr(27) + "[2J")
    elif builtin == 'debug':
        params.debug = debug_manager.toggle_console_debug(params.batch_mode)
    elif builtin == 'help':
        command = commands.get(words[1]) if len(words) > 1 else None
        parser = command.get_parser() if command else None
        if parser:
            parser.print_help()
        else:
            display.display_command_help(command_info)
    else:
        parsed = parse_command_line(command_line)
        global current_command
        current_command = parsed.command
        return parsed.command.execute(params, **parsed.options)


def execute_line(params, command_line):    # type: (ShellParams, str) -> bool
    """Run one line and report its error. Returns False if the command failed."""
    global current_command
    try:
        result = do_command(params, command_line)
        if result:
            print(result)
        return True
    except GrammarError as e:
        logging.warning('%s', e)
    except CommandError as e:
        if e.command:
            logging.warning('%s: %s', e.command, e.message)
        else:
            logging.warning('%s', e.message)
    except Error as e:
        logging.error('%s', e.message)
    except InvariantError as e:
        logging.critical('Navigation state is corrupt: %s', e)
        raise
    except Exception as e:
        logging.debug(e, exc_info=True)
        logging.error('An unexpected error occurred: %s. Type "debug" to toggle verbose error output', e)
    finally:
        try:
            if current_command:
                current_command.clean_up()
        finally:
            current_command = None
    return False


def read_command(prompt_session, params):    # type: (PromptSession, ShellParams) -> str
    prompt = get_prompt(params)
    if prompt_session is not None:
        return prompt_session.prompt(prompt)
    return input(prompt)


def loop(params):  # type: (ShellParams) -> int
    error_no = 0

    logging.getLogger().setLevel(logging.DEBUG if params.debug else logging.WARNING if params.batch_mode else logging.INFO)
    prompt_session = None
    if not params.batch_mode:
        if os.isatty(0) and os.isatty(1):
            prompt_session = PromptSession(multiline=False,
                                           editing_mode=EditingMode.VI,
                                           completer=CommandCompleter(params),
                                           validator=CommandValidator(SHELL_COMMANDS),
                                           complete_style=CompleteStyle.MULTI_COLUMN,
                                           complete_while_typing=False,
                                           validate_while_typing=False)
        else:
            params.batch_mode = True

    if not params.batch_mode:
        display.welcome()
        if params.session is None:
            logging.info('To open a database type: open <path> <password>')

    while True:
        command = ''
        if len(params.commands) > 0:
            command = params.commands[0].strip()
            params.commands = params.commands[1:]

        try:
            if not command:
                command = read_command(prompt_session, params)
        except EOFError:
            break
        except KeyboardInterrupt:
            continue
        except InvariantError as e:
            logging.critical('Navigation state is corrupt: %s', e)
            raise

        command = command.strip()
        if command.lower() in QUIT_COMMANDS:
            break

        if params.batch_mode and command:
            logging.info('> %s', command)
        error_no = 0 if execute_line(params, command) else 1

        if params.batch_mode and error_no != 0:
            break

    if not params.batch_mode:
        logging.info('\nGoodbye.\n')

    return error_no


def get_prompt(params):    # type: (ShellParams) -> str
    if params.batch_mode:
        return ''

    if params.session is None:
        return 'kdbx> '

    prompt = params.current_path or '/'
    if len(prompt) > 40:
        prompt = '...' + prompt[-37:]

    return prompt + '> '
