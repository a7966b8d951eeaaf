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

from .base import Command, NodeMixin, ValueHint, command_parser, add_positional
from .. import clipboard
from ..error import CommandError, Error
from ..totp import get_totp_code
from ..vault import VaultGroup, VaultEntry, PlainText, Secret, Binary, CANONICAL_FIELDS, OTP_FIELD, \
    PASSWORD_FIELD, USERNAME_FIELD, URL_FIELD

FIELD_NAME_WIDTH = 15
SECRET_MASK = '*** SECRET ***'
MISSING_FIELD_TEXT = {
    'Title': '(no title)',
    'UserName': '(no username)',
    'Password': '(no password)',
    'URL': '(no url)',
}


def register_commands(commands):
    commands['show'] = EntryShowCommand()
    commands['cp'] = EntryCopyCommand(cp_parser, PASSWORD_FIELD)
    commands['cu'] = EntryCopyCommand(cu_parser, USERNAME_FIELD)
    commands['cw'] = EntryCopyCommand(cw_parser, URL_FIELD)
    commands['cx'] = ClearClipboardCommand()


def register_command_info(command_info):
    for p in [show_parser, cp_parser, cu_parser, cw_parser, cx_parser]:
        command_info[p.prog] = p.description


show_parser = command_parser('show', 'Show entry fields. Nothing is shown for a group.')
show_parser.add_argument('-s', '--show-hidden', dest='show_hidden', action='store_true', help='show secret values')
show_parser.add_argument('--totp', dest='totp', action='store_true', help='show current TOTP code only')
add_positional(show_parser, 'entry', 'entry path', value_hint=ValueHint.Path)

osc52_note = ' Uses OSC52 unless the clipboard is set to "system". Not all terminals support OSC52.'

cp_parser = command_parser('cp', 'Copy password to clipboard.' + osc52_note)
add_positional(cp_parser, 'entry', 'entry path', value_hint=ValueHint.Path)

cu_parser = command_parser('cu', 'Copy username to clipboard.' + osc52_note)
add_positional(cu_parser, 'entry', 'entry path', value_hint=ValueHint.Path)

cw_parser = command_parser('cw', 'Copy URL to clipboard.' + osc52_note)
add_positional(cw_parser, 'entry', 'entry path', value_hint=ValueHint.Path)

cx_parser = command_parser('cx', 'Clear clipboard.' + osc52_note)


def format_field(name, text):
    return '{0:>{1}s}: {2}'.format(name, FIELD_NAME_WIDTH, text)


def get_field_text(value, show_hidden):
    if isinstance(value, Binary):
        return '(bytes)'
    if isinstance(value, Secret):
        return value.value if show_hidden else SECRET_MASK
    if isinstance(value, PlainText):
        return value.value
    return ''


def get_entry_totp(entry):    # type: (VaultEntry) -> str
    otp = entry.get_field(OTP_FIELD)
    if not isinstance(otp, (PlainText, Secret)) or not otp.value:
        raise CommandError('show', 'Entry does not have totp')
    try:
        result = get_totp_code(otp.value)
    except (Error, ValueError) as e:
        raise CommandError('show', f'Error generating totp: {e}')
    if not result:
        raise CommandError('show', 'Error generating totp: invalid otpauth URI')
    code, _, _ = result
    return code


class EntryShowCommand(Command, NodeMixin):
    def get_parser(self):
        return show_parser

    def execute(self, params, **kwargs):
        path = kwargs.get('entry') or ''
        show_hidden = kwargs.get('show_hidden') is True
        totp = kwargs.get('totp') is True

        node = self.resolve_node(params, path, 'show')
        if isinstance(node, VaultGroup):
            if totp:
                raise CommandError('show', 'Can\'t show totp for group')
            print('')
        elif isinstance(node, VaultEntry):
            if totp:
                print(get_entry_totp(node))
                return

            for name in CANONICAL_FIELDS:
                value = node.get_field(name)
                text = get_field_text(value, show_hidden) if value is not None else MISSING_FIELD_TEXT[name]
                print(format_field(name, text))

            for name, value in node.fields.items():
                if name in CANONICAL_FIELDS:
                    continue
                if name == OTP_FIELD and show_hidden:
                    try:
                        code = get_entry_totp(node)
                    except CommandError as e:
                        code = e.message
                    print(format_field('otp code', code))
                print(format_field(name, get_field_text(value, show_hidden)))


class EntryCopyCommand(Command, NodeMixin):
    def __init__(self, parser, field_name):
        super().__init__()
        self.parser = parser
        self.field_name = field_name

    def get_parser(self):
        return self.parser

    def execute(self, params, **kwargs):
        path = kwargs.get('entry') or ''
        entry = self.resolve_entry(params, path, self.parser.prog)
        value = entry.get_field(self.field_name)
        if value is None:
            logging.warning('%s is not set', self.field_name)
            return
        clipboard.copy_to_clipboard(value.to_bytes(), params.clipboard)
        logging.info('%s copied to clipboard', self.field_name)


class ClearClipboardCommand(Command):
    def get_parser(self):
        return cx_parser

    def execute(self, params, **kwargs):
        clipboard.clear_clipboard(params.clipboard)
        logging.info('Clipboard cleared')
