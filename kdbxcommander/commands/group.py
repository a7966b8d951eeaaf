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

from .base import Command, NodeMixin, ValueHint, command_parser, add_positional
from ..error import WrongKindError
from ..vault import VaultGroup, VaultEntry


def register_commands(commands):
    commands['ls'] = GroupListCommand()
    commands['cd'] = GroupCdCommand()


def register_command_info(command_info):
    for p in [ls_parser, cd_parser]:
        command_info[p.prog] = p.description


ls_parser = command_parser('ls', 'List group contents.')
add_positional(ls_parser, 'path', 'group or entry path', value_hint=ValueHint.Path, optional=True)


cd_parser = command_parser('cd', 'Change current group.')
add_positional(cd_parser, 'path', 'group path', value_hint=ValueHint.Path, optional=True)


def node_display_name(node):
    if isinstance(node, VaultGroup):
        return f'{node.name}/'
    elif isinstance(node, VaultEntry):
        return node.title if node.title is not None else '(no title)'
    return ''


class GroupListCommand(Command, NodeMixin):
    def get_parser(self):
        return ls_parser

    def execute(self, params, **kwargs):
        path = kwargs.get('path') or ''
        node = self.resolve_node(params, path, 'ls')
        if isinstance(node, VaultEntry):
            print(node_display_name(node))
        elif isinstance(node, VaultGroup):
            for child in node.children:
                print(node_display_name(child))


class GroupCdCommand(Command, NodeMixin):
    def get_parser(self):
        return cd_parser

    def execute(self, params, **kwargs):
        path = kwargs.get('path') or ''
        session = self.get_session(params, 'cd')
        if not session.navigation.change_current_group(path):
            raise WrongKindError('cd', path, 'group')
