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

from .base import register_commands, commands, command_info, parse_command_line

register_commands(commands, command_info)

__all__ = ['register_commands', 'commands', 'command_info', 'parse_command_line']
