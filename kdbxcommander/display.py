#  _  __
# | |/ /___ ___ _ __  ___ _ _ ®
# | ' </ -_) -_) '_ \/ -_) '_|
# |_|\_\___\___| .__/\___|_|
#              |_|
#
# Keeper Commander
# Contact: ops@keepersecurity.com
#
import shutil
from typing import List

from colorama import init, Fore, Back, Style

from . import __version__
from .commands.base import dump_report_data

init()


class bcolors:
    ENDC = '\033[0m'
    BOLD = '\033[1m'
    UNDERLINE = '\033[4m'


SHELL_COMMAND_HELP = [
    ('clear (c)', 'Clear the screen.'),
    ('history (h)', 'Show command history.'),
    ('debug', 'Toggle debug output.'),
    ('help', 'Show this help.'),
    ('quit (q)', 'Quit.'),
]


def welcome():
    lines = []    # type: List[str]

    lines.append(r'  _  __    _ _                                                      _')
    lines.append(r' | |/ /__| | |__ __ __  __ ___ _ __  _ __  __ _ _ _  __| |___ _ _')
    lines.append(r" | ' </ _` | '_ \\ \ / / _/ _ \ '  \| '  \/ _` | ' \/ _` / -_) '_|")
    lines.append(r' |_|\_\__,_|_.__/_\_\ \__\___/_|_|_|_|_|_\__,_|_||_\__,_\___|_|')
    lines.append('')

    try:
        width = shutil.get_terminal_size(fallback=(160, 50)).columns
    except OSError:
        width = 160
    print(Style.RESET_ALL)
    print(Back.BLACK + Style.BRIGHT)
    for line in lines:
        if len(line) > width:
            line = line[:width]
        print('\033[2K' + Fore.LIGHTYELLOW_EX + line)

    print('\033[2K' + Fore.LIGHTBLACK_EX + f'{("v" + __version__):>66}\n' + Style.RESET_ALL)


def formatted_history(history):
    """ Show the history of commands"""

    if not history:
        return

    print('')
    print('Command history:')
    print('----------------')

    for h in history:
        print(h)

    print('')


def display_command_help(command_info, show_shell=True):
    rows = [[f'{bcolors.BOLD}{cmd}{bcolors.ENDC}', description] for cmd, description in command_info.items()]
    dump_report_data(rows, ['Command', 'Description'], title='Commands:')
    if show_shell:
        print('')
        shell_rows = [[f'{bcolors.BOLD}{cmd}{bcolors.ENDC}', description] for cmd, description in SHELL_COMMAND_HELP]
        dump_report_data(shell_rows, ['Command', 'Description'], title='Shell Commands:')

    print(f'\n{bcolors.UNDERLINE}Usage:{bcolors.ENDC}')
    print(f"Type '{bcolors.BOLD}help <command>{bcolors.ENDC}' to display help on a specific command")
