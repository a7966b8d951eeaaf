#  _  __
# | |/ /___ ___ _ __  ___ _ _ ®
# | ' </ -_) -_) '_ \/ -_) '_|
# |_|\_\___\___| .__/\___|_|
#              |_|
#
# Keeper Commander
# Contact: ops@keepersecurity.com
#

import base64
import os
import sys

CLIPBOARD_OSC52 = 'osc52'
CLIPBOARD_SYSTEM = 'system'
CLIPBOARD_MODES = (CLIPBOARD_OSC52, CLIPBOARD_SYSTEM)


def osc52_sequence(data, tmux=None):    # type: (bytes, bool) -> str
    """OSC 52 escape sequence that asks the terminal emulator to set the system clipboard."""
    if tmux is None:
        tmux = bool(os.environ.get('TMUX'))
    b64 = base64.b64encode(data).decode('ascii')
    sequence = f'\x1b]52;c;{b64}\x07'
    if tmux:
        sequence = f'\x1bPtmux;\x1b{sequence}\x1b\\'
    return sequence


def copy_to_clipboard(data, mode=CLIPBOARD_OSC52):    # type: (bytes, str) -> None
    if mode == CLIPBOARD_SYSTEM:
        import pyperclip
        pyperclip.copy(data.decode('utf-8', errors='replace'))
    else:
        sys.stdout.write(osc52_sequence(data))
        sys.stdout.flush()


def clear_clipboard(mode=CLIPBOARD_OSC52):
    copy_to_clipboard(b'', mode)
