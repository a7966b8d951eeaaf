#  _  __
# | |/ /___ ___ _ __  ___ _ _ ®
# | ' </ -_) -_) '_ \/ -_) '_|
# |_|\_\___\___| .__/\___|_|
#              |_|
#
# Keeper Commander
# Contact: ops@keepersecurity.com
#

from typing import Optional, List

from .autocomplete import CompletionIndex
from .clipboard import CLIPBOARD_OSC52
from .commands import commands
from .subgroup import NavigationState
from .vault import VaultDatabase


class VaultSession:
    """An open database together with the current location in it."""

    def __init__(self, database):    # type: (VaultDatabase) -> None
        self.database = database
        self.navigation = NavigationState(database)


class ShellParams:
    def __init__(self, config_filename='', config=None, db_file=None, keyfile=None, password=None):
        self.config_filename = config_filename
        self.config = config or {}
        self.db_file = db_file
        self.keyfile = keyfile
        self.password = password
        self.commands = []    # type: List[str]
        self.batch_mode = False
        self.debug = False
        self.clipboard = CLIPBOARD_OSC52
        self.session = None    # type: Optional[VaultSession]
        self.completion_index = CompletionIndex(commands)

    def set_vault(self, database):    # type: (Optional[VaultDatabase]) -> None
        """Replace the open database. The completion index is rebuilt for the new tree."""
        session = VaultSession(database) if database is not None else None
        index = CompletionIndex(commands, database)
        self.session, self.completion_index = session, index

    @property
    def current_path(self):    # type: () -> Optional[str]
        if self.session is None:
            return None
        return '/'.join(self.session.navigation.get_group_path())
