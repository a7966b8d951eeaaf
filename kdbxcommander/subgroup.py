#  _  __
# | |/ /___ ___ _ __  ___ _ _ ®
# | ' </ -_) -_) '_ \/ -_) '_|
# |_|\_\___\___| .__/\___|_|
#              |_|
#
# Keeper Commander
# Contact: ops@keepersecurity.com
#
import logging
from typing import Optional, Tuple, List, Union

from .error import InvariantError
from .vault import VaultDatabase, VaultGroup, VaultEntry

PathDelimiter = '/'
ParentComponent = '..'
CurrentComponents = ('', '.')


def is_abs_path(path_string):
    """Return True iff path_string is an absolute path."""
    return path_string.startswith(PathDelimiter)


def path_split(path_string):    # type: (str) -> Tuple[bool, List[str]]
    if is_abs_path(path_string):
        return True, path_string[1:].split(PathDelimiter)
    return False, path_string.split(PathDelimiter)


def find_child(group, name):
    # type: (VaultGroup, str) -> Union[VaultGroup, VaultEntry, None]
    """First direct child whose group name or entry title equals name."""
    for node in group.children:
        if isinstance(node, VaultGroup):
            if node.name == name:
                return node
        elif isinstance(node, VaultEntry):
            if node.title is not None and node.title == name:
                return node
    return None


def try_resolve_path(group, path):
    # type: (VaultGroup, Optional[str]) -> Union[VaultGroup, VaultEntry, None]
    """
    Resolve a relative path against group.

    '', '.' and './' resolve to group itself. Every component but the last must be a group;
    the last one may be a group or an entry. Returns None if any component cannot be found.
    """
    if not isinstance(path, str):
        path = ''

    node = group    # type: Union[VaultGroup, VaultEntry]
    for component in path.split(PathDelimiter):
        if component in CurrentComponents:
            continue
        if not isinstance(node, VaultGroup):
            return None
        node = find_child(node, component)
        if node is None:
            return None
    return node


class NavigationState:
    """
    Current location within an open database.

    The location is kept as a directory stack of group UIDs ordered root to current;
    every UID is a direct child group of the one before it.
    """

    def __init__(self, database):    # type: (VaultDatabase) -> None
        self.database = database
        self._dir_stack = []    # type: List

    @property
    def dir_stack(self):
        return tuple(self._dir_stack)

    @property
    def current_uid(self):
        return self._dir_stack[-1] if self._dir_stack else self.database.root.uid

    def _follow(self, stack):    # type: (List) -> Optional[VaultGroup]
        group = self.database.root
        for uid in stack:
            group = next((x for x in group.subgroups if x.uid == uid), None)
            if group is None:
                return None
        return group

    def _broken_stack(self):
        return InvariantError(f'Directory stack {self._dir_stack} does not resolve in {self.database.filename}')

    def get_current_group(self):    # type: () -> VaultGroup
        group = self._follow(self._dir_stack)
        if group is None:
            raise self._broken_stack()
        return group

    def get_group_path(self):    # type: () -> List[str]
        names = [self.database.root.name or '']
        for depth in range(1, len(self._dir_stack) + 1):
            group = self._follow(self._dir_stack[:depth])
            if group is None:
                raise self._broken_stack()
            names.append(group.name or '')
        return names

    def resolve(self, path):    # type: (Optional[str]) -> Union[VaultGroup, VaultEntry, None]
        """Resolve path against the current group, or against the root when it starts with '/'."""
        if isinstance(path, str) and is_abs_path(path):
            return try_resolve_path(self.database.root, path)
        return try_resolve_path(self.get_current_group(), path)

    def walk(self, path):    # type: (str) -> Optional[List]
        """Apply path to a copy of the directory stack. Returns the new stack or None."""
        is_abs, components = path_split(path or '')
        stack = [] if is_abs else list(self._dir_stack)
        group = self.database.root if is_abs else self.get_current_group()
        for component in components:
            if component in CurrentComponents:
                continue
            if component == ParentComponent:
                if stack:
                    stack.pop()
                    group = self._follow(stack)
                continue
            node = find_child(group, component)
            if isinstance(node, VaultGroup):
                stack.append(node.uid)
                group = node
            else:
                return None
        return stack

    def change_current_group(self, path):    # type: (str) -> bool
        stack = self.walk(path)
        if stack is None:
            logging.debug('Cannot change group to "%s"', path)
            return False
        self._dir_stack = stack
        return True
