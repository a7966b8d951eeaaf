#  _  __
# | |/ /___ ___ _ __  ___ _ _ ®
# | ' </ -_) -_) '_ \/ -_) '_|
# |_|\_\___\___| .__/\___|_|
#              |_|
#
# Keeper Commander
# Contact: ops@keepersecurity.com
#

class Error(Exception):
    """Base class for exceptions in this module."""
    def __init__(self, message):
        self.message = message

    def __str__(self):
        return self.message


class CommandError(Error):
    def __init__(self, command, message):
        super().__init__(message)
        self.command = command

    def __str__(self):
        if self.command:
            return f'{self.command}: {self.message}'
        else:
            return super().__str__()


class GrammarError(Error):
    """Malformed command line. Carries the offending token when one is known."""

    def __init__(self, command, message, token=None):
        super().__init__(message)
        self.command = command
        self.token = token

    def __str__(self):
        if self.command:
            return f'{self.command}: {self.message}'
        return self.message


class VaultNotOpenedError(CommandError):
    def __init__(self, command):
        super().__init__(command, 'Database not opened')


class PathNotFoundError(CommandError):
    def __init__(self, command, path):
        super().__init__(command, f'{path} does not exist')
        self.path = path


class WrongKindError(CommandError):
    def __init__(self, command, path, expected='group'):
        article = 'an' if expected[:1] in 'aeiou' else 'a'
        super().__init__(command, f'{path} is not {article} {expected} or doesn\'t exist')
        self.path = path
        self.expected = expected


class InvariantError(Exception):
    """Directory stack no longer matches the open vault. Not recoverable."""
