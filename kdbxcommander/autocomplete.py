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

import bisect
import logging
import shlex
from typing import Dict, List, Optional, Tuple, NamedTuple, Iterable, Set

from prompt_toolkit.completion import Completion, Completer
from prompt_toolkit.validation import Validator, ValidationError

from .commands.base import ValueHint, get_value_hint, parse_command_line
from .error import GrammarError
from .subgroup import NavigationState, PathDelimiter
from .vault import VaultDatabase

QUOTES = ('\'', '"')


class CompletionKind:
    Nothing = 'nothing'
    Command = 'command'
    Flag = 'flag'
    Path = 'path'


class Token(NamedTuple):
    start: int
    value: str


def prefix_search(names, prefix):    # type: (List[str], str) -> List[str]
    """names must be sorted"""
    result = []
    pos = bisect.bisect_left(names, prefix)
    while pos < len(names) and names[pos].startswith(prefix):
        result.append(names[pos])
        pos += 1
    return result


def tokenize_line(text):    # type: (str) -> Optional[Tuple[List[Token], bool]]
    """
    Split text into shell words, keeping the offset where each word starts.

    An unterminated quote in the last word is closed. Returns the words and whether the text
    ends outside of a word, or None if the last word ends with a dangling escape.
    """
    tokens = []    # type: List[Token]
    start = None
    quote = None
    escape = False

    def unquote(raw):
        words = shlex.split(raw)
        return words[0] if words else ''

    for i, c in enumerate(text):
        if start is None:
            if c.isspace():
                continue
            start = i
        if escape:
            escape = False
        elif quote:
            if c == quote:
                quote = None
            elif c == '\\' and quote == '"':
                escape = True
        elif c == '\\':
            escape = True
        elif c in QUOTES:
            quote = c
        elif c.isspace():
            tokens.append(Token(start, unquote(text[start:i])))
            start = None

    if start is None:
        return tokens, True
    if escape:
        return None
    tokens.append(Token(start, unquote(text[start:] + (quote or ''))))
    return tokens, False


class CompletionIndex:
    """
    Prefix-searchable names used by tab completion.

    Built from the command grammar and, when a database is open, from the names of the direct
    children of every group. Never updated in place: a new index is built when a database is
    opened or closed.
    """

    def __init__(self, grammar, database=None):    # type: (Dict, Optional[VaultDatabase]) -> None
        self.command_names = sorted(grammar.keys())
        self.flags = {}          # type: Dict[str, Dict[str, object]]
        self.options = {}        # type: Dict[str, List]
        self.positionals = {}    # type: Dict[str, List]
        for name, command in grammar.items():
            parser = command.get_parser()
            actions = list(parser._actions) if parser else []
            self.options[name] = [x for x in actions if x.option_strings]
            self.positionals[name] = [x for x in actions if not x.option_strings]
            flags = {}
            for action in self.options[name]:
                for spelling in action.option_strings:
                    flags[spelling.lstrip('-')] = action
            self.flags[name] = flags

        self.root_uid = None
        self.group_names = {}    # type: Dict[object, List[str]]
        if database is not None:
            self.root_uid = database.root.uid
            for group in database.iter_groups():
                names = {x.name for x in group.children if x.name}
                self.group_names[group.uid] = sorted(names)

    def find_commands(self, prefix):    # type: (str) -> List[str]
        return prefix_search(self.command_names, prefix)

    def find_names(self, group_uid, prefix):    # type: (object, str) -> List[str]
        names = self.group_names.get(group_uid)
        if names is None:
            return []
        return prefix_search(names, prefix)

    def find_flags(self, command, prefix, is_short, used):
        # type: (str, str, bool, Set[int]) -> List[str]
        options = [x for x in self.options.get(command) or [] if id(x) not in used]
        result = []
        if is_short:
            if prefix:
                return result
            for action in options:
                result.extend(x[1:] for x in action.option_strings if not x.startswith('--'))
                result.extend(x[1:] for x in action.option_strings if x.startswith('--'))
        else:
            for action in options:
                result.extend(x[2 + len(prefix):] for x in action.option_strings
                              if x.startswith('--') and x[2:].startswith(prefix))
        return result

    def has_path_positional(self, command):    # type: (str) -> bool
        return any(get_value_hint(x) == ValueHint.Path for x in self.positionals.get(command) or [])


class CompletionEngine:
    def __init__(self, index, navigation=None):    # type: (CompletionIndex, Optional[NavigationState]) -> None
        self.index = index
        self.navigation = navigation
        self.kind = CompletionKind.Nothing

    def current_group_uid(self):
        if self.navigation is not None:
            stack = self.navigation.dir_stack
            if stack:
                return stack[-1]
        return self.index.root_uid

    def find_positional_args(self, command, prefix):    # type: (str, str) -> List[str]
        if not self.index.has_path_positional(command):
            return []
        directory, sep, name_prefix = prefix.rpartition(PathDelimiter)
        if sep:
            if self.navigation is None:
                return []
            stack = self.navigation.walk(directory + sep)
            if stack is None:
                return []
            group_uid = stack[-1] if stack else self.index.root_uid
        else:
            group_uid = self.current_group_uid()
        return [directory + sep + x for x in self.index.find_names(group_uid, name_prefix)]

    def complete(self, line, pos):    # type: (str, int) -> Tuple[int, List[str]]
        """
        Candidates for the token ending at pos and the offset where that token starts.

        Sets self.kind: flag candidates are suffixes inserted at pos, other candidates replace
        the whole token.
        """
        self.kind = CompletionKind.Nothing
        if pos == 0:
            self.kind = CompletionKind.Command
            return 0, list(self.index.command_names)
        if pos != len(line):
            return 0, []

        rs = tokenize_line(line)
        if rs is None:
            return 0, []
        tokens, ends_with_space = rs
        if len(tokens) == 0:
            return 0, []

        command = tokens[0].value
        if len(tokens) == 1 and not ends_with_space:
            self.kind = CompletionKind.Command
            return tokens[0].start, self.index.find_commands(command)

        if ends_with_space:
            self.kind = CompletionKind.Path
            return pos, self.find_positional_args(command, '')

        last = tokens[-1]
        if last.value.startswith('-'):
            self.kind = CompletionKind.Flag
            is_short = not last.value.startswith('--')
            prefix = last.value.lstrip('-')
            flags = self.index.flags.get(command) or {}
            used = {id(flags[x.value.lstrip('-')]) for x in tokens[1:-1]
                    if x.value.startswith('-') and x.value.lstrip('-') in flags}
            return pos, self.index.find_flags(command, prefix, is_short, used)

        self.kind = CompletionKind.Path
        return last.start, self.find_positional_args(command, last.value)


class CommandCompleter(Completer):
    def __init__(self, params):
        Completer.__init__(self)
        self.params = params

    def create_engine(self):    # type: () -> CompletionEngine
        session = self.params.session
        return CompletionEngine(self.params.completion_index, session.navigation if session else None)

    def complete(self, line, pos):    # type: (str, int) -> Tuple[int, List[str]]
        return self.create_engine().complete(line, pos)

    def get_completions(self, document, complete_event):
        try:
            text = document.text
            pos = document.cursor_position
            engine = self.create_engine()
            start, candidates = engine.complete(text, pos)
            if engine.kind == CompletionKind.Flag:
                typed = document.get_word_before_cursor(WORD=True)
                for c in candidates:
                    yield Completion(c, start_position=0, display=typed + c)
            else:
                for c in candidates:
                    yield Completion(shlex.quote(c), start_position=start - pos, display=c)
        except Exception as e:
            logging.debug('Completion exception: %s', e)


class CommandValidator(Validator):
    def __init__(self, builtins=()):    # type: (Iterable[str]) -> None
        self.builtins = set(builtins)

    def check(self, line):    # type: (str) -> Optional[str]
        words = line.split()
        if len(words) == 0 or words[0].lower() in self.builtins:
            return None
        try:
            parse_command_line(line)
        except GrammarError as e:
            return str(e)
        return None

    def validate(self, document):
        message = self.check(document.text)
        if message:
            raise ValidationError(message=message, cursor_position=len(document.text))
