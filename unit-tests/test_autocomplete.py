#!/usr/bin/env python3

"""Tests for kdbx interactive shell autocompletion."""

from unittest import TestCase

import pytest
from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError

import kdbxcommander.autocomplete as autocomplete
from kdbxcommander.commands import commands
from kdbxcommander.params import ShellParams
from kdbxcommander.subgroup import NavigationState

from data_vault import get_params, get_database

ALL_COMMANDS = ['cd', 'close', 'cp', 'cu', 'cw', 'cx', 'ls', 'open', 'show']
ROOT_NAMES = ['Dup', 'MyLogin', 'MySite', 'Personal', 'Work']


@pytest.mark.parametrize('text,expected', [
    ('', ([], True)),
    ('ls', ([(0, 'ls')], False)),
    ('  ls ', ([(2, 'ls')], True)),
    ('show My', ([(0, 'show'), (5, 'My')], False)),
    ('show "My L', ([(0, 'show'), (5, 'My L')], False)),
    ("show 'a b' c", ([(0, 'show'), (5, 'a b'), (11, 'c')], False)),
    ('show a\\ b', ([(0, 'show'), (5, 'a b')], False)),
    ('show a\\ ', ([(0, 'show'), (5, 'a ')], False)),
    ('show ""', ([(0, 'show'), (5, '')], False)),
])
def test_tokenize_line(text, expected):
    tokens, ends_with_space = autocomplete.tokenize_line(text)
    assert ([(x.start, x.value) for x in tokens], ends_with_space) == expected


def test_tokenize_dangling_escape():
    assert autocomplete.tokenize_line('show a\\') is None


@pytest.mark.parametrize('prefix,expected', [
    ('', ['a', 'ab', 'abc', 'b']),
    ('a', ['a', 'ab', 'abc']),
    ('ab', ['ab', 'abc']),
    ('abcd', []),
    ('c', []),
])
def test_prefix_search(prefix, expected):
    assert autocomplete.prefix_search(['a', 'ab', 'abc', 'b'], prefix) == expected


class TestCompletionEngine(TestCase):
    def setUp(self):
        self.params = get_params()
        self.completer = autocomplete.CommandCompleter(self.params)

    def complete(self, line, pos=None):
        return self.completer.complete(line, len(line) if pos is None else pos)

    def test_command_prefix(self):
        self.assertEqual(self.complete('sho'), (0, ['show']))
        self.assertEqual(self.complete('c'), (0, ['cd', 'close', 'cp', 'cu', 'cw', 'cx']))
        self.assertEqual(self.complete('  cl'), (2, ['close']))
        self.assertEqual(self.complete('zz'), (0, []))

    def test_position_zero(self):
        self.assertEqual(self.complete('', 0), (0, ALL_COMMANDS))
        self.assertEqual(self.complete('show My', 0), (0, ALL_COMMANDS))

    def test_cursor_not_at_end(self):
        self.assertEqual(self.complete('show My', 3), (0, []))
        self.assertEqual(self.complete('show My', 6), (0, []))

    def test_whitespace_only(self):
        self.assertEqual(self.complete('   '), (0, []))

    def test_entry_names(self):
        self.assertEqual(self.complete('show My'), (5, ['MyLogin', 'MySite']))
        self.assertEqual(self.complete('show '), (5, ROOT_NAMES))
        self.assertEqual(self.complete('show -s My'), (8, ['MyLogin', 'MySite']))

    def test_names_are_scoped_to_current_group(self):
        self.assertTrue(self.params.session.navigation.change_current_group('Work'))
        self.assertEqual(self.complete('show '), (5, ['Bank', 'Bank Card', 'VPN']))
        self.assertEqual(self.complete('show My'), (5, []))
        self.assertTrue(self.params.session.navigation.change_current_group('..'))
        self.assertEqual(self.complete('show My'), (5, ['MyLogin', 'MySite']))

    def test_nested_path(self):
        self.assertEqual(self.complete('show Work/B'), (5, ['Work/Bank', 'Work/Bank Card']))
        self.assertEqual(self.complete('cd Work/Bank/'), (3, ['Work/Bank/Checking']))
        self.assertEqual(self.complete('cd /W'), (3, ['/Work']))
        self.assertEqual(self.complete('show Nope/'), (5, []))
        self.assertEqual(self.complete('show MyLogin/'), (5, []))

    def test_quoted_partial(self):
        self.assertEqual(self.complete('show "Work/Bank C'), (5, ['Work/Bank Card']))

    def test_positional_without_path_hint(self):
        self.assertEqual(self.complete('open '), (5, []))
        self.assertEqual(self.complete('cx '), (3, []))
        self.assertEqual(self.complete('bogus '), (6, []))

    def test_short_flags(self):
        self.assertEqual(self.complete('show -'), (6, ['s', '-show-hidden', '-totp']))
        self.assertEqual(self.complete('show -x'), (7, []))
        self.assertEqual(self.complete('ls -'), (4, []))
        self.assertEqual(self.complete('open -'), (6, ['k', '-keyfile']))

    def test_long_flags(self):
        self.assertEqual(self.complete('show --'), (7, ['show-hidden', 'totp']))
        self.assertEqual(self.complete('show --t'), (8, ['otp']))
        self.assertEqual(self.complete('show --show'), (11, ['-hidden']))
        self.assertEqual(self.complete('show --x'), (8, []))

    def test_used_flags_are_excluded(self):
        self.assertEqual(self.complete('show -s --'), (10, ['totp']))
        self.assertEqual(self.complete('show --show-hidden -'), (20, ['-totp']))
        self.assertEqual(self.complete('show --totp -s --'), (17, []))

    def test_no_vault(self):
        params = ShellParams()
        completer = autocomplete.CommandCompleter(params)
        self.assertEqual(completer.complete('sho', 3), (0, ['show']))
        self.assertEqual(completer.complete('show ', 5), (5, []))
        self.assertEqual(completer.complete('show Work/', 10), (5, []))

    def test_missing_index_entry(self):
        index = autocomplete.CompletionIndex(commands)
        engine = autocomplete.CompletionEngine(index, NavigationState(get_database()))
        self.assertEqual(engine.complete('show ', 5), (5, []))
        self.assertEqual(engine.complete('show Work/', 10), (5, []))

    def test_index_follows_vault(self):
        self.assertIn(self.params.session.database.root.uid, self.params.completion_index.group_names)
        self.params.set_vault(None)
        self.assertEqual(self.params.completion_index.group_names, {})
        self.assertIsNone(self.params.completion_index.root_uid)
        self.assertEqual(self.complete('show My'), (5, []))


class TestCommandCompleter(TestCase):
    def setUp(self):
        self.completer = autocomplete.CommandCompleter(get_params())

    def get_completions(self, text):
        return list(self.completer.get_completions(Document(text), None))

    def test_replaces_partial_token(self):
        completions = self.get_completions('sho')
        self.assertEqual([x.text for x in completions], ['show'])
        self.assertEqual(completions[0].start_position, -3)

    def test_quotes_names(self):
        completions = self.get_completions('show "Work/Bank C')
        self.assertEqual(len(completions), 1)
        self.assertEqual(completions[0].text, "'Work/Bank Card'")
        self.assertEqual(completions[0].start_position, -12)
        self.assertEqual(completions[0].display_text, 'Work/Bank Card')

    def test_flag_suffix(self):
        completions = self.get_completions('show --t')
        self.assertEqual([x.text for x in completions], ['otp'])
        self.assertEqual(completions[0].start_position, 0)
        self.assertEqual(completions[0].display_text, '--totp')

    def test_quotes_names_after_space(self):
        self.completer.params.session.navigation.change_current_group('Work')
        completions = self.get_completions('show ')
        self.assertEqual([x.text for x in completions], ['Bank', "'Bank Card'", 'VPN'])
        self.assertTrue(all(x.start_position == 0 for x in completions))
        self.assertEqual(completions[1].display_text, 'Bank Card')
        self.assertIsNone(autocomplete.CommandValidator().check('show ' + completions[1].text))

    def test_completion_kind(self):
        engine = self.completer.create_engine()
        engine.complete('sho', 3)
        self.assertEqual(engine.kind, autocomplete.CompletionKind.Command)
        engine.complete('show --t', 8)
        self.assertEqual(engine.kind, autocomplete.CompletionKind.Flag)
        engine.complete('show My', 7)
        self.assertEqual(engine.kind, autocomplete.CompletionKind.Path)
        engine.complete('show My', 2)
        self.assertEqual(engine.kind, autocomplete.CompletionKind.Nothing)

    def test_broken_state_yields_nothing(self):
        self.completer.params.session.navigation._dir_stack = ['missing']
        self.assertEqual(self.get_completions('show Work/'), [])


class TestCommandValidator(TestCase):
    def setUp(self):
        self.validator = autocomplete.CommandValidator(('q', 'quit', 'h', 'history', 'debug'))

    def test_valid_lines(self):
        for line in ('', '   ', 'q', 'History', 'ls', 'ls Work', 'show -s MyLogin', 'show --totp x', 'cx',
                     'open a.kdbx secret', 'cd "Nope Nope"'):
            self.assertIsNone(self.validator.check(line), line)

    def test_invalid_lines(self):
        self.assertEqual(self.validator.check('bogus'), 'bogus: Invalid command: bogus')
        self.assertIn('required', self.validator.check('show'))
        self.assertIn('unrecognized arguments: b', self.validator.check('ls a b'))
        self.assertIsNotNone(self.validator.check('show -x MyLogin'))
        self.assertIsNotNone(self.validator.check('show "MyLogin'))

    def test_validate(self):
        self.validator.validate(Document('ls'))
        with self.assertRaises(ValidationError) as context:
            self.validator.validate(Document('open a.kdbx'))
        self.assertEqual(context.exception.cursor_position, len('open a.kdbx'))
