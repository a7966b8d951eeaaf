from unittest import TestCase, mock

from data_vault import get_params, get_scenario_database, find_group
from kdbxcommander.commands import group
from kdbxcommander.error import CommandError, VaultNotOpenedError, PathNotFoundError, WrongKindError
from kdbxcommander.params import ShellParams


class TestGroup(TestCase):
    def printed(self, mock_print):
        return [x.args[0] for x in mock_print.call_args_list]

    def test_list(self):
        params = get_params(get_scenario_database())
        cmd = group.GroupListCommand()

        with mock.patch('builtins.print') as mock_print:
            cmd.execute(params)
            self.assertEqual(self.printed(mock_print), ['Work/', 'Personal'])

    def test_list_path(self):
        params = get_params()
        cmd = group.GroupListCommand()

        with mock.patch('builtins.print') as mock_print:
            cmd.execute(params, path='Work')
            self.assertEqual(self.printed(mock_print), ['Bank/', 'Bank Card', 'VPN'])

        with mock.patch('builtins.print') as mock_print:
            cmd.execute(params, path='Work/Bank/Checking')
            self.assertEqual(self.printed(mock_print), ['Checking'])

        with mock.patch('builtins.print') as mock_print:
            cmd.execute(params)
            self.assertEqual(self.printed(mock_print)[-1], '(no title)')

        with self.assertRaises(PathNotFoundError):
            cmd.execute(params, path='Nope')

    def test_list_current_group(self):
        params = get_params()
        params.session.navigation.change_current_group('Work/Bank')
        cmd = group.GroupListCommand()

        with mock.patch('builtins.print') as mock_print:
            cmd.execute(params, path='')
            self.assertEqual(self.printed(mock_print), ['Checking'])

    def test_list_absolute_path(self):
        params = get_params()
        params.session.navigation.change_current_group('Work/Bank')
        cmd = group.GroupListCommand()

        with mock.patch('builtins.print') as mock_print:
            cmd.execute(params, path='/MyLogin')
            self.assertEqual(self.printed(mock_print), ['MyLogin'])

        with mock.patch('builtins.print') as mock_print:
            cmd.execute(params, path='/Work')
            self.assertEqual(self.printed(mock_print), ['Bank/', 'Bank Card', 'VPN'])

        with self.assertRaises(PathNotFoundError):
            cmd.execute(params, path='MyLogin')

    def test_change_directory(self):
        params = get_params()
        cmd = group.GroupCdCommand()
        work = find_group(params.session.database, 'Work')

        before = params.session.navigation.dir_stack
        cmd.execute(params, path='Work')
        self.assertEqual(params.session.navigation.dir_stack, (work.uid,))
        cmd.execute(params, path='..')
        self.assertEqual(params.session.navigation.dir_stack, before)

        cmd.execute(params, path='Work')
        cmd.execute(params, path='')
        self.assertEqual(params.session.navigation.dir_stack, (work.uid,))

    def test_change_directory_invalid(self):
        params = get_params()
        cmd = group.GroupCdCommand()

        with self.assertRaises(WrongKindError) as context:
            cmd.execute(params, path='NoSuchGroup')
        self.assertEqual(str(context.exception), 'cd: NoSuchGroup is not a group or doesn\'t exist')
        self.assertEqual(params.session.navigation.dir_stack, ())

        with self.assertRaises(CommandError):
            cmd.execute(params, path='MyLogin')
        self.assertEqual(params.session.navigation.dir_stack, ())

    def test_not_opened(self):
        params = ShellParams()
        with self.assertRaises(VaultNotOpenedError) as context:
            group.GroupListCommand().execute(params)
        self.assertEqual(context.exception.message, 'Database not opened')
        with self.assertRaises(VaultNotOpenedError):
            group.GroupCdCommand().execute(params, path='Work')
