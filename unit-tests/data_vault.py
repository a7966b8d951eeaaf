import uuid
from collections import OrderedDict

from kdbxcommander.params import ShellParams
from kdbxcommander.vault import VaultDatabase, VaultGroup, VaultEntry, PlainText, Secret, Binary

# RFC 6238 SHA1 test key
TOTP_URL = 'otpauth://totp/kdbx:alice?secret=GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ&digits=8&issuer=kdbx'


def group(name, *children):
    return VaultGroup(uuid.uuid4(), name, children)


def entry(title, **fields):
    values = OrderedDict()
    if title is not None:
        values['Title'] = PlainText(title)
    values.update(fields)
    return VaultEntry(uuid.uuid4(), values)


def get_database():    # type: () -> VaultDatabase
    """
    Root/
        Work/
            Bank/
                Checking
            Bank Card
            VPN
        Dup/
            Inner
        Personal
        MyLogin
        MySite
        Dup
        (no title)
    """
    root = group('Root',
                 group('Work',
                       group('Bank',
                             entry('Checking', UserName=PlainText('bob'), Password=Secret('1234'))),
                       entry('Bank Card', Password=Secret('0000')),
                       entry('VPN', UserName=PlainText('alice'))),
                 group('Dup',
                       entry('Inner')),
                 entry('Personal'),
                 entry('MyLogin',
                       UserName=PlainText('alice'),
                       Password=Secret('hunter2'),
                       URL=PlainText('https://example.com'),
                       Notes=PlainText('some notes'),
                       otp=Secret(TOTP_URL),
                       key=Binary(b'\x00\x01')),
                 entry('MySite', UserName=PlainText('carol'), URL=PlainText('https://example.org')),
                 entry('Dup'),
                 entry(None, UserName=PlainText('nobody')))
    return VaultDatabase(root, 'test.kdbx')


def get_scenario_database():    # type: () -> VaultDatabase
    root = group('Root', group('Work'), entry('Personal'))
    return VaultDatabase(root, 'scenario.kdbx')


def get_params(database=None):    # type: (VaultDatabase) -> ShellParams
    params = ShellParams()
    params.set_vault(database or get_database())
    return params


def find_group(database, *names):    # type: (VaultDatabase, str) -> VaultGroup
    node = database.root
    for name in names:
        node = next(x for x in node.subgroups if x.name == name)
    return node
