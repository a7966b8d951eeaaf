#  _  __
# | |/ /___ ___ _ __  ___ _ _ ®
# | ' </ -_) -_) '_ \/ -_) '_|
# |_|\_\___\___| .__/\___|_|
#              |_|
#
# Keeper Commander
# Contact: ops@keepersecurity.com
#

import collections
import logging
from typing import Optional, List, Iterable, Union

from pykeepass import PyKeePass
from pykeepass.exceptions import CredentialsError, HeaderChecksumError, PayloadChecksumError

from .error import CommandError

TITLE_FIELD = 'Title'
USERNAME_FIELD = 'UserName'
PASSWORD_FIELD = 'Password'
URL_FIELD = 'URL'
NOTES_FIELD = 'Notes'
OTP_FIELD = 'otp'
CANONICAL_FIELDS = (TITLE_FIELD, USERNAME_FIELD, PASSWORD_FIELD, URL_FIELD)


class FieldValue:
    def __init__(self, value):
        self.value = value

    def to_bytes(self):    # type: () -> bytes
        if isinstance(self.value, bytes):
            return self.value
        return (self.value or '').encode('utf-8')

    def __eq__(self, other):
        return type(self) is type(other) and self.value == other.value

    def __repr__(self):
        return f'{type(self).__name__}({self.value!r})'


class PlainText(FieldValue):
    pass


class Secret(FieldValue):
    def __repr__(self):
        return 'Secret(***)'


class Binary(FieldValue):
    pass


class VaultNode:
    def __init__(self, uid, name):
        self.uid = uid
        self.name = name    # type: Optional[str]


class VaultGroup(VaultNode):
    def __init__(self, uid, name, children=None):
        super().__init__(uid, name)
        self.children = list(children or [])    # type: List[Union[VaultGroup, VaultEntry]]

    @property
    def subgroups(self):    # type: () -> Iterable[VaultGroup]
        return (x for x in self.children if isinstance(x, VaultGroup))

    @property
    def entries(self):    # type: () -> Iterable[VaultEntry]
        return (x for x in self.children if isinstance(x, VaultEntry))

    def __repr__(self):
        return f'VaultGroup(uid={self.uid}, name={self.name}, children={len(self.children)})'


class VaultEntry(VaultNode):
    def __init__(self, uid, fields=None):
        self.fields = collections.OrderedDict(fields or {})    # type: collections.OrderedDict[str, FieldValue]
        title = self.fields.get(TITLE_FIELD)
        super().__init__(uid, title.value if isinstance(title, (PlainText, Secret)) else None)

    @property
    def title(self):
        return self.name

    def get_field(self, name):    # type: (str) -> Optional[FieldValue]
        return self.fields.get(name)

    def __repr__(self):
        return f'VaultEntry(uid={self.uid}, title={self.title}, fields={list(self.fields)})'


class VaultDatabase:
    """Read-only tree of an opened store."""

    def __init__(self, root, filename=''):
        self.root = root    # type: VaultGroup
        self.filename = filename

    def iter_groups(self):    # type: () -> Iterable[VaultGroup]
        groups = [self.root]
        pos = 0
        while pos < len(groups):
            group = groups[pos]
            pos += 1
            groups.extend(group.subgroups)
            yield group


def convert_entry(entry):    # type: (...) -> VaultEntry
    fields = collections.OrderedDict()
    if entry.title is not None:
        fields[TITLE_FIELD] = PlainText(entry.title)
    if entry.username is not None:
        fields[USERNAME_FIELD] = PlainText(entry.username)
    if entry.password is not None:
        fields[PASSWORD_FIELD] = Secret(entry.password)
    if entry.url is not None:
        fields[URL_FIELD] = PlainText(entry.url)
    if entry.notes:
        fields[NOTES_FIELD] = PlainText(entry.notes)
    if entry.otp:
        fields[OTP_FIELD] = Secret(entry.otp)
    for key, value in entry.custom_properties.items():
        if entry.is_custom_property_protected(key):
            fields[key] = Secret(value or '')
        else:
            fields[key] = PlainText(value or '')
    for attachment in entry.attachments or []:
        try:
            fields[attachment.filename] = Binary(attachment.binary)
        except Exception as e:
            logging.debug('Attachment "%s" cannot be loaded: %s', attachment.filename, e)
    return VaultEntry(entry.uuid, fields)


def convert_group(kp_group):    # type: (...) -> VaultGroup
    root = VaultGroup(kp_group.uuid, kp_group.name)
    queue = [(kp_group, root)]
    pos = 0
    while pos < len(queue):
        source, target = queue[pos]
        pos += 1
        for sub in source.subgroups:
            group = VaultGroup(sub.uuid, sub.name)
            target.children.append(group)
            queue.append((sub, group))
        for entry in source.entries:
            target.children.append(convert_entry(entry))
    return root


def load_database(filename, password, keyfile=None):    # type: (str, Optional[str], Optional[str]) -> VaultDatabase
    try:
        kp = PyKeePass(filename, password=password, keyfile=keyfile)
    except CredentialsError:
        raise CommandError('open', f'{filename}: invalid password or key file')
    except (HeaderChecksumError, PayloadChecksumError):
        raise CommandError('open', f'{filename}: file is corrupted or not a KDBX database')
    except OSError as e:
        raise CommandError('open', f'{filename}: {e.strerror or e}')

    logging.debug('Database %s loaded, version %s', filename, kp.version)
    return VaultDatabase(convert_group(kp.root_group), filename)
