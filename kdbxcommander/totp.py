#  _  __
# | |/ /___ ___ _ __  ___ _ _ ®
# | ' </ -_) -_) '_ \/ -_) '_|
# |_|\_\___\___| .__/\___|_|
#              |_|
#
# Keeper Commander
# Contact: ops@keepersecurity.com
#

import datetime
from typing import Tuple, Optional
from urllib import parse

import pyotp

from .error import Error


def get_totp_code(url, now=None):
    # type: (str, Optional[datetime.datetime]) -> Optional[Tuple[str, int, int]]
    """Current code, seconds until it changes and period for an otpauth:// URI. None for other URLs."""
    if parse.urlparse(url).scheme != 'otpauth':
        return None
    try:
        otp = pyotp.parse_uri(url)
    except ValueError as e:
        raise Error(f'Invalid otpauth URI: {e}')
    if not isinstance(otp, pyotp.TOTP):
        raise Error('Only time-based codes are supported')

    now = now or datetime.datetime.now(datetime.timezone.utc)
    period = otp.interval
    return otp.at(now), period - int(now.timestamp()) % period, period
