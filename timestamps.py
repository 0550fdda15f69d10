"""
Timestamp resolution: Unix epoch seconds <-> natural date strings.

A path segment is either a base-10 signed integer (epoch seconds) or a date
in the fixed layout ``"December 15, 2015"``. Both resolve to a Timestamp
carrying the epoch value and its UTC rendering.
"""
import re
from collections import namedtuple
from datetime import datetime

import pytz

# Natural rendering, e.g. "2015-12-15 00:00:00 +0000 UTC"; years past 9999 widen
NATURAL_FORMAT = '{:04d}-{:02d}-{:02d} {:02d}:{:02d}:{:02d} +0000 UTC'

SECONDS_PER_DAY = 86400

# Days from 0000-03-01 to 1970-01-01 and the length of a 400 year cycle
DAYS_TO_EPOCH = 719468
DAYS_PER_ERA = 146097

# Full month name, 1-2 digit (optionally space-padded) day, 4-digit year
TIMESTRING_FORMAT = '%B %d, %Y'

INTEGER_PATTERN = re.compile(r'[+-]?[0-9]+')

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

EPOCH = datetime(1970, 1, 1, tzinfo=pytz.utc)

# Seconds from 0001-01-01 to the epoch; instants are counted from year 1 in
# a signed 64-bit integer, so the last representable epoch second is this
# far short of INT64_MAX (292277026596-12-04 15:30:07 UTC).
SECONDS_FROM_YEAR_ONE = 62135596800
MAX_UNIX = INT64_MAX - SECONDS_FROM_YEAR_ONE


class ParseError(ValueError):
    """Base error for input that cannot be resolved to a Timestamp."""

    def __init__(self, message, diagnostic=''):
        super().__init__(message)
        self.diagnostic = diagnostic or message


class InvalidTimestamp(ParseError):
    """Integer input that is well formed but out of range."""


class InvalidFormat(ParseError):
    """Input matching neither the integer grammar nor the date layout."""


class Timestamp(namedtuple('Timestamp', ['unix', 'natural'])):
    """Epoch seconds and their natural rendering; both None on failure."""
    __slots__ = ()

    def __new__(cls, unix=None, natural=None):
        if (unix is None) != (natural is None):
            raise ValueError("unix and natural must both be set or both be None")
        return super().__new__(cls, unix, natural)

    def to_dict(self):
        return {'unix': self.unix, 'natural': self.natural}


def civil_from_days(days):
    """
    Proleptic Gregorian (year, month, day) for a day count relative to 1970-01-01.

    Works on plain integers so years past datetime's 9999 limit still render.
    """
    z = days + DAYS_TO_EPOCH
    era = z // DAYS_PER_ERA
    doe = z - era * DAYS_PER_ERA
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def format_unix(value):
    """Render epoch seconds as 'YYYY-MM-DD HH:MM:SS +0000 UTC'."""
    days, seconds = divmod(value, SECONDS_PER_DAY)
    year, month, day = civil_from_days(days)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    return NATURAL_FORMAT.format(year, month, day, hours, minutes, seconds)


def format_natural(dt):
    """Render an aware datetime as 'YYYY-MM-DD HH:MM:SS +0000 UTC'."""
    dt = dt.astimezone(pytz.utc)
    return format_unix(int((dt - EPOCH).total_seconds()))


def parse_timestamp(value):
    """Convert epoch seconds into a Timestamp."""
    if value < 0:
        raise InvalidTimestamp("Invalid Timestamp: value less than 0")
    if value > MAX_UNIX:
        raise InvalidTimestamp("Invalid Timestamp: value too large",
                               diagnostic=f"{value} is past {format_unix(MAX_UNIX)}")
    return Timestamp(unix=value, natural=format_unix(value))


def parse_timestring(value):
    """Convert a date such as 'December 15, 2015' into a Timestamp at midnight UTC."""
    try:
        dt = datetime.strptime(value, TIMESTRING_FORMAT)
    except (TypeError, ValueError) as e:
        raise InvalidFormat(f"Invalid Format: cannot parse {value!r} as 'January 2, 2006'",
                            diagnostic=str(e)) from e

    dt = dt.replace(tzinfo=pytz.utc)
    unix = int((dt - EPOCH).total_seconds())
    return Timestamp(unix=unix, natural=format_natural(dt))


def parse_integer(value):
    """Return value as a signed 64-bit int, or None if it is not one."""
    if not INTEGER_PATTERN.fullmatch(value):
        return None
    number = int(value)
    if number < INT64_MIN or number > INT64_MAX:
        return None
    return number


def resolve(value):
    """
    Resolve a path segment into a Timestamp.

    Integers are treated as epoch seconds; anything else must match the
    fixed date layout. Raises InvalidTimestamp or InvalidFormat.
    """
    if not value:
        raise InvalidFormat("Invalid Format: missing required date argument")

    number = parse_integer(value)
    if number is not None:
        return parse_timestamp(number)
    return parse_timestring(value)
