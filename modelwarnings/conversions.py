# modelwarnings: non-blocking validation warnings for model records
#
# Copyright (c) 2020-2021 Dave Jones <dave@waveform.org.uk>
#
# SPDX-License-Identifier: GPL-2.0-or-later

import re
from numbers import Real
from datetime import datetime
from decimal import Decimal, InvalidOperation

from dateutil.parser import parse


_INTEGER = re.compile(r'^[+-]?\d+$')


def is_blank(value):
    """
    Returns :data:`True` if *value* is "blank": :data:`None`, :data:`False`,
    a string which is empty or consists entirely of white-space, or an empty
    container. Everything else (including the number 0) is not blank.
    """
    if value is None or value is False:
        return True
    elif isinstance(value, str):
        return not value.strip()
    try:
        return len(value) == 0
    except TypeError:
        return False


def parse_number(value, only_integer=False):
    """
    Convert *value* to a number for the purposes of numeric validation.

    Numbers (other than :class:`bool`) are returned verbatim. Strings are
    stripped and converted to :class:`int` if they look like integers, or
    :class:`~decimal.Decimal` otherwise. If *only_integer* is :data:`True`,
    non-integral values are rejected. For example:

        >>> parse_number('12')
        12
        >>> parse_number(' -3.5 ')
        Decimal('-3.5')
        >>> parse_number('1.5', only_integer=True)
        Traceback (most recent call last):
          ...
        ValueError: not an integer '1.5'

    If *value* is not numeric, :exc:`TypeError` is raised. If it is numeric
    but not an integer when *only_integer* is set, :exc:`ValueError` is
    raised.
    """
    if isinstance(value, bool):
        raise TypeError('not a number {!r}'.format(value))
    elif isinstance(value, str):
        s = value.strip()
        if _INTEGER.match(s):
            return int(s)
        try:
            result = Decimal(s)
        except InvalidOperation:
            raise TypeError('not a number {!r}'.format(value))
        if not result.is_finite():
            raise TypeError('not a number {!r}'.format(value))
        if only_integer:
            raise ValueError('not an integer {!r}'.format(value))
        return result
    elif isinstance(value, (Real, Decimal)):
        if only_integer and not isinstance(value, int):
            try:
                integral = value == int(value)
            except (ValueError, OverflowError):
                # NaN and infinities
                integral = False
            if not integral:
                raise ValueError('not an integer {!r}'.format(value))
        return value
    else:
        raise TypeError('not a number {!r}'.format(value))


def parse_timestamp(s):
    """
    Convert the string *s* to a :class:`~datetime.datetime`. A
    :exc:`ValueError` is raised if *s* is not a valid datetime representation.
    """
    try:
        return parse(s)
    except OverflowError:
        raise ValueError('timestamp out of range {!r}'.format(s))


def coerce_like(value, bound):
    """
    Coerce *value* so that it may be compared with *bound*. At present this
    only converts strings to :class:`~datetime.datetime` when *bound* is a
    timestamp; all other values are returned verbatim.
    """
    if isinstance(bound, datetime) and isinstance(value, str):
        return parse_timestamp(value)
    return value
