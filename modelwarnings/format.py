# modelwarnings: non-blocking validation warnings for model records
#
# Copyright (c) 2020-2021 Dave Jones <dave@waveform.org.uk>
#
# SPDX-License-Identifier: GPL-2.0-or-later

import re
from datetime import datetime
from decimal import Decimal

import humanize


def format_count(value):
    """
    Format the numeric (or timestamp) *value* for inclusion in a validation
    message. Integers are given thousands separators, floats and decimals
    are given in their shortest form, and timestamps in ISO-ish format. For
    example::

        >>> format_count(0)
        '0'
        >>> format_count(1000)
        '1,000'
        >>> format_count(2.50)
        '2.5'
        >>> format_count(datetime(2000, 1, 1))
        '2000-01-01 00:00:00'

    Anything else is simply converted with :class:`str`.
    """
    if isinstance(value, bool):
        return str(value).lower()
    elif isinstance(value, int):
        return humanize.intcomma(value)
    elif isinstance(value, float):
        if value.is_integer():
            return humanize.intcomma(int(value))
        return '{0:g}'.format(value)
    elif isinstance(value, Decimal):
        return '{0:f}'.format(value.normalize())
    elif isinstance(value, datetime):
        return '{0:%Y-%m-%d %H:%M:%S}'.format(value)
    else:
        return str(value)


_PLACEHOLDER = re.compile(r'\{(\w+)\}')


def format_message(template, **values):
    """
    Substitute *values* into the message *template*. Only simple named
    placeholders like ``{count}`` are replaced; numeric values are formatted
    with :func:`format_count` first. Placeholders not present in *values*,
    and any other braces, are left untouched. For example::

        >>> format_message('must be less than {count}', count=1000)
        'must be less than 1,000'
        >>> format_message("can't be blank {")
        "can't be blank {"
    """
    def substitute(match):
        key = match.group(1)
        if key in values:
            return format_count(values[key])
        return match.group(0)

    return _PLACEHOLDER.sub(substitute, template)


def humanize_attribute(name):
    """
    Convert the attribute *name* to a human readable form for use in full
    messages. For example::

        >>> humanize_attribute('balance')
        'Balance'
        >>> humanize_attribute('credit_limit')
        'Credit limit'
        >>> humanize_attribute('owner_id')
        'Owner'
    """
    if name.endswith('_id') and len(name) > 3:
        name = name[:-3]
    name = name.replace('_', ' ').strip()
    return name[:1].upper() + name[1:]


def format_repr(self, **override):
    """
    Build the :func:`repr` of a validator (or any object built from
    ``__slots__``) as ``Class(slot=value, ...)``, walking the slots of every
    class in its MRO. Private slots (those starting with an underscore) are
    omitted. Entries in *override* replace the repr of the named slot, or
    drop it entirely when given as :data:`None`.
    """
    args = (
        arg
        for cls in self.__class__.mro() if cls is not object
        for arg in cls.__slots__
        if not arg.startswith('_')
    )
    return '{self.__class__.__name__}({args})'.format(
        self=self, args=', '.join(
            '{arg}={value}'.format(
                arg=arg, value=override.get(arg, repr(getattr(self, arg))))
            for arg in args
            if arg not in override
            or override[arg] is not None))
