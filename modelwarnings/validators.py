# modelwarnings: non-blocking validation warnings for model records
#
# Copyright (c) 2018-2021 Dave Jones <dave@waveform.org.uk>
#
# SPDX-License-Identifier: GPL-2.0-or-later

import re
import operator
from collections.abc import Sized

from .conversions import is_blank, parse_number, coerce_like
from .errors import UsageError
from .format import format_message, format_repr


class Validator:
    """
    Base class for all validation rules. Descendents must override
    :meth:`validate` which will be called with the record being validated,
    and should report any problems by calling ``record.errors.add()``.

    Note that the *record* passed to :meth:`validate` may not be the record
    itself, but a stand-in for it (see
    :class:`~modelwarnings.context.WarningProxy`). Rules must therefore
    report via ``record.errors`` rather than caching a reference to any
    particular issue collection.

    The following keyword-only options are common to all validators:

    *when*
        A callable accepting the record, or the name of a method of the
        record. The rule is only applied if this returns a truthy value.

    *unless*
        As *when*, but the rule is only applied if this returns a falsy
        value.

    *on*
        A validation context name (e.g. ``'create'`` or ``'update'``), or a
        sequence of names. If specified, the rule is only applied when the
        record is being validated in one of these contexts.

    *message*
        A custom message replacing the validator's default message(s).
    """
    __slots__ = ('when', 'unless', 'on', 'message')

    def __init__(self, *, when=None, unless=None, on=None, message=None):
        self.when = when
        self.unless = unless
        if isinstance(on, str):
            on = (on,)
        elif on is not None:
            on = tuple(on)
        self.on = on
        self.message = message

    def __repr__(self):
        return format_repr(self)

    def applies(self, record):
        """
        Returns :data:`True` if this rule should be applied to *record* given
        its current ``validation_context`` and the *when* and *unless*
        conditions.
        """
        if self.on is not None and record.validation_context not in self.on:
            return False
        if self.when is not None and not _evaluate(self.when, record):
            return False
        if self.unless is not None and _evaluate(self.unless, record):
            return False
        return True

    def validate(self, record):
        raise NotImplementedError

    def report(self, record, attribute, default, **values):
        """
        Add an issue for *attribute* to ``record.errors``. The custom
        *message* is used in preference to *default*; either is formatted
        with *values* (see :func:`~modelwarnings.format.format_message`).
        """
        record.errors.add(attribute, format_message(
            self.message or default, attribute=attribute, **values))


def _evaluate(condition, record):
    if isinstance(condition, str):
        return getattr(record, condition)()
    return condition(record)


def _resolve(value, record):
    if callable(value):
        return value(record)
    return value


class FunctionValidator(Validator):
    """
    Wraps a plain *function* as a whole-record rule. The *function* is
    called with the record and is expected to report via
    ``record.errors.add()`` itself; its return value is ignored.
    """
    __slots__ = ('function',)

    def __init__(self, function, **options):
        if not callable(function):
            raise UsageError(
                'validation function must be callable, not {!r}'.format(
                    function))
        super().__init__(**options)
        self.function = function

    def validate(self, record):
        self.function(record)


class EachValidator(Validator):
    """
    Base class for rules which validate each of several *attributes*
    independently. Descendents must override :meth:`validate_each` which will
    be called with the record, the attribute name, and its current value.

    In addition to the options accepted by :class:`Validator`, the following
    keyword-only options are accepted:

    *allow_none*
        If :data:`True`, a :data:`None` value is considered inapplicable and
        :meth:`validate_each` is not called for it. Defaults to :data:`True`
        unless the class sets :attr:`checks_none`.

    *allow_blank*
        If :data:`True`, blank values (see
        :func:`~modelwarnings.conversions.is_blank`) are skipped. Defaults to
        :data:`False`.
    """
    __slots__ = ('attributes', 'allow_none', 'allow_blank')

    #: Set to :data:`True` in descendents which must inspect :data:`None`
    #: values themselves (like presence).
    checks_none = False

    def __init__(self, *attributes, allow_none=None, allow_blank=False,
                 **options):
        if not attributes:
            raise UsageError(
                '{cls} requires at least one attribute'.format(
                    cls=self.__class__.__name__))
        super().__init__(**options)
        self.attributes = attributes
        if allow_none is None:
            allow_none = not self.checks_none
        self.allow_none = allow_none
        self.allow_blank = allow_blank

    def validate(self, record):
        for attribute in self.attributes:
            value = getattr(record, attribute, None)
            if value is None and self.allow_none:
                continue
            if self.allow_blank and is_blank(value):
                continue
            self.validate_each(record, attribute, value)

    def validate_each(self, record, attribute, value):
        raise NotImplementedError


class PresenceValidator(EachValidator):
    __slots__ = ()
    checks_none = True

    def validate_each(self, record, attribute, value):
        if is_blank(value):
            self.report(record, attribute, "can't be blank", value=value)


class AbsenceValidator(EachValidator):
    __slots__ = ()
    checks_none = True

    def validate_each(self, record, attribute, value):
        if not is_blank(value):
            self.report(record, attribute, 'must be blank', value=value)


class AcceptanceValidator(EachValidator):
    """
    Checks that the attribute holds one of the *accept* values, typically
    used for "terms of service" style check-boxes.
    """
    __slots__ = ('accept',)

    def __init__(self, *attributes, accept=('1', 'true', 'yes', 'on', True, 1),
                 **options):
        super().__init__(*attributes, **options)
        self.accept = tuple(accept)

    def validate_each(self, record, attribute, value):
        if isinstance(value, str):
            value = value.strip().lower()
        if value not in self.accept:
            self.report(record, attribute, 'must be accepted', value=value)


_COMPARISONS = (
    ('greater_than',             operator.gt, 'must be greater than {count}'),
    ('greater_than_or_equal_to', operator.ge, 'must be greater than or equal to {count}'),
    ('equal_to',                 operator.eq, 'must be equal to {count}'),
    ('other_than',               operator.ne, 'must be other than {count}'),
    ('less_than',                operator.lt, 'must be less than {count}'),
    ('less_than_or_equal_to',    operator.le, 'must be less than or equal to {count}'),
)


class BoundsValidator(EachValidator):
    """
    Base class for validators which compare values against the bounds
    *greater_than*, *greater_than_or_equal_to*, *equal_to*, *other_than*,
    *less_than*, and *less_than_or_equal_to*. Each bound may be a value, or a
    callable accepting the record and returning the value.
    """
    __slots__ = ('bounds',)

    def __init__(self, *attributes, greater_than=None,
                 greater_than_or_equal_to=None, equal_to=None,
                 other_than=None, less_than=None, less_than_or_equal_to=None,
                 **options):
        super().__init__(*attributes, **options)
        given = {
            'greater_than': greater_than,
            'greater_than_or_equal_to': greater_than_or_equal_to,
            'equal_to': equal_to,
            'other_than': other_than,
            'less_than': less_than,
            'less_than_or_equal_to': less_than_or_equal_to,
        }
        self.bounds = tuple(
            (name, given[name], op, default)
            for name, op, default in _COMPARISONS
            if given[name] is not None
        )

    def coerce(self, value, bound):
        return value

    def check_bounds(self, record, attribute, value):
        for name, bound, op, default in self.bounds:
            bound = _resolve(bound, record)
            try:
                operand = self.coerce(value, bound)
            except ValueError:
                self.report(record, attribute, 'is not a valid timestamp',
                            value=value)
                return
            if not op(operand, bound):
                self.report(record, attribute, default, count=bound,
                            value=value)


class NumericalityValidator(BoundsValidator):
    """
    Checks that the attribute holds a number (or a string representation of
    one). If *only_integer* is :data:`True`, the number must also be
    integral. In addition to the bounds accepted by :class:`BoundsValidator`,
    *odd* or *even* may be specified.
    """
    __slots__ = ('only_integer', 'odd', 'even')

    def __init__(self, *attributes, only_integer=False, odd=False,
                 even=False, **options):
        super().__init__(*attributes, **options)
        if odd and even:
            raise UsageError('odd and even are mutually exclusive')
        self.only_integer = only_integer or odd or even
        self.odd = odd
        self.even = even

    def validate_each(self, record, attribute, value):
        try:
            number = parse_number(value, only_integer=self.only_integer)
        except TypeError:
            self.report(record, attribute, 'is not a number', value=value)
            return
        except ValueError:
            self.report(record, attribute, 'must be an integer', value=value)
            return
        self.check_bounds(record, attribute, number)
        if self.odd and int(number) % 2 != 1:
            self.report(record, attribute, 'must be odd', value=value)
        if self.even and int(number) % 2 != 0:
            self.report(record, attribute, 'must be even', value=value)


class ComparisonValidator(BoundsValidator):
    """
    Checks that the attribute compares correctly with at least one bound.
    Unlike :class:`NumericalityValidator`, values are not converted to
    numbers, so any ordered type may be compared (timestamps, strings, etc).
    As a convenience, string values compared against timestamp bounds are
    parsed as timestamps.
    """
    __slots__ = ()

    def __init__(self, *attributes, **options):
        super().__init__(*attributes, **options)
        if not self.bounds:
            raise UsageError('comparison requires at least one bound')

    def coerce(self, value, bound):
        return coerce_like(value, bound)

    def validate_each(self, record, attribute, value):
        self.check_bounds(record, attribute, value)


class LengthValidator(EachValidator):
    """
    Checks the length of the attribute against *minimum*, *maximum*, and/or
    *equal*. *within* may be given as a ``(minimum, maximum)`` pair instead.
    Values without a length (numbers, for instance) are measured by their
    string form.
    """
    __slots__ = ('minimum', 'maximum', 'equal')

    def __init__(self, *attributes, minimum=None, maximum=None, equal=None,
                 within=None, **options):
        super().__init__(*attributes, **options)
        if within is not None:
            minimum, maximum = within
        if minimum is None and maximum is None and equal is None:
            raise UsageError(
                'length requires one of minimum, maximum, equal, or within')
        self.minimum = minimum
        self.maximum = maximum
        self.equal = equal

    def validate_each(self, record, attribute, value):
        length = len(value) if isinstance(value, Sized) else len(str(value))
        for bound, failed, default in (
            (self.equal, lambda n: length != n,
             'is the wrong length (should be {count} {unit})'),
            (self.minimum, lambda n: length < n,
             'is too short (minimum is {count} {unit})'),
            (self.maximum, lambda n: length > n,
             'is too long (maximum is {count} {unit})'),
        ):
            if bound is not None and failed(bound):
                self.report(record, attribute, default, count=bound,
                            value=value,
                            unit='character' if bound == 1 else 'characters')


class FormatValidator(EachValidator):
    """
    Checks the string form of the attribute against a regular expression.
    Exactly one of *with_* (the value must match) or *without* (the value
    must not match) must be given. Patterns may be strings or compiled
    regular expressions and are searched for anywhere in the value, so
    anchor them if required.
    """
    __slots__ = ('with_', 'without')

    def __init__(self, *attributes, with_=None, without=None, **options):
        super().__init__(*attributes, **options)
        if (with_ is None) == (without is None):
            raise UsageError('format requires exactly one of with_ or without')
        self.with_ = None if with_ is None else re.compile(with_)
        self.without = None if without is None else re.compile(without)

    def validate_each(self, record, attribute, value):
        s = str(value)
        if self.with_ is not None:
            failed = not self.with_.search(s)
        else:
            failed = bool(self.without.search(s))
        if failed:
            self.report(record, attribute, 'is invalid', value=value)


class InclusionValidator(EachValidator):
    """
    Checks that the attribute is one of *choices*, which may be any container
    or a callable accepting the record and returning one.
    """
    __slots__ = ('choices',)

    def __init__(self, *attributes, choices=None, **options):
        super().__init__(*attributes, **options)
        if choices is None:
            raise UsageError(
                '{cls} requires choices'.format(cls=self.__class__.__name__))
        self.choices = choices

    def validate_each(self, record, attribute, value):
        if value not in _resolve(self.choices, record):
            self.report(record, attribute, 'is not included in the list',
                        value=value)


class ExclusionValidator(InclusionValidator):
    """
    Checks that the attribute is *not* one of *choices*.
    """
    __slots__ = ()

    def validate_each(self, record, attribute, value):
        if value in _resolve(self.choices, record):
            self.report(record, attribute, 'is reserved', value=value)


#: Maps the rule keywords accepted by
#: :meth:`~modelwarnings.record.Record.validates` to validator classes
RULES = {
    'presence':     PresenceValidator,
    'absence':      AbsenceValidator,
    'acceptance':   AcceptanceValidator,
    'numericality': NumericalityValidator,
    'comparison':   ComparisonValidator,
    'length':       LengthValidator,
    'format':       FormatValidator,
    'inclusion':    InclusionValidator,
    'exclusion':    ExclusionValidator,
}
