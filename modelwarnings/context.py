# modelwarnings: non-blocking validation warnings for model records
#
# Copyright (c) 2021 Dave Jones <dave@waveform.org.uk>
#
# SPDX-License-Identifier: GPL-2.0-or-later

import logging
from enum import Enum

from .errors import UsageError
from .validators import RULES, FunctionValidator, Validator


log = logging.getLogger(__name__)


class ValidationContext(Enum):
    """
    Selects the issue collection that a set of declared rules reports into.
    """
    ERRORS = 'errors'
    WARNINGS = 'warnings'


_COMMON_OPTIONS = {'allow_none', 'allow_blank', 'when', 'unless', 'on', 'message'}
_SHORTCUTS = {
    'format':    'with_',
    'inclusion': 'choices',
    'exclusion': 'choices',
}


def build_rules(attributes, options):
    """
    Construct the list of :class:`~modelwarnings.validators.Validator`
    instances described by a call to
    :meth:`~modelwarnings.record.Record.validates` for *attributes* with
    keyword *options*.

    Keys of *options* which name a rule (see
    :data:`~modelwarnings.validators.RULES`) select a validator; their value
    is :data:`True`, a :class:`dict` of options for that validator, or (for
    format, inclusion, and exclusion) the pattern or choices directly. The
    remaining keys are common options passed to every validator. A falsy
    rule value disables that rule.
    """
    if not attributes:
        raise UsageError('validates requires at least one attribute')
    common = {}
    selected = []
    for key, value in options.items():
        if key in _COMMON_OPTIONS:
            common[key] = value
        elif key in RULES:
            if value is True:
                value = {}
            elif not value:
                continue
            elif not isinstance(value, dict):
                try:
                    value = {_SHORTCUTS[key]: value}
                except KeyError:
                    raise UsageError(
                        'options for {key} must be True or a dict, not '
                        '{value!r}'.format(key=key, value=value)) from None
            selected.append((RULES[key], value))
        else:
            raise UsageError('unknown validation rule {!r}'.format(key))
    if not selected:
        raise UsageError('validates requires at least one rule')
    result = []
    for cls, rule_options in selected:
        kwargs = dict(common)
        kwargs.update(rule_options)
        try:
            result.append(cls(*attributes, **kwargs))
        except TypeError as exc:
            raise UsageError(
                'invalid options for {cls}: {exc}'.format(
                    cls=cls.__name__, exc=exc)) from exc
    return result


def build_rule_with(validator_class, attributes, options):
    """
    Construct a single instance of *validator_class* (which must be a
    descendent of :class:`~modelwarnings.validators.Validator`) with
    *attributes* and keyword *options*.
    """
    if not (isinstance(validator_class, type) and
            issubclass(validator_class, Validator)):
        raise UsageError(
            'expected a Validator class, not {!r}'.format(validator_class))
    try:
        return validator_class(*attributes, **options)
    except TypeError as exc:
        raise UsageError(
            'invalid options for {cls}: {exc}'.format(
                cls=validator_class.__name__, exc=exc)) from exc


class RuleDeclarer:
    """
    Declares rules against *model* (a :class:`~modelwarnings.record.Record`
    class) in the given *context* (a :class:`ValidationContext`).

    Instances are scoped; they may only be used between entry to and exit
    from a :keyword:`with` block, after which any attempt to declare rules
    through them raises :exc:`~modelwarnings.errors.UsageError`. Typically
    instances are not constructed directly, but are passed to the block
    given to :meth:`~modelwarnings.record.Record.declare_warnings`.

    The declaration methods mirror those of
    :class:`~modelwarnings.record.Record`.
    """
    __slots__ = ('model', 'context', '_open')

    def __init__(self, model, context):
        self.model = model
        self.context = ValidationContext(context)
        self._open = False

    def __repr__(self):
        return (
            '<{self.__class__.__name__} model={self.model.__name__} '
            'context={self.context.name} {state}>'.format(
                self=self, state='open' if self._open else 'closed'))

    def __enter__(self):
        if self._open:
            raise UsageError('{!r} is already in use'.format(self))
        self._open = True
        log.debug('declaring %s rules for %s',
                  self.context.value, self.model.__name__)
        return self

    def __exit__(self, *exc):
        self._open = False
        log.debug('finished declaring %s rules for %s',
                  self.context.value, self.model.__name__)

    @property
    def is_open(self):
        return self._open

    def _register(self, validators):
        if not self._open:
            raise UsageError(
                'cannot declare rules through {!r}'.format(self))
        for validator in validators:
            self.model.add_rule(self.context, validator)

    def validates(self, *attributes, **options):
        """
        Declare the built-in rules selected by *options* for *attributes*.
        See :meth:`~modelwarnings.record.Record.validates`.
        """
        self._register(build_rules(attributes, options))

    def validates_with(self, validator_class, *attributes, **options):
        """
        Declare a rule implemented by *validator_class*. See
        :meth:`~modelwarnings.record.Record.validates_with`.
        """
        self._register([build_rule_with(validator_class, attributes, options)])

    def validate(self, function=None, **options):
        """
        Declare *function* as a whole-record rule. May be used as a
        decorator, with or without options. See
        :meth:`~modelwarnings.record.Record.validate`.
        """
        if function is None:
            return lambda function: self.validate(function, **options)
        self._register([FunctionValidator(function, **options)])
        return function

    def declare_warnings(self, block=None):
        """
        Run *block* with a declarer for the warnings context. As this
        declarer may already be one, nesting is permitted and rules declared
        in the nested *block* are always warning rules.
        """
        if not self._open:
            raise UsageError(
                'cannot declare rules through {!r}'.format(self))
        return declare_warnings(self.model, block)


def declare_warnings(model, block):
    """
    Call *block* with an open :class:`RuleDeclarer` for *model* in the
    :attr:`~ValidationContext.WARNINGS` context. The declarer is closed when
    *block* returns or raises. Returns *block*.
    """
    if block is None:
        raise UsageError('declare_warnings requires a declaration block')
    if not callable(block):
        raise UsageError(
            'declaration block must be callable, not {!r}'.format(block))
    with RuleDeclarer(model, ValidationContext.WARNINGS) as rules:
        block(rules)
    return block


class WarningProxy:
    """
    Stands in for *owner* (a :class:`~modelwarnings.record.Record`) when
    running warning rules. Every attribute read, write, and deletion is
    forwarded to the *owner* with the sole exception of :attr:`errors`,
    which resolves to the owner's
    :attr:`~modelwarnings.record.Record.warnings`. Thus any rule that reports
    via ``record.errors.add()`` reports a warning instead.

    :func:`isinstance` checks against the owner's class succeed.
    """
    __slots__ = ('_owner',)

    def __init__(self, owner):
        object.__setattr__(self, '_owner', owner)

    @property
    def errors(self):
        return self._owner.warnings

    @property
    def __class__(self):
        return type(self._owner)

    def __getattr__(self, name):
        return getattr(self._owner, name)

    def __setattr__(self, name, value):
        setattr(self._owner, name, value)

    def __delattr__(self, name):
        delattr(self._owner, name)

    def __repr__(self):
        return '<WarningProxy for {!r}>'.format(self._owner)
