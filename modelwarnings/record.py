# modelwarnings: non-blocking validation warnings for model records
#
# Copyright (c) 2021 Dave Jones <dave@waveform.org.uk>
#
# SPDX-License-Identifier: GPL-2.0-or-later

import logging

from .context import (
    ValidationContext,
    build_rules,
    build_rule_with,
    declare_warnings,
)
from .errors import RecordInvalid
from .issues import IssueCollection
from .runner import RunForErrors, RunForWarnings
from .validators import FunctionValidator


log = logging.getLogger(__name__)


class Record:
    """
    Base class for records with validation rules. Attributes are given as
    keyword arguments to the constructor and are stored as plain instance
    attributes. The names :attr:`errors`, :attr:`warnings`,
    :attr:`validation_context`, and :attr:`persisted` are reserved.

    Rules are declared with the class methods :meth:`validates`,
    :meth:`validates_with`, and :meth:`validate`, which declare blocking
    rules (errors), or through the declarer passed to the block given to
    :meth:`declare_warnings`, which declare non-blocking rules (warnings).
    For example::

        class Account(Record):
            human_attribute_names = {'balance': 'Account balance'}

        Account.validates('balance', presence=True)

        @Account.declare_warnings
        def account_warnings(rules):
            rules.validates('balance', numericality={
                'greater_than_or_equal_to': 0})

        account = Account(balance=-5)
        assert account.is_valid()
        assert account.has_warnings()

    Sub-classes inherit the rules declared on their parent at the time the
    sub-class is defined; rules subsequently declared on the sub-class do not
    affect the parent.
    """
    #: Maps attribute names to the names used in full messages
    human_attribute_names = {}

    #: The name of the context of the validation run in progress (if any)
    validation_context = None

    #: Set to :data:`True` once the record has been saved
    persisted = False

    _rules = {context: [] for context in ValidationContext}
    _errors = None
    _warnings = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._rules = {
            context: list(rules)
            for context, rules in cls._rules.items()
        }

    def __init__(self, **attributes):
        for name, value in attributes.items():
            setattr(self, name, value)

    def __repr__(self):
        return '{cls}({attrs})'.format(
            cls=self.__class__.__name__,
            attrs=', '.join(
                '{name}={value!r}'.format(name=name, value=value)
                for name, value in vars(self).items()
                if not name.startswith('_')
                and name not in ('validation_context', 'persisted')))

    @property
    def errors(self):
        """
        The :class:`~modelwarnings.issues.IssueCollection` of blocking issues
        found by the last run of the error rules.
        """
        if self._errors is None:
            self._errors = IssueCollection(self)
        return self._errors

    @property
    def warnings(self):
        """
        The :class:`~modelwarnings.issues.IssueCollection` of non-blocking
        issues found by the last run of the warning rules. This is cleared by
        every call to :meth:`is_valid`, and re-populated by
        :meth:`has_warnings`.
        """
        if self._warnings is None:
            self._warnings = IssueCollection(self)
        return self._warnings

    @classmethod
    def add_rule(cls, context, validator):
        """
        Register the *validator* instance under *context* (a
        :class:`~modelwarnings.context.ValidationContext`). This is the
        primitive underlying all the declaration methods.
        """
        cls._rules[ValidationContext(context)].append(validator)

    @classmethod
    def rules_for(cls, context):
        """
        Return a tuple of the validators declared for *context*, in
        declaration order.
        """
        return tuple(cls._rules[ValidationContext(context)])

    @classmethod
    def validates(cls, *attributes, **options):
        """
        Declare blocking rules for *attributes*. Each keyword naming a rule
        (presence, absence, acceptance, numericality, comparison, length,
        format, inclusion, exclusion) selects it, with either :data:`True` or
        a :class:`dict` of options for that rule. The keywords
        *allow_none*, *allow_blank*, *when*, *unless*, *on*, and *message*
        apply to all rules selected. For example::

            Account.validates('name', presence=True, length={'maximum': 40})
        """
        for validator in build_rules(attributes, options):
            cls.add_rule(ValidationContext.ERRORS, validator)

    @classmethod
    def validates_with(cls, validator_class, *attributes, **options):
        """
        Declare a blocking rule implemented by *validator_class*, a
        descendent of :class:`~modelwarnings.validators.Validator`,
        constructed with *attributes* and *options*.
        """
        cls.add_rule(
            ValidationContext.ERRORS,
            build_rule_with(validator_class, attributes, options))

    @classmethod
    def validate(cls, function=None, **options):
        """
        Declare *function* as a blocking whole-record rule. The *function*
        is called with the record and reports problems with
        ``record.errors.add()``. This may be used as a decorator::

            @Account.validate
            def not_frozen(account):
                if account.frozen:
                    account.errors.add(BASE, 'Account is frozen')
        """
        if function is None:
            return lambda function: cls.validate(function, **options)
        cls.add_rule(
            ValidationContext.ERRORS, FunctionValidator(function, **options))
        return function

    @classmethod
    def declare_warnings(cls, block=None):
        """
        Call *block* with a :class:`~modelwarnings.context.RuleDeclarer`
        through which any rules declared are registered as warnings rather
        than errors. The declarer is closed when *block* exits, by returning
        or raising. Returns *block*, so may be used as a decorator.

        Raises :exc:`~modelwarnings.errors.UsageError` if *block* is missing.
        """
        return declare_warnings(cls, block)

    def default_validation_context(self):
        """
        The validation context used when none is specified: ``'create'`` for
        new records, and ``'update'`` for those already persisted.
        """
        return 'update' if self.persisted else 'create'

    def is_valid(self, context=None):
        """
        Clear :attr:`warnings`, run the blocking rules, and return
        :data:`True` if no :attr:`errors` were reported. Warning rules are
        *not* run.
        """
        self.warnings.clear()
        return RunForErrors().run(
            self, context or self.default_validation_context())

    def is_invalid(self, context=None):
        """
        The opposite of :meth:`is_valid`.
        """
        return not self.is_valid(context)

    def has_warnings(self, context=None):
        """
        Run the warning rules against the current state of the record, and
        return :data:`True` if any :attr:`warnings` were reported. The
        :attr:`errors` are not affected.
        """
        return not RunForWarnings().run(
            self, context or self.default_validation_context())

    def validate_or_raise(self, context=None):
        """
        As :meth:`is_valid`, but raises
        :exc:`~modelwarnings.errors.RecordInvalid` if the record is invalid.
        """
        if not self.is_valid(context):
            raise RecordInvalid(self)

    def persist(self):
        """
        Called by :meth:`save` to store the record once validation has
        passed. The default does nothing; the surrounding persistence layer is
        expected to override this.
        """

    def save(self, validate=True):
        """
        Run the blocking rules (unless *validate* is :data:`False`) and, if
        they pass, :meth:`persist` the record and return :data:`True`.
        Returns :data:`False` without persisting if the record is invalid.
        Warnings never prevent a save.
        """
        if validate and not self.is_valid():
            log.debug('not saving invalid %r: %s',
                      self, ', '.join(self.errors.full_messages()))
            return False
        log.debug('saving %r', self)
        self.persist()
        self.persisted = True
        return True

    def save_or_raise(self, validate=True):
        """
        As :meth:`save`, but raises :exc:`~modelwarnings.errors.RecordInvalid`
        instead of returning :data:`False`.
        """
        if not self.save(validate=validate):
            raise RecordInvalid(self)
