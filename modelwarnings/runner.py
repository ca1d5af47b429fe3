# modelwarnings: non-blocking validation warnings for model records
#
# Copyright (c) 2021 Dave Jones <dave@waveform.org.uk>
#
# SPDX-License-Identifier: GPL-2.0-or-later

import logging

from .context import ValidationContext, WarningProxy


log = logging.getLogger(__name__)


class ValidationRunner:
    """
    Runs the rules declared on a record's class for one
    :class:`~modelwarnings.context.ValidationContext`, collecting their
    outcomes into one of the record's issue collections.

    Descendents must set :attr:`context`, and override :meth:`issues` and
    :meth:`subject`. Use :class:`RunForErrors` or :class:`RunForWarnings`
    rather than this class.
    """
    context = None

    def issues(self, record):
        """
        Return the :class:`~modelwarnings.issues.IssueCollection` of *record*
        that rules report into.
        """
        raise NotImplementedError

    def subject(self, record):
        """
        Return the object that is passed to each rule in place of *record*.
        """
        raise NotImplementedError

    def run(self, record, context=None):
        """
        Clear the target issue collection of *record*, then apply each rule
        declared for :attr:`context` on the record's class, in declaration
        order, with the record's ``validation_context`` set to *context*.
        Returns :data:`True` if no issues were reported.

        Exceptions raised by rules are propagated unchanged; the record's
        ``validation_context`` is restored regardless.
        """
        issues = self.issues(record)
        issues.clear()
        subject = self.subject(record)
        saved = record.validation_context
        record.validation_context = context
        try:
            for rule in type(record).rules_for(self.context):
                if rule.applies(subject):
                    rule.validate(subject)
        finally:
            record.validation_context = saved
        log.debug('%s: %s in context %r reported %d issue(s)',
                  self.__class__.__name__, type(record).__name__, context,
                  issues.count)
        return not issues


class RunForErrors(ValidationRunner):
    """
    Runs the blocking rules of a record, reporting into its
    :attr:`~modelwarnings.record.Record.errors`.
    """
    context = ValidationContext.ERRORS

    def issues(self, record):
        return record.errors

    def subject(self, record):
        return record


class RunForWarnings(ValidationRunner):
    """
    Runs the non-blocking rules of a record, reporting into its
    :attr:`~modelwarnings.record.Record.warnings` by way of a
    :class:`~modelwarnings.context.WarningProxy`.
    """
    context = ValidationContext.WARNINGS

    def issues(self, record):
        return record.warnings

    def subject(self, record):
        return WarningProxy(record)
