# modelwarnings: non-blocking validation warnings for model records
#
# Copyright (c) 2021 Dave Jones <dave@waveform.org.uk>
#
# SPDX-License-Identifier: GPL-2.0-or-later

class ModelWarningsError(Exception):
    """
    Base class for all exceptions raised by modelwarnings.
    """


class UsageError(ModelWarningsError, ValueError):
    """
    Exception raised when the rule declaration API is misused; for example,
    when :meth:`~modelwarnings.record.Record.declare_warnings` is called
    without a block, or an unknown rule is named in
    :meth:`~modelwarnings.record.Record.validates`.
    """


class RecordInvalid(ModelWarningsError):
    """
    Exception raised by :meth:`~modelwarnings.record.Record.validate_or_raise`
    and :meth:`~modelwarnings.record.Record.save_or_raise` when a *record*
    fails its error rules. The record is available as the :attr:`record`
    attribute, and its :attr:`~modelwarnings.record.Record.errors` describe
    the failures.

    Warnings never cause this exception.
    """
    def __init__(self, record):
        self.record = record
        messages = record.errors.full_messages()
        super().__init__('validation failed: {}'.format(
            ', '.join(messages) if messages else 'no messages'))
