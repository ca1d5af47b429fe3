# modelwarnings: non-blocking validation warnings for model records
#
# Copyright (c) 2020-2021 Dave Jones <dave@waveform.org.uk>
#
# SPDX-License-Identifier: GPL-2.0-or-later

from collections.abc import Mapping

from .format import humanize_attribute


BASE = '__base__'


class IssueCollection(Mapping):
    """
    An ordered multi-map of attribute names to lists of human-readable
    messages, used to report the outcome of validation rules. Each
    :class:`~modelwarnings.record.Record` owns two of these: its
    :attr:`~modelwarnings.record.Record.errors` and its
    :attr:`~modelwarnings.record.Record.warnings`.

    Attributes are kept in the order in which they first received a message.
    Issues concerning the record as a whole are added under the special
    :data:`BASE` key.

    This implements the read-only :class:`~collections.abc.Mapping`
    protocol; the value for each attribute is a :class:`tuple` of its
    messages and only attributes with at least one message are present.
    Modification is only permitted via :meth:`add`, :meth:`delete`, and
    :meth:`clear`.

    The optional *owner* is the record the issues describe; when given, its
    class's ``human_attribute_names`` mapping is consulted by
    :meth:`full_messages`.
    """
    __slots__ = ('owner', '_messages')

    def __init__(self, owner=None):
        self.owner = owner
        self._messages = {}

    def add(self, attribute, message):
        """
        Append *message* to the list of messages for *attribute*.
        """
        self._messages.setdefault(attribute, []).append(message)

    def delete(self, attribute):
        """
        Remove all messages for *attribute*, returning the removed list (which
        will be empty if *attribute* had no messages).
        """
        return self._messages.pop(attribute, [])

    def clear(self):
        """
        Remove all messages for all attributes.
        """
        self._messages.clear()

    def messages_for(self, attribute):
        """
        Return a list of the messages for *attribute*. Unlike item access,
        this returns an empty list for attributes without messages.
        """
        return list(self._messages.get(attribute, ()))

    @property
    def count(self):
        """
        The total number of messages across all attributes.
        """
        return sum(len(messages) for messages in self._messages.values())

    def full_message(self, attribute, message):
        """
        Return *message* prefixed with the human-readable name of *attribute*.
        Messages under the :data:`BASE` key are returned verbatim.
        """
        if attribute == BASE:
            return message
        names = getattr(type(self.owner), 'human_attribute_names', None) or {}
        name = names.get(attribute) or humanize_attribute(attribute)
        return '{name} {message}'.format(name=name, message=message)

    def full_messages(self):
        """
        Return a list of every message, in order, prefixed with the
        human-readable name of its attribute. For example::

            >>> issues = IssueCollection()
            >>> issues.add('balance', "can't be blank")
            >>> issues.add(BASE, 'Account is frozen')
            >>> issues.full_messages()
            ["Balance can't be blank", 'Account is frozen']
        """
        return [
            self.full_message(attribute, message)
            for attribute, messages in self._messages.items()
            for message in messages
        ]

    def to_dict(self):
        """
        Return a :class:`dict` mapping attributes to lists of messages.
        """
        return {
            attribute: list(messages)
            for attribute, messages in self._messages.items()
        }

    def __getitem__(self, attribute):
        try:
            return tuple(self._messages[attribute])
        except KeyError:
            raise KeyError(attribute) from None

    def __contains__(self, attribute):
        return attribute in self._messages

    def __iter__(self):
        return iter(self._messages)

    def __len__(self):
        return len(self._messages)

    def __eq__(self, other):
        if isinstance(other, IssueCollection):
            return self._messages == other._messages
        elif isinstance(other, Mapping):
            try:
                return self._messages == {
                    attribute: list(messages)
                    for attribute, messages in other.items()
                }
            except TypeError:
                return False
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return '{self.__class__.__name__}({messages!r})'.format(
            self=self, messages=self._messages)
