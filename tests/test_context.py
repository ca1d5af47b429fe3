# modelwarnings: non-blocking validation warnings for model records
#
# Copyright (c) 2021 Dave Jones <dave@waveform.org.uk>
#
# SPDX-License-Identifier: GPL-2.0-or-later

from unittest import mock

import pytest

from modelwarnings.errors import UsageError
from modelwarnings.record import Record
from modelwarnings.validators import *
from modelwarnings.context import *


@pytest.fixture
def model(request):
    class Account(Record):
        pass
    return Account


def test_validation_context():
    assert ValidationContext('errors') is ValidationContext.ERRORS
    assert ValidationContext('warnings') is ValidationContext.WARNINGS
    assert len(ValidationContext) == 2


def test_build_rules():
    rules = build_rules(('name',), {'presence': True, 'length': {'maximum': 4}})
    assert [type(rule) for rule in rules] == [PresenceValidator, LengthValidator]
    assert rules[1].maximum == 4
    assert all(rule.attributes == ('name',) for rule in rules)


def test_build_rules_common_options():
    rules = build_rules(('a', 'b'), {
        'numericality': {'greater_than': 0, 'message': 'positive please'},
        'presence': True,
        'on': 'create',
        'message': 'bad',
    })
    numericality, presence = rules
    assert numericality.on == presence.on == ('create',)
    assert numericality.message == 'positive please'
    assert presence.message == 'bad'
    assert numericality.attributes == ('a', 'b')


def test_build_rules_shortcuts():
    fmt, inc = build_rules(('code',), {'format': r'^\d+$', 'inclusion': ('1', '2')})
    assert fmt.with_.pattern == r'^\d+$'
    assert inc.choices == ('1', '2')
    assert len(build_rules(('a',), {'presence': True, 'absence': False})) == 1


def test_build_rules_bad_usage():
    with pytest.raises(UsageError):
        build_rules((), {'presence': True})
    with pytest.raises(UsageError):
        build_rules(('a',), {})
    with pytest.raises(UsageError):
        build_rules(('a',), {'presense': True})
    with pytest.raises(UsageError):
        build_rules(('a',), {'presence': 'yes'})
    with pytest.raises(UsageError):
        build_rules(('a',), {'length': {'maximun': 3}})
    with pytest.raises(UsageError):
        build_rules(('a',), {'length': True})


def test_build_rule_with():
    rule = build_rule_with(PresenceValidator, ('a',), {'on': 'update'})
    assert isinstance(rule, PresenceValidator)
    assert rule.on == ('update',)
    with pytest.raises(UsageError):
        build_rule_with(object, ('a',), {})
    with pytest.raises(UsageError):
        build_rule_with(PresenceValidator(('a',)), (), {})
    with pytest.raises(UsageError):
        build_rule_with(PresenceValidator, ('a',), {'bogus': 1})


def test_declarer_scope(model):
    declarer = RuleDeclarer(model, ValidationContext.WARNINGS)
    assert not declarer.is_open
    with pytest.raises(UsageError):
        declarer.validates('balance', presence=True)
    with declarer as rules:
        assert rules is declarer
        assert declarer.is_open
        with pytest.raises(UsageError):
            with declarer:
                pass
        rules.validates('balance', presence=True)
    assert not declarer.is_open
    with pytest.raises(UsageError):
        declarer.validates('balance', presence=True)
    assert len(model.rules_for(ValidationContext.WARNINGS)) == 1
    assert len(model.rules_for(ValidationContext.ERRORS)) == 0


def test_declarer_repr(model):
    declarer = RuleDeclarer(model, 'warnings')
    assert repr(declarer) == '<RuleDeclarer model=Account context=WARNINGS closed>'


def test_declarer_methods(model):
    def rule(record):
        pass

    with RuleDeclarer(model, ValidationContext.WARNINGS) as rules:
        rules.validates('balance', numericality=True)
        rules.validates_with(PresenceValidator, 'name', on='create')
        assert rules.validate(rule) is rule
        assert rules.validate(on='update')(rule) is rule
    validators = model.rules_for(ValidationContext.WARNINGS)
    assert [type(v) for v in validators] == [
        NumericalityValidator, PresenceValidator,
        FunctionValidator, FunctionValidator]
    assert validators[3].on == ('update',)
    assert model.rules_for(ValidationContext.ERRORS) == ()


def test_declare_warnings(model):
    block = mock.Mock()
    assert declare_warnings(model, block) is block
    assert block.call_count == 1
    rules, = block.call_args[0]
    assert isinstance(rules, RuleDeclarer)
    assert rules.context is ValidationContext.WARNINGS
    assert rules.model is model
    assert not rules.is_open


def test_declare_warnings_requires_block(model):
    with pytest.raises(UsageError):
        declare_warnings(model, None)
    with pytest.raises(UsageError):
        declare_warnings(model, 'not a block')


def test_declare_warnings_restores_on_error(model):
    captured = []

    def block(rules):
        captured.append(rules)
        rules.validates('balance', presence=True)
        raise RuntimeError('oops')

    with pytest.raises(RuntimeError):
        declare_warnings(model, block)
    assert not captured[0].is_open
    model.validates('name', presence=True)
    assert len(model.rules_for(ValidationContext.WARNINGS)) == 1
    assert len(model.rules_for(ValidationContext.ERRORS)) == 1
    assert model.rules_for(ValidationContext.ERRORS)[0].attributes == ('name',)


def test_declare_warnings_nested(model):
    def inner(rules):
        rules.validates('name', presence=True)

    def outer(rules):
        rules.validates('balance', presence=True)
        rules.declare_warnings(inner)
        rules.validates('code', presence=True)

    declare_warnings(model, outer)
    assert [v.attributes for v in model.rules_for(ValidationContext.WARNINGS)] == [
        ('balance',), ('name',), ('code',)]
    assert model.rules_for(ValidationContext.ERRORS) == ()


def test_declare_warnings_class_api_inside_block(model):
    def block(rules):
        model.validates('name', presence=True)
        rules.validates('balance', presence=True)

    declare_warnings(model, block)
    assert [v.attributes for v in model.rules_for(ValidationContext.ERRORS)] == [
        ('name',)]
    assert [v.attributes for v in model.rules_for(ValidationContext.WARNINGS)] == [
        ('balance',)]


def test_declarer_nested_when_closed(model):
    declarer = RuleDeclarer(model, ValidationContext.WARNINGS)
    with pytest.raises(UsageError):
        declarer.declare_warnings(lambda rules: None)


def test_warning_proxy(model):
    account = model(balance=5)
    proxy = WarningProxy(account)
    assert proxy.balance == 5
    assert proxy.errors is account.warnings
    assert proxy.errors is not account.errors
    assert proxy.warnings is account.warnings
    assert isinstance(proxy, model)
    assert isinstance(proxy, Record)
    proxy.balance = 10
    assert account.balance == 10
    proxy.note = 'foo'
    assert account.note == 'foo'
    del proxy.note
    assert not hasattr(account, 'note')
    with pytest.raises(AttributeError):
        proxy.missing
    assert proxy.is_valid() is True
    assert repr(proxy) == '<WarningProxy for Account(balance=10)>'


def test_warning_proxy_reports_into_warnings(model):
    account = model(balance=-5)
    proxy = WarningProxy(account)
    proxy.errors.add('balance', 'is negative')
    assert account.warnings.to_dict() == {'balance': ['is negative']}
    assert not account.errors
