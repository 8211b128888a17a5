'''
Postfix evaluator tests
'''

import regex

from infix.util import EvalError, ExpressionSyntaxError, UndefinedVariable
from infix.converter import convert_to_postfix
from infix.lexer import Token, TokenKind, BINARY
from infix.machine import evaluate

from pytest import approx, mark, raises


def solve(source, store):
    return evaluate(convert_to_postfix(source), store)


@mark.parametrize('source, expected', [
    ('3 + 4 * 2', 11.0),
    ('(1 + 2) * 3', 9.0),
    ('2 ^ 3 ^ 2', 512.0),
    ('-3 + 5', 2.0),
    ('3 - -5', 8.0),
    ('-2 ^ 2', -4.0),
    ('2 ^ -1', 0.5),
    ('7 % 3', 1.0),
    ('7 / 2', 3.5),
    ('- - 4', 4.0),
    ('((4))', 4.0),
])
def test_arithmetic(source, expected, store):
    assert solve(source, store) == expected


@mark.parametrize('source, expected', [
    ('1 < 2', 1.0),
    ('2 < 1', 0.0),
    ('2 > 1', 1.0),
    ('2 <= 2', 1.0),
    ('1 >= 2', 0.0),
    ('3 == 3', 1.0),
    ('3 != 3', 0.0),
    ('1 + 1 == 2', 1.0),
])
def test_comparison(source, expected, store):
    assert solve(source, store) == expected


@mark.parametrize('source, expected', [
    ('1 and 1', 1.0),
    ('2 and 0', 0.0),
    ('0 or 0', 0.0),
    ('0 or -3', 1.0),
    ('not 0', 1.0),
    ('not 5', 0.0),
    ('!0.5', 0.0),
    ('1 or 0 and 0', 1.0),
    ('not (1 < 2)', 0.0),
])
def test_logical(source, expected, store):
    assert solve(source, store) == expected


def test_logical_is_not_short_circuit(store):
    # Both sides evaluate, so the division by zero is reported.
    with raises(EvalError, match='Division by zero'):
        solve('0 and 1 / 0', store)


def test_assignment(store):
    assert solve('x = 5', store) == 5.0
    assert store.get('x') == 5.0
    assert solve('x + 1', store) == 6.0
    assert solve('x = x * 2', store) == 10.0
    assert solve('x', store) == 10.0


def test_chained_assignment(store):
    assert solve('a = b = 3', store) == 3.0
    assert store.entries() == [('a', 3.0), ('b', 3.0)]


def test_nested_assignment(store):
    assert solve('y = (x = 4) + 1', store) == 5.0
    assert store.get('x') == 4.0
    assert store.get('y') == 5.0


def test_assignment_to_value(store):
    with raises(ExpressionSyntaxError, match='Cannot assign to a value'):
        solve('3 = 4', store)
    with raises(ExpressionSyntaxError, match='Cannot assign to a value'):
        solve('(2 + 1) = 4', store)
    assert len(store) == 0


def test_undefined_variable(store):
    with raises(UndefinedVariable,
                match=regex.escape("Undefined variable 'nope' (at column 5)")) \
            as info:
        solve('1 + nope', store)
    assert info.value.name == 'nope'
    with raises(UndefinedVariable):
        solve('a = nope', store)
    assert 'a' not in store


def test_case_sensitive(store):
    solve('X = 1', store)
    with raises(UndefinedVariable):
        solve('x', store)


def test_division_by_zero(store):
    with raises(EvalError,
                match=regex.escape('Division by zero (at column 3)')):
        solve('1 / 0', store)


def test_modulo_by_zero(store):
    with raises(EvalError, match='Modulo by zero'):
        solve('5 % (2 - 2)', store)


def test_zero_to_negative_power(store):
    with raises(EvalError, match='Zero raised to a negative power'):
        solve('0 ^ -1', store)


def test_overflow(store):
    with raises(EvalError, match=regex.escape("Result of '^' too large")):
        solve('10 ^ 400', store)


def test_not_real(store):
    with raises(EvalError, match=regex.escape("Result of '^' is not real")):
        solve('(0 - 8) ^ 0.5', store)


def test_partial_assignment_is_kept(store):
    with raises(EvalError, match='Division by zero'):
        solve('a = 1 + (b = 2) / 0', store)
    assert store.get('b') == 2.0
    assert 'a' not in store


def test_empty(store):
    with raises(ExpressionSyntaxError, match='Empty expression'):
        evaluate([], store)


def test_left_over_values(store):
    postfix = [Token(TokenKind.NUM, '1', 0, value=1.0),
               Token(TokenKind.NUM, '2', 2, value=2.0)]
    with raises(ExpressionSyntaxError,
                match=regex.escape('Malformed expression, 2 values left over')):
        evaluate(postfix, store)


def test_missing_operand(store):
    postfix = [Token(TokenKind.NUM, '1', 0, value=1.0),
               Token(TokenKind.PLUS, '+', 2, arity=BINARY)]
    with raises(ExpressionSyntaxError, match=regex.escape("Missing operand for '+'")):
        evaluate(postfix, store)


def test_untagged_operator(store):
    postfix = [Token(TokenKind.NUM, '1', 0, value=1.0),
               Token(TokenKind.MINUS, '-', 0)]
    with raises(ExpressionSyntaxError, match=regex.escape("Cannot evaluate '-'")):
        evaluate(postfix, store)


def test_idempotent(store):
    store.set('k', 3)
    postfix = convert_to_postfix('k * (k - 1) / 2')
    assert evaluate(postfix, store) == evaluate(postfix, store) == 3.0


@mark.parametrize('source', [
    '1 + 2 * 3 - 4 / 5',
    '(1 + 2) * (3 - 4) / 5',
    '2 ^ 3 ^ 2',
    '-2 ^ 2',
    '2 ^ -1',
    '7 % 3 * 2',
    '-(3 - 10) % 4',
    '-7 % 3',
    '1 - 2 - 3',
    '100 / 10 / 5',
    '2 * -3',
    '- - 4',
    '1.5 * (2.25 - .75) ^ 2 / 3',
])
def test_matches_python_arithmetic(source, store):
    assert solve(source, store) == approx(eval(source.replace('^', '**')))


def test_float_overflow(store):
    with raises(EvalError, match=regex.escape("Result of '*' too large")):
        solve('10 ^ 300 * 10 ^ 300', store)
    with raises(EvalError, match=regex.escape("Result of '-' too large")):
        solve('-10 ^ 308 - 10 ^ 308', store)
    with raises(EvalError, match='too large'):
        solve('x = 10 ^ 300 * 10 ^ 300', store)
    assert 'x' not in store
