from collections import namedtuple
import math
import operator

from .lexer import TokenKind, UNARY, BINARY
from .log import log
from .store import VariableStore
from .util import EvalError, ExpressionSyntaxError


# Value stack entry. Symbols stay unresolved (value None) until an operator
# needs them, since they may be the target of an assignment.
Entry = namedtuple('Entry', 'value name position')


def _truth(x):
    return x != 0


def _boolean(f):
    '''
    Make a predicate answer 1.0 for true, 0.0 for false.
    '''
    def wrapped(*args):
        return 1.0 if f(*args) else 0.0
    wrapped.__name__ = f.__name__
    wrapped.__doc__ = f.__doc__
    return wrapped


@_boolean
def _and(left, right):
    # Both sides are already evaluated; no short circuit.
    return _truth(left) and _truth(right)


@_boolean
def _or(left, right):
    return _truth(left) or _truth(right)


@_boolean
def _not(only):
    return not _truth(only)


class Machine:
    '''
    Postfix (RPN) evaluator.

    Runs arity-tagged postfix tokens against a variable store, which only
    assignment writes to.
    '''

    BINARY = {
        # Arithmetic
        TokenKind.PLUS: operator.__add__,
        TokenKind.MINUS: operator.__sub__,
        TokenKind.STAR: operator.__mul__,
        TokenKind.SLASH: operator.__truediv__,
        TokenKind.PERC: operator.__mod__,
        TokenKind.CARAT: operator.__pow__,

        # Comparison
        TokenKind.LT: _boolean(operator.__lt__),
        TokenKind.GT: _boolean(operator.__gt__),
        TokenKind.LTE: _boolean(operator.__le__),
        TokenKind.GTE: _boolean(operator.__ge__),
        TokenKind.EQU: _boolean(operator.__eq__),
        TokenKind.NEQU: _boolean(operator.__ne__),

        # Logical
        TokenKind.AND: _and,
        TokenKind.OR: _or,
    }
    UNARY = {
        TokenKind.MINUS: operator.__neg__,
        TokenKind.NOT: _not,
    }
    # What ZeroDivisionError means, per operator.
    ZERO_DIVISION = {
        TokenKind.SLASH: 'Division by zero',
        TokenKind.PERC: 'Modulo by zero',
        TokenKind.CARAT: 'Zero raised to a negative power',
    }

    def __init__(self, store=None):
        '''
        Create evaluator over store.

        :param store: VariableStore; a fresh one if not given.
        '''
        self.store = VariableStore() if store is None else store

    def evaluate(self, postfix):
        '''
        Evaluate postfix tokens, returning the single resulting float.
        '''
        stack = []
        for token in postfix:
            if token.kind is TokenKind.NUM:
                stack.append(Entry(token.value, None, token.position))
            elif token.kind is TokenKind.SYM:
                stack.append(Entry(None, token.text, token.position))
            elif token.kind is TokenKind.EQUAL:
                operands = self._popstack(stack, token, 2)
                stack.append(self._assign(token, *operands))
            elif token.arity == UNARY and token.kind in type(self).UNARY:
                operands = self._popstack(stack, token, 1)
                stack.append(self._apply(token, *operands))
            elif token.arity == BINARY and token.kind in type(self).BINARY:
                operands = self._popstack(stack, token, 2)
                stack.append(self._apply(token, *operands))
            else:
                raise ExpressionSyntaxError(
                    'Cannot evaluate {}'.format(repr(token.text)),
                    token.position)

        if not stack:
            raise ExpressionSyntaxError('Empty expression')
        elif len(stack) > 1:
            raise ExpressionSyntaxError('Malformed expression, {} values left '
                                        'over'.format(len(stack)),
                                        stack[1].position)
        return self._resolve(stack[0])

    def _popstack(self, stack, token, n):
        '''
        Pop n entries, returned in the order they were pushed.
        '''
        if len(stack) < n:
            raise ExpressionSyntaxError(
                'Missing operand for {}'.format(repr(token.text)),
                token.position)
        # If you don't reverse, you'll do 2**9 when you say 9 2 ^ instead of
        # 9**2.
        return reversed([stack.pop() for _ in range(n)])

    def _resolve(self, entry):
        '''
        Return numeric value of entry, looking symbols up in the store.
        '''
        if entry.name is None:
            return entry.value
        try:
            return self.store.get(entry.name)
        except EvalError as e:
            e.position = entry.position
            raise

    def _assign(self, token, target, source):
        if target.name is None:
            raise ExpressionSyntaxError('Cannot assign to a value; left of = '
                                        'must be a variable', token.position)
        value = self.store.set(target.name, self._resolve(source))
        log.debug('assigned %s = %r', target.name, value)
        return Entry(value, None, target.position)

    def _apply(self, token, *entries):
        '''
        Apply operator token to resolved entries, returning a value entry.
        '''
        table = type(self).UNARY if token.arity == UNARY else type(self).BINARY
        args = [self._resolve(entry) for entry in entries]
        try:
            result = table[token.kind](*args)
        except ZeroDivisionError:
            message = type(self).ZERO_DIVISION.get(token.kind,
                                                   'Division by zero')
            raise EvalError(message, token.position) from None
        except OverflowError:
            raise EvalError('Result of {} too large'.format(repr(token.text)),
                            token.position) from None
        if isinstance(result, complex):
            raise EvalError(
                'Result of {} is not real'.format(repr(token.text)),
                token.position)
        if not math.isfinite(result):
            raise EvalError('Result of {} too large'.format(repr(token.text)),
                            token.position)
        log.debug('%s %s -> %r', token, args, result)
        return Entry(float(result), None, entries[0].position)


def evaluate(postfix, store):
    '''
    Evaluate postfix tokens against store, returning a float.
    '''
    return Machine(store).evaluate(postfix)
