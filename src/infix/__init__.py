'''
Infix calculator.

Reads infix arithmetic, comparison and logical expressions, converts them to
postfix (RPN) by the shunting yard algorithm, and evaluates the postfix form
against variables that persist from one expression to the next.

    >>> calculator = Calculator()
    >>> calculator('x = 2 ^ 3 ^ 2')
    512.0
    >>> calculator('x % 10 >= 2 and not (x < 0)')
    1.0

Doubles only: no complex numbers, no big numbers, no user functions.
'''

from .calculator import Calculator
from .converter import Converter, convert_to_postfix
from .lexer import Cursor, Lexer, Token, TokenKind, tokenize, tokenize_next
from .machine import Machine, evaluate
from .store import VariableStore
from .util import CalcError, TokenizeError, ExpressionSyntaxError, EvalError, \
    UndefinedVariable


__all__ = ('Calculator', 'Converter', 'Cursor', 'Lexer', 'Machine', 'Token',
           'TokenKind', 'VariableStore', 'convert_to_postfix', 'evaluate',
           'tokenize', 'tokenize_next', 'CalcError', 'TokenizeError',
           'ExpressionSyntaxError', 'EvalError', 'UndefinedVariable')
