'''
Infix to postfix conversion, by Dijkstra's shunting yard.
'''

from collections import namedtuple
import logging

from .lexer import Lexer, Cursor, TokenKind, UNARY, BINARY, tokenize_next
from .log import log
from .util import ExpressionSyntaxError


LEFT, RIGHT = 'left', 'right'

Rank = namedtuple('Rank', 'precedence associativity')


class Converter:
    '''
    Shunting yard converter from infix tokens to postfix (RPN) tokens.

    Tags each operator it emits with its arity, so nothing downstream has to
    work out whether a - is negation or subtraction.
    '''

    # Higher binds tighter.
    BINARY = {
        TokenKind.EQUAL: Rank(0, RIGHT),
        TokenKind.OR: Rank(1, LEFT),
        TokenKind.AND: Rank(2, LEFT),
        TokenKind.EQU: Rank(3, LEFT),
        TokenKind.NEQU: Rank(3, LEFT),
        TokenKind.LT: Rank(4, LEFT),
        TokenKind.GT: Rank(4, LEFT),
        TokenKind.LTE: Rank(4, LEFT),
        TokenKind.GTE: Rank(4, LEFT),
        TokenKind.PLUS: Rank(5, LEFT),
        TokenKind.MINUS: Rank(5, LEFT),
        TokenKind.STAR: Rank(6, LEFT),
        TokenKind.SLASH: Rank(6, LEFT),
        TokenKind.PERC: Rank(6, LEFT),
        TokenKind.CARAT: Rank(8, RIGHT),
    }
    UNARY = {
        TokenKind.MINUS: Rank(7, RIGHT),
        TokenKind.NOT: Rank(7, RIGHT),
    }

    def __init__(self, lexer=None):
        self.lexer = lexer or Lexer()

    @classmethod
    def rank(cls, token):
        '''
        Return precedence and associativity of an arity-tagged operator.
        '''
        table = cls.UNARY if token.arity == UNARY else cls.BINARY
        return table[token.kind]

    def convert(self, source):
        '''
        Convert infix source text to a list of postfix tokens.

        :param source: One expression, as text.
        '''
        cursor = Cursor(source)
        output = []
        operators = []
        # Expecting an operand (or prefix operator, or open paren) next,
        # rather than a binary operator (or close paren).
        expect_operand = True
        last = None

        while True:
            token = tokenize_next(cursor, lexer=self.lexer)
            if token.kind is TokenKind.END:
                break
            last = token

            if token.isoperand:
                if not expect_operand:
                    raise self._misplaced(token)
                output.append(token)
                expect_operand = False

            elif token.kind is TokenKind.OPAREN:
                if not expect_operand:
                    raise self._misplaced(token)
                operators.append(token)

            elif token.kind is TokenKind.CPAREN:
                if expect_operand:
                    raise self._misplaced(token)
                while operators and operators[-1].kind is not TokenKind.OPAREN:
                    output.append(operators.pop())
                if not operators:
                    raise ExpressionSyntaxError('Unmatched )', token.position)
                operators.pop()

            elif expect_operand:
                if token.kind not in type(self).UNARY:
                    raise self._misplaced(token)
                # Nothing to its left to bind to; just stack it.
                operators.append(token._replace(arity=UNARY))

            else:
                if token.kind not in type(self).BINARY:
                    raise self._misplaced(token)
                token = token._replace(arity=BINARY)
                self._shunt(token, operators, output)
                operators.append(token)
                expect_operand = True

            if log.isEnabledFor(logging.DEBUG):
                log.debug('shunted %r: output %s, operators %s',
                          token.text,
                          ' '.join(map(str, output)),
                          ' '.join(map(str, operators)))

        if last is not None and expect_operand:
            raise ExpressionSyntaxError('Unexpected end of expression after '
                                        '{}'.format(repr(last.text)),
                                        last.position)
        while operators:
            top = operators.pop()
            if top.kind is TokenKind.OPAREN:
                raise ExpressionSyntaxError('Unmatched (', top.position)
            output.append(top)
        return output

    def _shunt(self, token, operators, output):
        '''
        Pop operators that bind at least as tightly as token to output.
        '''
        precedence, associativity = self.rank(token)
        while operators and operators[-1].kind is not TokenKind.OPAREN:
            top = self.rank(operators[-1]).precedence
            if associativity == LEFT and precedence <= top or \
               associativity == RIGHT and precedence < top:
                output.append(operators.pop())
            else:
                break

    def _misplaced(self, token):
        return ExpressionSyntaxError('Unexpected {}'.format(repr(token.text)),
                                     token.position)


def convert_to_postfix(source, lexer=None):
    '''
    Convert infix source text to a list of postfix tokens.
    '''
    return Converter(lexer).convert(source)
