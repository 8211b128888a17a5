from collections import namedtuple
from enum import Enum
from functools import reduce
import operator

import regex

from .log import log
from .util import TokenizeError


UNARY, BINARY = 1, 2


class TokenKind(Enum):
    # Housekeeping
    END = 'end'
    ERROR = 'error'
    # Operators
    PLUS = '+'
    MINUS = '-'
    STAR = '*'
    SLASH = '/'
    PERC = '%'
    CARAT = '^'
    LT = '<'
    GT = '>'
    LTE = '<='
    GTE = '>='
    EQU = '=='
    NEQU = '!='
    EQUAL = '='
    OPAREN = '('
    CPAREN = ')'
    NOT = 'not'
    AND = 'and'
    OR = 'or'
    # Constructed
    NUM = 'number'
    SYM = 'symbol'


class Token(namedtuple('Token', 'kind text position value arity')):
    '''
    Immutable lexeme.

    :param kind: TokenKind.
    :param text: Exact source text.
    :param position: 0-based column the text starts at.
    :param value: Parsed float, for numbers only.
    :param arity: UNARY or BINARY, once the converter has decided.
    '''
    __slots__ = ()

    def __new__(cls, kind, text, position=None, value=None, arity=None):
        return super().__new__(cls, kind, text, position, value, arity)

    @property
    def isoperand(self):
        return self.kind in (TokenKind.NUM, TokenKind.SYM)

    def __str__(self):
        # _ like in dc, so that postfix output stays unambiguous
        if self.kind is TokenKind.MINUS and self.arity == UNARY:
            return '_'
        if self.kind is TokenKind.NOT:
            return 'not'
        return self.text


OPERATOR_KINDS = frozenset({
    TokenKind.PLUS, TokenKind.MINUS, TokenKind.STAR, TokenKind.SLASH,
    TokenKind.PERC, TokenKind.CARAT,
    TokenKind.LT, TokenKind.GT, TokenKind.LTE, TokenKind.GTE,
    TokenKind.EQU, TokenKind.NEQU, TokenKind.EQUAL,
    TokenKind.NOT, TokenKind.AND, TokenKind.OR,
})

# Spellings of punctuation. ! is logical not, like not.
PUNCTUATION = {kind.value: kind
               for kind
               in OPERATOR_KINDS | {TokenKind.OPAREN, TokenKind.CPAREN}
               if not kind.value.isalpha()}
PUNCTUATION['!'] = TokenKind.NOT

KEYWORDS = {kind.value: kind
            for kind
            in (TokenKind.NOT, TokenKind.AND, TokenKind.OR)}


class Cursor:
    '''
    Position within one line of source text.

    The only state tokenizing needs; re-reading from the same position gives
    the same tokens.
    '''

    def __init__(self, text, position=0):
        self.text = text
        self.position = position

    @property
    def exhausted(self):
        return self.position >= len(self.text)

    def __repr__(self):
        return 'Cursor({}, {})'.format(repr(self.text), self.position)


class Lexer:
    '''
    Lexer for the infix calculator's *regular* grammar.

    Holds no state of its own; the cursor carries the position.
    '''
    SPACE = r'[\x20\t]+'
    # 12, 1.5, .5, 3. and, so they get reported, 1.2.3 and .
    NUMBER = r'''
              (?:
                  \d
                  [\d.]*
              )|(?:
                  \.
                  [\d.]*
              )
              '''
    SYMBOL = r'[A-Za-z_]+'
    # Longest spellings first, so <= never lexes as < then =.
    OPERATOR = r'(?:' + r'|'.join(map(regex.escape,
                                      sorted(PUNCTUATION,
                                             key=len,
                                             reverse=True))) + r')'

    # All possible lexemes.
    LEXEME = r'(?<space>' + SPACE + r')|' \
             r'(?<number>' + NUMBER + r')|' \
             r'(?<symbol>' + SYMBOL + r')|' \
             r'(?<operator>' + OPERATOR + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.POSIX,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def __init__(self):
        self.pattern = regex.compile(type(self).LEXEME,
                                     flags=type(self).FLAGS)

    def next_token(self, cursor):
        '''
        Return the token at the cursor, advancing it past the token.

        Skips whitespace. Returns an END token once the text is exhausted, and
        an ERROR token for a character no lexeme starts with.
        '''
        while not cursor.exhausted:
            start = cursor.position
            match = self.pattern.match(cursor.text, start)
            if match is None:
                cursor.position += 1
                return Token(TokenKind.ERROR, cursor.text[start], start)
            cursor.position = match.end()
            groups = self.matchedgroups(match)
            if 'space' in groups:
                continue
            return self.parse(groups, start)
        return Token(TokenKind.END, '', cursor.position)

    def parse(self, groups, position):
        '''
        Make a token out of matched lexeme groups.
        '''
        if 'number' in groups:
            text = groups['number']
            return Token(TokenKind.NUM, text, position,
                         value=self._number(text, position))
        elif 'symbol' in groups:
            text = groups['symbol']
            return Token(KEYWORDS.get(text, TokenKind.SYM), text, position)
        else:
            text = groups['operator']
            return Token(PUNCTUATION[text], text, position)

    def _number(self, text, position):
        try:
            return float(text)
        except ValueError as e:
            raise TokenizeError('Malformed number {}'.format(repr(text)),
                                position) from e

    def lex(self, line):
        '''
        Take a line and yield all tokens, END excluded.

        Raises on the first unrecognized character.
        '''
        cursor = Cursor(line)
        while True:
            token = tokenize_next(cursor, lexer=self)
            if token.kind is TokenKind.END:
                return
            yield token

    def matchedgroups(self, match):
        '''
        Return matched lexeme groups.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value}


_LEXER = Lexer()


def tokenize_next(cursor, lexer=None):
    '''
    Return next token at cursor, raising TokenizeError on unknown characters.
    '''
    token = (lexer or _LEXER).next_token(cursor)
    if token.kind is TokenKind.ERROR:
        raise TokenizeError(
            'Unrecognized character {}'.format(repr(token.text)),
            token.position)
    log.debug('token %s %r at %s', token.kind.name, token.text, token.position)
    return token


def tokenize(text):
    '''
    Yield every token of text, END excluded.
    '''
    return _LEXER.lex(text)
