import regex

from .lexer import KEYWORDS
from .util import EvalError, ExpressionSyntaxError, UndefinedVariable, \
    wrap_user_errors


class VariableStore:
    '''
    Named variables, kept across expressions for the life of a session.

    Not thread safe. Give each session its own.
    '''

    NAME = regex.compile(r'[A-Za-z_]+')

    def __init__(self, registers=None):
        self.registers = dict()
        for name, value in dict(registers or {}).items():
            self.set(name, value)

    def get(self, name):
        '''
        Return the value of variable name.

        An unknown name is an error, never an implicit zero.
        '''
        try:
            return self.registers[name]
        except KeyError:
            raise UndefinedVariable(name) from None

    @wrap_user_errors('Cannot store {2!r} into {1}', EvalError)
    def set(self, name, value):
        '''
        Store value into variable, creating or overwriting it.
        '''
        if not self.NAME.fullmatch(name) or name in KEYWORDS:
            raise ExpressionSyntaxError(
                'Invalid variable name {}'.format(repr(name)))
        self.registers[name] = float(value)
        return self.registers[name]

    def entries(self):
        '''
        Return all (name, value) pairs, sorted by name.
        '''
        return sorted(self.registers.items())

    def __contains__(self, name):
        return name in self.registers

    def __len__(self):
        return len(self.registers)

    def __iter__(self):
        return iter(sorted(self.registers))

    def __repr__(self):
        return 'VariableStore({})'.format(self.registers)
