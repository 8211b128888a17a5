from collections import namedtuple

from .config import Options
from .converter import Converter
from .lexer import Lexer
from .machine import Machine
from .store import VariableStore


# What one line of input came to. value is None unless solving.
Result = namedtuple('Result', 'postfix value')


class Calculator:
    '''
    Infix calculator: tokenizer, converter and evaluator over one store.

    One expression is handled at a time, start to finish. An error anywhere
    discards that expression's tokens and stacks, but assignments it already
    made stay in the store.
    '''

    def __init__(self, options=None, store=None):
        '''
        :param options: Options; defaults if not given.
        :param store: VariableStore shared by every expression run here.
        '''
        self.options = Options() if options is None else options
        self.store = VariableStore() if store is None else store
        self.lexer = Lexer()
        self.converter = Converter(self.lexer)
        self.machine = Machine(self.store)

    def lex(self, line):
        '''
        Yield the tokens of one line, as the converter will read them.
        '''
        return self.lexer.lex(line)

    def run(self, line):
        '''
        Convert and (if solving) evaluate one line.
        '''
        postfix = self.converter.convert(line)
        value = self.machine.evaluate(postfix) if self.options.solve else None
        return Result(postfix, value)

    def __call__(self, line):
        '''
        Evaluate one line, returning its value.
        '''
        return self.machine.evaluate(self.converter.convert(line))
