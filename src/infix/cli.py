from os import isatty, path
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from .calculator import Calculator
from .config import Options
from .converter import Converter
from .lexer import Lexer
from .log import log
from .util import CalcError


HELP = '''\
Infix to RPN calculator
\t?|.h|.help  - this text
\t.v|.verbo - verbose mode toggle
\t.r|.rpn   - show the rpn string
\t.s|.solve - toggle the solver flag
\t.a|.vars  - show the vars table
\t.p|.print var - show the value of a variable
\tq|.q|.quit - quit

example:
var1 = 12
var2 = 2
var3 = 7
var4 = (var3 + var1) * var2
.p var4
var4 = 38.000
'''


class InteractiveInput:
    def __init__(self, prompt, history=None):
        self.prompt = prompt
        self.history = history

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    # Persistent, like readline's
                                    history=self.history,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class Session:
    '''
    One user's run of the calculator: expressions and dot-commands.

    Prints results to out and errors to err, carrying on after errors.
    '''

    def __init__(self, options=None, store=None, out=None, err=None):
        self.calculator = Calculator(options, store)
        # None means whatever sys.stdout, sys.stderr are at the time
        self.out = out
        self.err = err
        self.finished = False

    @property
    def options(self):
        return self.calculator.options

    @property
    def store(self):
        return self.calculator.store

    def feed(self, line):
        '''
        Handle one line of input.
        '''
        line = line.strip()
        if not line:
            return
        elif line == '?':
            self.showhelp()
        elif line == 'q':
            self.quit()
        elif line[0] in './' and line[1:2].isalpha():
            self.command(line[1:])
        else:
            self.expression(line)

    def command(self, text):
        '''
        Run dot-command text (its leading . or / already gone).
        '''
        name, _, argument = text.partition(' ')
        action = type(self).COMMANDS.get(name)
        if action is None:
            self.print('unknown command: .{}'.format(text))
            self.showhelp()
            return
        try:
            action(self, argument.strip() or None)
        except CalcError as e:
            self.error(e)

    def expression(self, line):
        '''
        Calculate one expression and show what the options ask for.
        '''
        try:
            if self.options.verbose:
                for token in self.calculator.lex(line):
                    self.print('{}\t"{}"'.format(token.kind.name, token.text))
            result = self.calculator.run(line)
        except CalcError as e:
            log.debug('failed on %r', line, exc_info=True)
            self.error(e)
            return
        if self.options.rpn:
            self.print('rpn:', ' '.join(map(str, result.postfix)))
        if result.value is not None:
            self.print(self.options.format(result.value))

    def print(self, *args, **kwargs):
        print(*args, file=self.out, **kwargs)

    def error(self, e):
        print('error:', e, file=self.err or sys.stderr)

    def showhelp(self, argument=None):
        self.print(HELP, end='')

    def quit(self, argument=None):
        self.print('quit')
        self.finished = True

    def _toggler(name, label):
        def toggle(self, argument=None):
            value = self.options.toggle(name)
            self.print('{} flag: {}'.format(label, str(value).lower()))
        toggle.__name__ = 'toggle' + name
        return toggle

    def showvars(self, argument=None):
        '''
        Print every variable and its value.
        '''
        self.print('All variables:')
        if not len(self.store):
            self.print('\tlist is empty')
        for name, value in self.store.entries():
            self.print('{} = {}'.format(name, self.options.format(value)))

    def printvar(self, name=None):
        '''
        Print one variable's value.
        '''
        if name is None:
            self.error('usage: .print <variable>')
            return
        value = self.store.get(name)
        self.print('{} = {}'.format(name, self.options.format(value)))

    COMMANDS = {
        'h': showhelp,
        'help': showhelp,
        'v': _toggler('verbose', 'verbose'),
        'verbo': _toggler('verbose', 'verbose'),
        'r': _toggler('rpn', 'rpn'),
        'rpn': _toggler('rpn', 'rpn'),
        's': _toggler('solve', 'solve'),
        'solve': _toggler('solve', 'solve'),
        'a': showvars,
        'vars': showvars,
        'p': printvar,
        'print': printvar,
        'q': quit,
        'quit': quit,
    }
    del _toggler


class CLI:
    '''
    Command line interface to the infix calculator.
    '''

    DEFAULT_PROMPT = 'enter an expression: '
    HISTORY_FILE = '~/.infix_history'

    def dumper(self):
        '''
        Dump each line's postfix tokens, with kind and arity.
        '''
        converter = Converter()
        print('<kind>\t<repr(text)>\t<arity>')
        for line in self.args.expressions:
            try:
                postfix = converter.convert(line.strip())
            except CalcError as e:
                print('error:', e, file=sys.stderr)
                continue
            for token in postfix:
                print(token.kind.name,
                      repr(token.text),
                      token.arity,
                      sep='\t')

    def executor(self):
        '''
        Run calculator session over input lines.
        '''
        session = Session(self.options)
        for line in self.args.expressions:
            session.feed(line)
            if session.finished:
                break

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        print(Lexer.LEXEME)

    def _prompting_input(self):
        '''
        Return prompting input, or plain stdin...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(sys.stdin.fileno()) and isatty(sys.stdout.fileno()):
            history = FileHistory(path.expanduser(self.HISTORY_FILE))
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    history=history)
        else:
            return sys.stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(description='Infix calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true',
                                          help='show tokens, and tracebacks '
                                               'in the log')
        self.argument_parser.add_argument('-r', '--rpn',
                                          action='store_true',
                                          help='show postfix form')
        self.argument_parser.add_argument('-n', '--no-solve',
                                          dest='solve',
                                          action='store_false',
                                          help='convert only')
        self.argument_parser.add_argument('-k', '--precision',
                                          type=int,
                                          default=Options.DEFAULT_PRECISION)
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=sys.stdin)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        try:
            self.options = Options(verbose=self.args.verbose,
                                   rpn=self.args.rpn,
                                   solve=self.args.solve,
                                   precision=self.args.precision)
        except ValueError as e:
            self.argument_parser.error(str(e))
        if self.args.verbose:
            log.setLevel(logging.DEBUG)
        if self.args.expressions is sys.stdin:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except KeyboardInterrupt:
            sys.exit(1)
