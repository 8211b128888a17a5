class Options:
    '''
    Per-session calculator settings.

    Handed explicitly to the Calculator; nothing here is global.
    '''

    DEFAULT_PRECISION = 3
    # Settings the REPL lets users flip on and off.
    TOGGLES = ('verbose', 'rpn', 'solve')

    def __init__(self, verbose=False, rpn=False, solve=True, precision=None):
        '''
        :param verbose: Show each token as it is read.
        :param rpn: Show the postfix form of each expression.
        :param solve: Evaluate expressions, rather than only converting them.
        :param precision: Decimals shown for results.
        '''
        self.verbose = verbose
        self.rpn = rpn
        self.solve = solve
        if precision is None:
            precision = type(self).DEFAULT_PRECISION
        self.precision = int(precision)
        if self.precision < 0:
            raise ValueError('Negative precision {}'.format(precision))

    def toggle(self, name):
        '''
        Flip boolean setting, returning its new value.
        '''
        if name not in type(self).TOGGLES:
            raise KeyError(name)
        value = not getattr(self, name)
        setattr(self, name, value)
        return value

    def format(self, value):
        '''
        Render a result at the configured precision.
        '''
        return '{:.{}f}'.format(value, self.precision)

    def __repr__(self):
        return 'Options(verbose={}, rpn={}, solve={}, precision={})'.format(
            self.verbose, self.rpn, self.solve, self.precision)
