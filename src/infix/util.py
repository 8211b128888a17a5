from functools import wraps


class CalcError(Exception):
    '''
    Base of every error the calculator reports back to the user.

    :param message: Human readable description.
    :param position: 0-based column in the source line, if known.
    '''
    def __init__(self, message, position=None):
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self):
        if self.position is None:
            return self.message
        return '{} (at column {})'.format(self.message, self.position + 1)


class TokenizeError(CalcError):
    pass


class ExpressionSyntaxError(CalcError):
    pass


class EvalError(CalcError):
    pass


class UndefinedVariable(EvalError):
    def __init__(self, name, position=None):
        super().__init__('Undefined variable {}'.format(repr(name)), position)
        self.name = name


def wrap_user_errors(fmt, error=CalcError):
    '''
    Ugly hack decorator that converts stray exceptions to calculator errors.

    Passes through CalcErrors. The message is formatted with the wrapped
    call's arguments.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except CalcError:
                raise
            except Exception as e:
                raise error(fmt.format(*args, **kwargs)) from e
        return wrapper
    return decorator
