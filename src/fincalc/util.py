from collections import namedtuple
from functools import wraps
import math


class CalculatorError(Exception):
    pass


class DivisionByZero(CalculatorError):
    pass


class DomainError(CalculatorError):
    pass


class ConvergenceError(CalculatorError):
    pass


class FormatError(CalculatorError):
    pass


class StackUnderflow(CalculatorError):
    pass


class UnknownKey(CalculatorError):
    pass


class Result(namedtuple('Result', ['value', 'error'])):
    '''
    Tagged outcome of a computation: either a value, or the error it failed
    with. Never both.
    '''
    __slots__ = ()

    @classmethod
    def success(cls, value):
        return cls(value, None)

    @classmethod
    def failure(cls, error):
        return cls(None, error)

    @property
    def ok(self):
        return self.error is None

    def unwrap(self):
        '''
        Return the value, or raise the error the computation failed with.
        '''
        if self.error is not None:
            raise self.error
        return self.value


# Python's own arithmetic failures, and what they mean on a calculator.
_TRANSLATIONS = (
    (ZeroDivisionError, DivisionByZero),
    (OverflowError, DomainError),
    (ValueError, DomainError),
)


def wrap_user_errors(fmt):
    '''
    Decorator that converts Python arithmetic exceptions to CalculatorErrors.

    Passes through CalculatorErrors. The message is formatted with the
    wrapped call's arguments.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except CalculatorError:
                raise
            except Exception as e:
                for python_error, error in _TRANSLATIONS:
                    if isinstance(e, python_error):
                        raise error(fmt.format(*args, **kwargs), e) from e
                raise
        return wrapper
    return decorator


def tagged(f):
    '''
    Decorator returning a Result instead of raising CalculatorErrors.
    '''
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return Result.success(f(*args, **kwargs))
        except CalculatorError as e:
            return Result.failure(e)
    return wrapper


def finite(value, what='Result'):
    '''
    Return value as a float, refusing NaN and infinities.
    '''
    if isinstance(value, complex):
        raise DomainError('{} {} is not real'.format(what, value))
    value = float(value)
    if not math.isfinite(value):
        raise DomainError('{} {} is not finite'.format(what, value))
    return value
