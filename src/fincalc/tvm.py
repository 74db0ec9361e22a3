'''
Time value of money.

The five registers are tied together by the ordinary annuity equation,
payments at the end of each period:

    PV·(1+i)^N + PMT·[(1+i)^N − 1]/i + FV = 0,    i = IYR/100

which at i = 0 degenerates to PV + PMT·N + FV = 0. Money paid out is
negative, money received positive.

Given any four registers, the fifth has a closed form, except the rate, which
is found with Newton-Raphson.
'''

from collections import namedtuple
import math

from .util import (ConvergenceError, DomainError, UnknownKey, finite, tagged,
                   wrap_user_errors)


# Newton-Raphson settings for the rate, on the fractional (not percent) rate.
INITIAL_GUESS = 0.1
TOLERANCE = 1e-9
MAX_ITERATIONS = 100
# Rates closer to zero than this use the i = 0 limit forms.
ZERO_RATE = 1e-12
# Rates bisection searches between, from just above −100% up, when
# Newton-Raphson fails.
BRACKET = (-1 + 1e-9, -0.9, -0.5, 0.0) + tuple(0.1 * 2 ** k
                                              for k in range(14))

TARGETS = 'N', 'IYR', 'PV', 'PMT', 'FV'
ALIASES = {
    'i': 'IYR',
}


class Registers(namedtuple('Registers', TARGETS)):
    '''
    The five TVM registers. IYR is the periodic rate in percent.
    '''
    __slots__ = ()

    def __new__(cls, N=0.0, IYR=0.0, PV=0.0, PMT=0.0, FV=0.0):
        return super().__new__(cls, N, IYR, PV, PMT, FV)


def _rate(registers):
    i = registers.IYR / 100
    if i <= -1:
        raise DomainError('Rate {}% leaves nothing to compound'
                          .format(registers.IYR))
    return i


def _growth(i, n):
    '''
    (1+i)^N, and the annuity factor [(1+i)^N − 1]/i.
    '''
    growth = math.pow(1 + i, n)
    if abs(i) < ZERO_RATE:
        return growth, n
    return growth, math.expm1(n * math.log1p(i)) / i


@wrap_user_errors('Cannot compute FV from {0}')
def compute_fv(registers):
    i = _rate(registers)
    growth, annuity = _growth(i, registers.N)
    return finite(-registers.PV * growth - registers.PMT * annuity)


@wrap_user_errors('Cannot compute PV from {0}')
def compute_pv(registers):
    i = _rate(registers)
    growth, annuity = _growth(i, registers.N)
    return finite((-registers.FV - registers.PMT * annuity) / growth)


@wrap_user_errors('Cannot compute PMT from {0}')
def compute_pmt(registers):
    i = _rate(registers)
    growth, annuity = _growth(i, registers.N)
    if annuity == 0:
        raise DomainError('No payment spreads over {} periods'
                          .format(registers.N))
    return finite(-(registers.PV * growth + registers.FV) / annuity)


@wrap_user_errors('Cannot compute N from {0}')
def compute_n(registers):
    '''
    Number of periods, as a real number; callers round up to whole periods.
    '''
    i = _rate(registers)
    pv, pmt, fv = registers.PV, registers.PMT, registers.FV
    if abs(i) < ZERO_RATE:
        if pmt == 0:
            raise DomainError('No payments and no interest never moves PV')
        return finite(-(pv + fv) / pmt)
    # (1+i)^N isolated from the annuity equation.
    numerator = pmt - fv * i
    denominator = pmt + pv * i
    if denominator == 0 or numerator / denominator <= 0:
        raise DomainError('No period count balances these cash flows')
    return finite(math.log(numerator / denominator) / math.log1p(i))


def _balance(i, n, pv, pmt, fv):
    '''
    Annuity equation residual f(i) and its derivative f'(i).
    '''
    if abs(i) < ZERO_RATE:
        return pv + pmt * n + fv, pv * n + pmt * n * (n - 1) / 2
    growth, annuity = _growth(i, n)
    dgrowth = n * math.pow(1 + i, n - 1)
    value = pv * growth + pmt * annuity + fv
    slope = pv * dgrowth + pmt * (dgrowth - annuity) / i
    return value, slope


def _residual(i, n, pv, pmt, fv):
    '''
    f(i) divided by (1+i)^N at positive rates, so it stays finite; same sign.
    '''
    if i < ZERO_RATE:
        return _balance(i, n, pv, pmt, fv)[0]
    discount = math.pow(1 + i, -n)
    return pv - pmt * math.expm1(-n * math.log1p(i)) / i + fv * discount


def _newton(guess, n, pv, pmt, fv):
    '''
    Fractional rate by Newton-Raphson, or None when the iteration doesn't
    settle inside the domain.
    '''
    i = guess
    try:
        for _ in range(MAX_ITERATIONS):
            value, slope = _balance(i, n, pv, pmt, fv)
            if not (math.isfinite(value) and math.isfinite(slope)):
                return None
            if slope == 0:
                raise ConvergenceError('Flat at {}%, cannot step'
                                       .format(i * 100))
            step = value / slope
            i -= step
            if i <= -1:
                return None
            if abs(step) < TOLERANCE:
                return i
    except (OverflowError, ZeroDivisionError, ValueError):
        return None
    return None


def _bisect(n, pv, pmt, fv):
    '''
    Fractional rate by bisection, on the lowest pair of BRACKET points the
    residual changes sign between.
    '''
    values = [(i, _residual(i, n, pv, pmt, fv)) for i in BRACKET]
    for (lo, low), (hi, high) in zip(values, values[1:]):
        if low == 0:
            return lo
        if (low < 0) == (high < 0):
            continue
        for _ in range(MAX_ITERATIONS):
            middle = (lo + hi) / 2
            value = _residual(middle, n, pv, pmt, fv)
            if value == 0 or hi - lo < TOLERANCE:
                return middle
            if (value < 0) == (low < 0):
                lo, low = middle, value
            else:
                hi = middle
        return (lo + hi) / 2
    raise ConvergenceError('No rate between {}% and {}% balances these '
                           'cash flows'.format(BRACKET[0] * 100,
                                               BRACKET[-1] * 100))


def compute_iyr(registers, guess=INITIAL_GUESS):
    '''
    Periodic rate in percent, by Newton-Raphson on the annuity equation.

    Where Newton-Raphson overshoots to −100% or below, or doesn't settle,
    bisection takes over, searching BRACKET from the lowest rate up. The
    equation may have several roots depending on the cash flow signs; this
    returns whichever of the two methods finds first.
    '''
    n, pv, pmt, fv = registers.N, registers.PV, registers.PMT, registers.FV
    if guess <= -1:
        raise DomainError('Cannot start from {}%'.format(guess * 100))
    i = _newton(guess, n, pv, pmt, fv)
    if i is None:
        try:
            i = _bisect(n, pv, pmt, fv)
        except (OverflowError, ZeroDivisionError, ValueError) as e:
            raise ConvergenceError('Rate diverged from {}%'
                                   .format(guess * 100), e) from e
    return finite(i * 100)


SOLVERS = {
    'N': compute_n,
    'IYR': compute_iyr,
    'PV': compute_pv,
    'PMT': compute_pmt,
    'FV': compute_fv,
}


def canonical(target):
    '''
    Return the register name for a register name or keypad label.
    '''
    target = ALIASES.get(target, target)
    if target not in SOLVERS:
        raise UnknownKey('No such register {}'.format(repr(target)))
    return target


@tagged
def solve(registers, target):
    '''
    Compute target register from the other four, returning a Result.

    The registers are not modified; storing the answer is up to the caller.
    '''
    return SOLVERS[canonical(target)](registers)


def whole_periods(n):
    '''
    Round a period count up to whole periods, partial ones not being payable.

    Floating point noise just above a whole number doesn't count.
    '''
    return float(math.ceil(round(n, 9)))
