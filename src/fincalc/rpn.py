'''
Stack evaluator for the calculator's arithmetic and stack keys.

Pure: takes a stack (bottom first, top last) and returns a new one, leaving
the caller's untouched so a failed operation changes nothing.
'''

from collections import deque
import operator
import math

from .util import (DivisionByZero, DomainError, StackUnderflow, UnknownKey,
                   finite, tagged, wrap_user_errors)


def _divide(left, right):
    if right == 0:
        raise DivisionByZero('Cannot divide {} by zero'.format(left))
    return left / right


def _power(base, exponent):
    if base < 0 and not float(exponent).is_integer():
        raise DomainError('Cannot raise negative {} to non-integral {}'
                          .format(base, exponent))
    if base == 0 and exponent < 0:
        raise DivisionByZero('Cannot raise zero to negative {}'
                             .format(exponent))
    return math.pow(base, exponent)


def _reciprocal(only):
    if only == 0:
        raise DivisionByZero('Zero has no reciprocal')
    return 1 / only


def _sqrt(only):
    if only < 0:
        raise DomainError('Cannot take square root of negative {}'
                          .format(only))
    return math.sqrt(only)


def _swap(stack):
    stack.extend(_popstack(stack, 2))


def _rolldown(stack):
    stack.rotate(-1)


# Operators taking the entry below the top (left) and the top (right).
BINARY = {
    '+': operator.__add__,
    '-': operator.__sub__,
    '×': operator.__mul__,
    '÷': _divide,
    'y^x': _power,
}

# Operators replacing the top.
UNARY = {
    '1/x': _reciprocal,
    '√x': _sqrt,
    'CHS': operator.__neg__,
}

# Operators rearranging the stack in place, with the fewest entries they need.
STACK = {
    'x⇔y': (_swap, 2),
    'R↓': (_rolldown, 0),
}

ALIASES = {
    'add': '+',
    'subtract': '-',
    'multiply': '×',
    'divide': '÷',
    'power': 'y^x',
    'swap': 'x⇔y',
    'roll-down': 'R↓',
    'reciprocal': '1/x',
    'square-root': '√x',
    'negate': 'CHS',
}

OPERATORS = dict()
for namespace in BINARY, UNARY, STACK:
    OPERATORS.update(namespace)


def canonical(op):
    '''
    Return the keypad label for an operator label or name.
    '''
    op = ALIASES.get(op, op)
    if op not in OPERATORS:
        raise UnknownKey('No such operator {}'.format(repr(op)))
    return op


def _popstack(stack, n=1):
    '''
    Pop specified number of entries, topmost first.
    '''
    if len(stack) < n:
        raise StackUnderflow('Less than {} element(s) on stack'.format(n))
    return [stack.pop() for _ in range(n)]


@wrap_user_errors('Cannot apply {1}')
def _apply(stack, op, operand=None):
    '''
    Raising version of apply.
    '''
    op = canonical(op)
    stack = deque(stack)
    if operand is not None:
        stack.append(finite(operand, 'Operand'))
    if op in BINARY:
        right, left = _popstack(stack, 2)
        stack.append(finite(BINARY[op](left, right)))
    elif op in UNARY:
        only, = _popstack(stack)
        stack.append(finite(UNARY[op](only)))
    else:
        rearrange, needs = STACK[op]
        if len(stack) < needs:
            raise StackUnderflow('Less than {} element(s) on stack'
                                 .format(needs))
        rearrange(stack)
    return list(stack), stack[-1] if stack else None


@tagged
def apply(stack, op, operand=None):
    '''
    Apply operator to stack, returning Result of (new stack, new top).

    A supplied operand is entered as the new top first. Binary operators then
    combine the two topmost entries into one, the entry below the top being
    the left argument. So [5] + 3 gives [8], and [6, 2] ÷ gives [3].
    '''
    return _apply(stack, op, operand)
