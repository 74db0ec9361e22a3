'''
Financial RPN calculator.

An RPN stack for everyday arithmetic, plus the financial keys: the five time
value of money registers (N, i, PV, PMT, FV), each solvable from the other
four, monthly/yearly rate conversion, tax-equivalent rates at the 15% and
22.5% income tax brackets, and whole months between two dates.

The arithmetic lives in pure functions (rpn, tvm, rates, dates) returning
tagged Results; Calculator keeps the session state a keypad needs and the CLI
drives it from typed lines.
'''

from .cli import CLI
from .lexer import Lexer
from .calculator import Calculator
from .tvm import Registers
from .util import Result


__all__ = 'Calculator', 'Registers', 'Result', 'Lexer', 'CLI'
