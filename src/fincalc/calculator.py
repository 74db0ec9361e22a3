'''
Keypad session: the state behind the display, fed one key at a time.
'''

from . import dates, rates, rpn, tvm
from .util import CalculatorError, FormatError, UnknownKey, finite


DIGITS = tuple('0123456789')

# The keypad, row by row. Blank keys are spacers.
KEYPAD = (
    ('N', 'i', 'PV', 'PMT', 'FV'),
    ('→15%IR', '→22.5%IR', '', '', ''),
    ('x⇔y', 'CLx', 'R↓', 'ΔMTS', '→i%mo'),
    ('y^x', '1/x', '√x', 'CHS', '→i%yr'),
    ('EEX', 'ENTER', '7', '8', '9'),
    ('STO', 'RCL', '4', '5', '6'),
    ('+', '-', '1', '2', '3'),
    ('÷', '×', '0', '.', 'RESET'),
)
LABELS = frozenset(label for row in KEYPAD for label in row if label)

# Keys reachable from a plain keyboard.
ALIASES = {
    '*': '×',
    '/': '÷',
    '^': 'y^x',
    'swap': 'x⇔y',
    'rdn': 'R↓',
    'sqrt': '√x',
    'inv': '1/x',
    'chs': 'CHS',
    'mts': 'ΔMTS',
    'mo': '→i%mo',
    'yr': '→i%yr',
    'ir15': '→15%IR',
    'ir22': '→22.5%IR',
    'enter': 'ENTER',
    'clx': 'CLx',
    'eex': 'EEX',
    'sto': 'STO',
    'rcl': 'RCL',
    'reset': 'RESET',
    'n': 'N',
    'pv': 'PV',
    'pmt': 'PMT',
    'fv': 'FV',
}

TVM_KEYS = frozenset(('N', 'i', 'PV', 'PMT', 'FV'))
STACK_KEYS = frozenset(rpn.BINARY) | frozenset(rpn.STACK)


def canonical(key):
    '''
    Return the keypad label for a key label or alias.
    '''
    key = ALIASES.get(key, key)
    if key not in LABELS:
        raise UnknownKey('No such key {}'.format(repr(key)))
    return key


def parse(text):
    '''
    Parse entered text into a number, tolerating half-typed exponents.
    '''
    if text.endswith(('e', 'e-')):
        text += '0'
    try:
        value = float(text)
    except ValueError as e:
        raise FormatError('Not a number: {}'.format(repr(text)), e) from e
    return finite(value, 'Entry')


def _negated(text):
    if text.startswith('-'):
        return text[1:]
    return '-' + text


class Calculator:
    '''
    Financial RPN calculator session.

    Owns the stack, the TVM registers, the memory registers and the text being
    typed; hands the arithmetic to the rpn, tvm, rates and dates modules. A
    key whose computation fails shows Error and changes nothing else.
    '''

    DEFAULT_PRECISION = 2
    ERROR_DISPLAY = 'Error'
    EMPTY_DISPLAY = '0.00'
    DATE_PLACEHOLDER = 'dd.mm.yyyy'
    MEMORIES = 10

    def __init__(self, precision=None):
        '''
        Create calculator in its reset state.

        :param precision: Decimal places shown for non-integral values.
        '''
        if precision is None:
            precision = type(self).DEFAULT_PRECISION
        self.precision = precision
        self.reset()

    def reset(self):
        '''
        Clear stack, registers, memories and anything being typed.
        '''
        self.stack = []
        self.registers = tvm.Registers()
        self.memories = [0.0] * type(self).MEMORIES
        self.input = ''
        # Next digit starts a new number instead of extending the shown one.
        self.fresh = False
        # The shown number is already the top of the stack.
        self.entered = False
        self.date_mode = False
        self.date_inputs = []
        self.storage = None
        self.error = None

    def press(self, key):
        '''
        Handle one key press.

        Errors from the computation leave the calculator showing Error; they
        are kept in self.error until the next key.
        '''
        key = canonical(key)
        self.error = None
        try:
            self._press(key)
        except CalculatorError as e:
            self._fail(e)

    def feed(self, keys):
        '''
        Press every key in turn.
        '''
        for key in keys:
            self.press(key)

    def _fail(self, error):
        self.error = error
        self.input = ''
        self.fresh = False
        self.entered = False
        self.date_mode = False
        self.date_inputs = []
        self.storage = None

    def _press(self, key):
        if key == 'RESET':
            return self.reset()
        if self.storage is not None:
            storage, self.storage = self.storage, None
            if key in DIGITS:
                return self._memory(storage, int(key))
        if key == 'ΔMTS':
            self.date_mode = True
            self.date_inputs = []
            self._show('')
        elif self.date_mode:
            self._date_key(key)
        elif key in DIGITS:
            self._type(key)
        elif key == '.':
            if self.fresh or not self.input:
                self._show('0.')
            elif '.' not in self.input and 'e' not in self.input:
                self.input += '.'
        elif key == 'EEX':
            if self.fresh or not self.input:
                self._show('1e')
            elif 'e' not in self.input:
                self.input += 'e'
        elif key == 'ENTER':
            if self.input:
                self.stack.append(parse(self.input))
                self.entered = True
                self.fresh = True
        elif key == 'CLx':
            self._show('0', fresh=True)
        elif key == 'CHS':
            self._chs()
        elif key in ('STO', 'RCL'):
            self.storage = key
        elif key in rpn.OPERATORS:
            self._rpn(key)
        elif key in rates.CONVERSIONS:
            if self.input:
                value = rates.CONVERSIONS[key](parse(self.input)).unwrap()
                self._show(repr(value), fresh=True)
        elif key in TVM_KEYS:
            self._tvm(key)

    def _show(self, text, fresh=False, entered=False):
        self.input = text
        self.fresh = fresh
        self.entered = entered

    def _type(self, digit):
        if self.fresh:
            self._show(digit)
        else:
            self.input += digit

    def _operand(self):
        '''
        Number typed but not yet on the stack, if any.
        '''
        if not self.input or self.entered:
            return None
        return parse(self.input)

    def _current(self):
        '''
        Number the display stands for.
        '''
        if self.input:
            return parse(self.input)
        elif self.stack:
            return self.stack[-1]
        return 0.0

    def _chs(self):
        if self.input and not self.entered:
            # Text toggle, so it works on half-typed numbers too. While an
            # exponent is being typed, it is the exponent's sign that flips.
            mantissa, marker, exponent = self.input.partition('e')
            if marker and not self.fresh:
                self.input = mantissa + marker + _negated(exponent)
            else:
                self.input = _negated(self.input)
        elif self.stack:
            self._rpn('CHS')

    def _rpn(self, key):
        operand = self._operand()
        if key in STACK_KEYS and not self.stack:
            return
        if operand is None and not self.stack:
            return
        self.stack, value = rpn.apply(self.stack, key, operand).unwrap()
        self._show(repr(value), fresh=True, entered=True)

    def _tvm(self, key):
        target = tvm.canonical(key)
        if self.input:
            value = parse(self.input)
            self.registers = self.registers._replace(**{target: value})
            self._show('')
            return
        value = tvm.solve(self.registers, target).unwrap()
        if target == 'N':
            value = tvm.whole_periods(value)
        self.registers = self.registers._replace(**{target: value})
        self._show(repr(value), fresh=True)

    def _date_key(self, key):
        if key in DIGITS or key == '.':
            self._type(key)
        elif key == 'ENTER' and self.input:
            if not self.date_inputs:
                dates.parse_date(self.input)
                self.date_inputs = [self.input]
                self._show('')
            else:
                first, = self.date_inputs
                months = dates.calculate_months_between_dates(
                    first, self.input).unwrap()
                self.date_mode = False
                self.date_inputs = []
                self._show(str(months), fresh=True)

    def _memory(self, storage, index):
        if storage == 'STO':
            self.memories[index] = self._current()
        else:
            self._show(repr(self.memories[index]), fresh=True)

    def format(self, number):
        '''
        Render number the way the display does.
        '''
        if float(number).is_integer():
            return str(int(number))
        return '{:.{}f}'.format(number, self.precision)

    def display(self):
        '''
        Return what the display shows.
        '''
        if self.error is not None:
            return type(self).ERROR_DISPLAY
        if self.date_mode and not self.input:
            return type(self).DATE_PLACEHOLDER
        if not self.input:
            if self.stack:
                return self.format(self.stack[-1])
            return type(self).EMPTY_DISPLAY
        if self.fresh:
            try:
                value = parse(self.input)
            except CalculatorError:
                return type(self).ERROR_DISPLAY
            return self.format(value)
        return self.input
