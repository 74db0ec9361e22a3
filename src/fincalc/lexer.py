from functools import reduce
import operator

import regex

from .util import CalculatorError
from .calculator import ALIASES, LABELS, DIGITS


class Lexer:
    '''
    Lexer turning typed lines into calculator key presses.

    For consistency, needs to be instantiated, despite holding no internal
    state.
    '''
    # Integral part of a number
    INTEGRAL = r'''
                # DO NOT REPEAT ME! I REPEAT MYSELF INTERNALLY!
                (?:
                    # 1, 12, or the 1 in 1_200.
                    \d{1,3}
                    (?:
                        # The 4, 45, etc. in 1234, 12345, etc.
                        \d
                        |
                        # Thousands separators
                        (?:
                            _\d{3}
                        )
                    )*
                )
                '''
    # Fractional part of a number
    FRACTIONAL = r'''
                  (?:
                      \d+
                  )
                  '''
    # Power of ten, typed with EEX on the keypad
    EXPONENT = r'''
                (?:
                    e
                    \d*
                )
                '''
    # Number, as typed on the keypad.
    # String formatting and regex is a tricky business, because of the braces.
    # Be careful!
    NUMBER = r'''
              (?:
                  # 1, 1_200, 1_200. (notice trailing dot), 1.3, 1.3e5
                  {INTEGRAL}
                  (?:
                      \.
                      {FRACTIONAL}?
                  )?
                  {EXPONENT}?
              )|(?:
                  # .2
                  \.
                  {FRACTIONAL}
                  {EXPONENT}?
              )
              '''.format(INTEGRAL=INTEGRAL, FRACTIONAL=FRACTIONAL,
                         EXPONENT=EXPONENT)
    # Date, for ΔMTS
    DATE = r'''
            (?:
                # 1.6.2020, 01.06.2020
                \d{1,2}
                \.
                \d{1,2}
                \.
                \d{4}
            )
            '''

    # Typed by the number and date lexemes instead.
    assert set(DIGITS) | {'.'} <= LABELS
    # Longest first, so ENTER isn't taken for EEX or whatever else.
    NAMES = sorted((LABELS | frozenset(ALIASES)) - set(DIGITS) - {'.'},
                   key=len, reverse=True)
    KEY = r'(?:' + r'|'.join(map(regex.escape, NAMES)) + r')'
    SPACE = r'\s+'

    # All possible lexemes.
    LEXEME = r'(?<date>' + DATE + r')|' \
             r'(?<key>' + KEY + r')|' \
             r'(?<number>' + NUMBER + r')|' \
             r'(?<space>' + SPACE + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.POSIX,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def lex(self, line):
        '''
        Take a line and return all lexemes.

        Raises on the first bit of line that isn't a lexeme.
        '''
        while line:
            match = regex.match(type(self).LEXEME, line,
                                flags=type(self).FLAGS)
            if match is None:
                break
            yield match
            line = line[len(match.group(0)):]
        if line:
            raise CalculatorError("Couldn't lex {0}".format(line.strip()))

    def isfeedable(self, match):
        '''
        Return True if lexeme stands for key presses.
        '''
        return 'space' not in self.matchedgroups(match).keys()

    def matchedgroups(self, match):
        '''
        Return the lexeme kinds matched, and their text.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value}

    def keys(self, match):
        '''
        Return the key presses lexeme stands for.
        '''
        groups = self.matchedgroups(match)
        if 'key' in groups:
            return [groups['key']]
        elif 'number' in groups:
            return ['EEX' if char == 'e' else char
                    for char
                    in groups['number']
                    if char != '_']
        elif 'date' in groups:
            return list(groups['date'])
        return []
