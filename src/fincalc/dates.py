'''
Whole months between two dates, typed as dd.mm.yyyy.
'''

from datetime import date

import regex

from .util import FormatError, tagged


DATE = r'(?<day>\d{1,2})\.(?<month>\d{1,2})\.(?<year>\d{4})'


def parse_date(token):
    '''
    Parse a dd.mm.yyyy token into a date.
    '''
    match = regex.fullmatch(DATE, token.strip())
    if match is None:
        raise FormatError('Not a dd.mm.yyyy date: {}'.format(repr(token)))
    try:
        return date(int(match['year']),
                    int(match['month']),
                    int(match['day']))
    except ValueError as e:
        raise FormatError('No such date: {}'.format(token), e) from e


def _whole_months(earlier, later):
    months = (later.year - earlier.year) * 12 + later.month - earlier.month
    # The last month isn't whole until its day of month comes round.
    if later.day < earlier.day:
        months -= 1
    return months


@tagged
def calculate_months_between_dates(date1, date2):
    '''
    Whole months from date1 to date2, negative if date2 comes first.
    '''
    first, second = parse_date(date1), parse_date(date2)
    if second < first:
        return -_whole_months(second, first)
    return _whole_months(first, second)
