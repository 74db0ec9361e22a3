'''
Interest rate conversions. Rates are in percent.
'''

import math

from .util import DomainError, finite, tagged, wrap_user_errors


# Income tax brackets for the tax-equivalent rate keys.
FIFTEEN_PERCENT = 15.0
TWENTY_TWO_POINT_FIVE_PERCENT = 22.5


@wrap_user_errors('Cannot compound {0}%')
def _compound(rate, periods):
    '''
    Rate over one period compounded for periods periods, in percent.
    '''
    base = 1 + rate / 100
    if base < 0 and not float(periods).is_integer():
        raise DomainError('Rate {}% is below -100%'.format(rate))
    return finite((math.pow(base, periods) - 1) * 100)


def tax_equivalent(rate, tax):
    '''
    Taxed rate netting the same as tax-exempt rate after tax percent.
    '''
    if tax >= 100:
        raise DomainError('Nothing is left after {}% tax'.format(tax))
    return finite(rate / (1 - tax / 100))


@tagged
def to_monthly_rate(yearly):
    '''
    Effective yearly rate to the monthly rate compounding to it.
    '''
    return _compound(yearly, 1 / 12)


@tagged
def to_yearly_rate(monthly):
    '''
    Monthly rate to the effective yearly rate it compounds to.
    '''
    return _compound(monthly, 12)


@tagged
def to_fifteen_percent_ir(rate):
    '''
    Tax-exempt rate to the gross rate paying as much after 15% income tax.
    '''
    return tax_equivalent(rate, FIFTEEN_PERCENT)


@tagged
def to_twenty_two_point_five_percent_ir(rate):
    '''
    Tax-exempt rate to the gross rate paying as much after 22.5% income tax.
    '''
    return tax_equivalent(rate, TWENTY_TWO_POINT_FIVE_PERCENT)


# Keypad labels to conversions.
CONVERSIONS = {
    '→i%mo': to_monthly_rate,
    '→i%yr': to_yearly_rate,
    '→15%IR': to_fifteen_percent_ir,
    '→22.5%IR': to_twenty_two_point_five_percent_ir,
}
