'''
Rate conversion tests
'''

from fincalc import rates
from fincalc.util import DomainError

from pytest import approx, mark, raises


def test_monthly_from_yearly():
    assert rates.to_monthly_rate(12.682503013196972).value == approx(1)


def test_yearly_from_monthly():
    assert rates.to_yearly_rate(1).value == approx(12.6825030132)


@mark.parametrize('monthly', [-50, -1, 0, 0.5, 1, 3.75, 25])
def test_conversions_invert(monthly):
    yearly = rates.to_yearly_rate(monthly).unwrap()
    assert rates.to_monthly_rate(yearly).unwrap() == approx(monthly)


def test_monthly_below_minus_hundred_percent():
    result = rates.to_monthly_rate(-150)
    assert not result.ok
    assert isinstance(result.error, DomainError)


def test_yearly_below_minus_hundred_percent():
    # Whole powers of a negative base are fine.
    assert rates.to_yearly_rate(-200).value == approx(0)


def test_fifteen_percent_tax_equivalent():
    assert rates.to_fifteen_percent_ir(8.5).value == approx(10)


def test_twenty_two_point_five_percent_tax_equivalent():
    assert rates.to_twenty_two_point_five_percent_ir(7.75).value == approx(10)


def test_tax_equivalent_of_everything():
    with raises(DomainError):
        rates.tax_equivalent(10, 100)


def test_keypad_labels():
    assert set(rates.CONVERSIONS) == {'→i%mo', '→i%yr', '→15%IR', '→22.5%IR'}
    assert rates.CONVERSIONS['→i%yr'](0).value == 0
