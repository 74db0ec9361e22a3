from pytest import Item, fixture

from fincalc.calculator import Calculator
from fincalc.tvm import Registers


@fixture
def calculator():
    return Calculator()


@fixture
def loan():
    '''
    30 monthly payments of 400 at 1% paying off a loan of 10_323.08.
    '''
    return Registers(N=30, IYR=1, PV=10323.08, PMT=-400, FV=0)


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every passing assertion, so a run's numbers can be audited.

    Use with pytest -rP, and enable_assertion_pass_hook set.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))
    print('actual', item.name + ':' + str(lineno),
          '\n'.join(str(expl).splitlines()[:-2]))
