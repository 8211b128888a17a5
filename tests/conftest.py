from pytest import Item, fixture

from infix.calculator import Calculator
from infix.config import Options
from infix.store import VariableStore


@fixture
def store() -> VariableStore:
    return VariableStore()


@fixture
def calculator(store: VariableStore) -> Calculator:
    return Calculator(Options(), store)


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Use with pytest -rP -o enable_assertion_pass_hook=true.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))
    print('actual', item.name + ':' + str(lineno),
          '\n'.join(str(expl).splitlines()[:-2]))
