import pytest
import typing
from nfaregex.automata.regex import NFAGenerator


@pytest.fixture(params=['cached', 'uncached'])
def generator(request: typing.Any) -> NFAGenerator:
    if request.param == 'cached':
        return NFAGenerator()
    return NFAGenerator(cache_enabled=False, transition_caching=False)
