import pytest

from services.exchange import ToolExchange
from services.tools import set_exchange


@pytest.fixture(autouse=True)
def fresh_exchange():
    """Give every tool-level test its own exchange with execution off."""
    exchange = ToolExchange(execute_on_submit=False)
    set_exchange(exchange)
    yield exchange
    set_exchange(None)
