import structlog

from stockledger.infrastructure.logging import add_context, clear_context


def test_context_is_bound_and_cleared():
    clear_context()
    add_context(command="stock")
    assert structlog.contextvars.get_contextvars() == {"command": "stock"}

    clear_context()
    assert structlog.contextvars.get_contextvars() == {}
