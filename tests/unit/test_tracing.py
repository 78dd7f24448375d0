"""traced decorator: wraps coroutine functions, rejects plain ones."""

import pytest

from city_dashboard.shared.telemetry.tracing import traced


async def test_traced_coroutine_returns_result_and_keeps_name() -> None:
    @traced("test.fetch")
    async def fetch(name: str) -> str:
        return f"docs:{name}"

    assert await fetch(name="news") == "docs:news"
    assert fetch.__name__ == "fetch"


async def test_traced_coroutine_propagates_errors() -> None:
    @traced()
    async def failing() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        await failing()


def test_plain_function_is_rejected() -> None:
    with pytest.raises(TypeError):

        @traced("test.sync")
        def compute() -> int:
            return 1
