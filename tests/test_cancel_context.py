from __future__ import annotations

import asyncio
import io

import pytest
from rich.console import Console

from cli.ui_components import run_with_spinner
from core.context import CancelContext
from core.domain.errors import OperationCancelledError


def test_guard_returns_result_when_not_cancelled():
    async def main():
        context = CancelContext()

        async def work():
            await asyncio.sleep(0)
            return 42

        return await context.guard(work())

    assert asyncio.run(main()) == 42


def test_guard_propagates_errors_unchanged():
    async def main():
        context = CancelContext()

        async def work():
            raise ValueError("boom")

        await context.guard(work())

    with pytest.raises(ValueError, match="boom"):
        asyncio.run(main())


def test_cancel_is_sticky_and_keeps_first_reason():
    async def main():
        context = CancelContext()
        context.cancel("interrupted")
        context.cancel("second")
        assert context.cancelled
        with pytest.raises(OperationCancelledError, match="interrupted"):
            context.raise_if_cancelled()

    asyncio.run(main())


def test_cancel_aborts_pending_call():
    finished = []

    async def main():
        context = CancelContext()

        async def slow():
            await asyncio.sleep(30)
            finished.append(True)

        asyncio.get_running_loop().call_later(0.01, context.cancel)
        await context.guard(slow())

    with pytest.raises(OperationCancelledError):
        asyncio.run(main())
    assert finished == []


def test_spinner_passes_result_and_errors_through():
    console = Console(force_terminal=False)

    async def ok():
        return "done"

    async def fail():
        raise OperationCancelledError("stop")

    assert asyncio.run(run_with_spinner(console, "Working...", ok())) == "done"
    with pytest.raises(OperationCancelledError):
        asyncio.run(run_with_spinner(console, "Working...", fail()))


def test_spinner_on_terminal_passes_result_through():
    console = Console(file=io.StringIO(), force_terminal=True)

    async def ok():
        return [1, 2]

    assert asyncio.run(run_with_spinner(console, "Working...", ok())) == [1, 2]
