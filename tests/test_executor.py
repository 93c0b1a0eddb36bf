import asyncio
import linecache
from types import SimpleNamespace

import pytest

from browser_runner.tools._executor import (
    SOURCE_PREFIX,
    CodeExecutor,
    Failure,
    NoValue,
    Value,
)


@pytest.mark.asyncio
async def test_returned_value_becomes_value_outcome():
    outcome = await CodeExecutor.run("return 1 + 1", {"page": None})

    assert outcome == Value(2)


@pytest.mark.asyncio
async def test_empty_body_is_a_no_op():
    outcome = await CodeExecutor.run("", {"page": None})

    assert outcome == NoValue()


@pytest.mark.asyncio
async def test_statements_without_return_give_no_value():
    outcome = await CodeExecutor.run("x = 40\ny = x + 2", {"page": None})

    assert isinstance(outcome, NoValue)


@pytest.mark.asyncio
async def test_return_none_is_no_value():
    outcome = await CodeExecutor.run("return None", {"page": None})

    assert isinstance(outcome, NoValue)


@pytest.mark.asyncio
async def test_statements_run_in_order_against_the_binding():
    page = SimpleNamespace(store={})

    outcome = await CodeExecutor.run(
        "page.store['answer'] = 41\npage.store['answer'] += 1\nreturn page.store['answer']",
        {"page": page},
    )

    assert outcome == Value(42)
    assert page.store == {"answer": 42}


@pytest.mark.asyncio
async def test_awaits_inside_the_body():
    body = "import asyncio\nawait asyncio.sleep(0)\nreturn 'done'"

    outcome = await CodeExecutor.run(body, {"page": None})

    assert outcome == Value("done")


@pytest.mark.asyncio
async def test_runtime_error_becomes_failure_with_trace():
    outcome = await CodeExecutor.run("x = 1\nraise Exception('boom')", {"page": None})

    assert isinstance(outcome, Failure)
    assert outcome.message == "boom"
    assert SOURCE_PREFIX in outcome.trace
    assert "raise Exception('boom')" in outcome.trace
    assert "Exception: boom" in outcome.trace


@pytest.mark.asyncio
async def test_trace_starts_at_submitted_code():
    outcome = await CodeExecutor.run("raise KeyError('missing')", {"page": None})

    assert isinstance(outcome, Failure)
    assert "_executor.py" not in outcome.trace


@pytest.mark.asyncio
async def test_syntax_error_becomes_failure():
    outcome = await CodeExecutor.run("return (", {"page": None})

    assert isinstance(outcome, Failure)
    assert "SyntaxError" in outcome.trace


@pytest.mark.asyncio
async def test_exception_without_message_uses_class_name():
    outcome = await CodeExecutor.run("raise ValueError()", {"page": None})

    assert isinstance(outcome, Failure)
    assert outcome.message == "ValueError"


@pytest.mark.asyncio
async def test_only_bindings_are_in_scope():
    outcome = await CodeExecutor.run("return tab", {"page": None})

    assert isinstance(outcome, Failure)
    assert outcome.message == "name 'tab' is not defined"


@pytest.mark.asyncio
async def test_each_run_compiles_a_fresh_function():
    await CodeExecutor.run("global leftover\nleftover = 1", {"page": None})

    outcome = await CodeExecutor.run("return leftover", {"page": None})

    assert isinstance(outcome, Failure)
    assert "leftover" in outcome.message


@pytest.mark.asyncio
async def test_invalid_binding_name_is_reported():
    outcome = await CodeExecutor.run("return 1", {"not a name": None})

    assert isinstance(outcome, Failure)
    assert outcome.message.startswith("Invalid binding name")


@pytest.mark.asyncio
async def test_completion_gate_wraps_the_run():
    calls = []

    async def gate(callback):
        calls.append("enter")
        result = await callback()
        calls.append("exit")
        return result

    outcome = await CodeExecutor.run("return 'ok'", {"page": None}, completion=gate)

    assert outcome == Value("ok")
    assert calls == ["enter", "exit"]


@pytest.mark.asyncio
async def test_failure_inside_gate_is_converted():
    async def gate(callback):
        return await callback()

    outcome = await CodeExecutor.run("raise RuntimeError('inside')", {"page": None}, completion=gate)

    assert outcome.message == "inside"


@pytest.mark.asyncio
async def test_gate_failure_is_converted():
    async def gate(callback):
        raise TimeoutError("page closed")

    outcome = await CodeExecutor.run("return 1", {"page": None}, completion=gate)

    assert isinstance(outcome, Failure)
    assert outcome.message == "page closed"


def test_failure_from_unraised_exception_has_no_trace():
    failure = Failure.from_exception(RuntimeError("never raised"))

    assert failure.message == "never raised"
    assert failure.trace is None


def test_build_source_wraps_body_in_async_function():
    source = CodeExecutor.build_source("x = 1\nreturn x", ["page"])

    assert source == "async def __playwright_code__(page):\n    x = 1\n    return x\n"
    assert "pass" in CodeExecutor.build_source("", ["page"])


@pytest.mark.asyncio
async def test_system_exit_becomes_failure():
    outcome = await CodeExecutor.run("raise SystemExit(3)", {"page": None})

    assert isinstance(outcome, Failure)
    assert outcome.message == "3"
    assert "SystemExit: 3" in outcome.trace


@pytest.mark.asyncio
async def test_cancellation_propagates():
    with pytest.raises(asyncio.CancelledError):
        await CodeExecutor.run("import asyncio\nraise asyncio.CancelledError()", {"page": None})


@pytest.mark.asyncio
async def test_overlapping_runs_keep_their_own_source_lines():
    slow = "import asyncio\nawait asyncio.sleep(0.05)\nraise Exception('slow failed')"
    fast = "raise Exception('fast failed')"

    slow_outcome, fast_outcome = await asyncio.gather(
        CodeExecutor.run(slow, {"page": None}),
        CodeExecutor.run(fast, {"page": None}),
    )

    assert "raise Exception('slow failed')" in slow_outcome.trace
    assert "fast failed" not in slow_outcome.trace
    assert "raise Exception('fast failed')" in fast_outcome.trace


@pytest.mark.asyncio
async def test_source_lines_are_dropped_from_linecache_after_run():
    before = {name for name in linecache.cache if name.startswith(SOURCE_PREFIX)}

    await CodeExecutor.run("raise Exception('boom')", {"page": None})

    after = {name for name in linecache.cache if name.startswith(SOURCE_PREFIX)}
    assert after == before


def test_every_compile_gets_its_own_filename():
    assert CodeExecutor.source_filename() != CodeExecutor.source_filename()
