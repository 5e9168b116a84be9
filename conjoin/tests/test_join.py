import asyncio
import itertools
import logging
import operator
from concurrent.futures import ThreadPoolExecutor

import pytest

from conjoin import (
    ContinuationFailure,
    InputFailure,
    Rejection,
    after,
    global_config,
    join,
    join_all,
    rejected,
    resolved,
)


def test_join_adds_resolved_values():
    async def main():
        return await join(resolved(2), resolved(3), lambda a, b: a + b)

    assert asyncio.run(main()) == 5


@pytest.mark.parametrize("order", list(itertools.permutations(range(3))))
def test_join_preserves_input_order(order):
    async def main():
        loop = asyncio.get_running_loop()
        futures = [loop.create_future() for _ in range(3)]
        result = join(*futures, lambda *values: values)
        for idx in order:
            futures[idx].set_result(f"v{idx}")
            await asyncio.sleep(0)
        return await result

    assert asyncio.run(main()) == ("v0", "v1", "v2")


def test_join_without_inputs_calls_continuation_with_no_arguments():
    calls = []

    def continuation(*args):
        calls.append(args)
        return "done"

    async def main():
        return await join(continuation)

    assert asyncio.run(main()) == "done"
    assert calls == [()]


def test_join_returns_pending_future_immediately():
    calls = []

    async def main():
        loop = asyncio.get_running_loop()
        pending = loop.create_future()
        result = join(pending, calls.append)
        assert isinstance(result, asyncio.Future)
        assert not result.done()
        await asyncio.sleep(0)
        assert calls == []
        pending.set_result(1)
        await result

    asyncio.run(main())
    assert calls == [1]


def test_join_fails_with_earliest_rejection(collector):
    called = []

    async def main():
        loop = asyncio.get_running_loop()
        f1, f2 = loop.create_future(), loop.create_future()
        loop.call_later(0.010, f1.set_exception, KeyError("R1"))
        loop.call_later(0.005, f2.set_exception, KeyError("R2"))
        result = join(f1, f2, lambda a, b: called.append((a, b)))
        with pytest.raises(KeyError) as info:
            await result
        # let the later rejection land too
        await asyncio.sleep(0.02)
        return info.value

    exc = asyncio.run(main())
    assert exc.args == ("R2",)
    assert called == []
    assert len(collector.failures) == 1


def test_join_rejects_with_reason_and_skips_continuation(collector):
    calls = []

    def add(a, b):
        calls.append((a, b))
        return a + b

    async def main():
        with pytest.raises(Rejection) as info:
            await join(rejected("bad"), resolved(1), add)
        return info.value

    assert asyncio.run(main()).reason == "bad"
    assert calls == []
    [failure] = collector.failures
    assert isinstance(failure, InputFailure)
    assert failure.reason.reason == "bad"


def test_join_propagates_original_exception_object():
    error = ValueError("boom")

    async def main():
        try:
            await join(rejected(error), lambda value: value, on_error=None)
        except ValueError as exc:
            return exc

    assert asyncio.run(main()) is error


def test_failed_input_does_not_cancel_pending_inputs():
    async def main():
        loop = asyncio.get_running_loop()
        slow = loop.create_future()
        with pytest.raises(KeyError):
            await join(rejected(KeyError("x")), slow, lambda a, b: None, on_error=None)
        assert not slow.done()
        slow.set_result(1)
        return await slow

    assert asyncio.run(main()) == 1


def test_join_flattens_future_returned_by_continuation():
    async def main():
        loop = asyncio.get_running_loop()
        inner = loop.create_future()
        loop.call_soon(inner.set_result, "V")
        return await join(resolved(1), lambda _: inner)

    assert asyncio.run(main()) == "V"


def test_join_awaits_coroutine_continuation():
    async def double(x):
        await asyncio.sleep(0)
        return 2 * x

    async def main():
        return await join(resolved(4), double)

    assert asyncio.run(main()) == 8


def test_continuation_exception_fails_returned_future(collector):
    async def main():
        with pytest.raises(ZeroDivisionError):
            await join(resolved(1), resolved(0), operator.truediv)

    asyncio.run(main())
    [failure] = collector.failures
    assert isinstance(failure, ContinuationFailure)
    assert isinstance(failure.reason, ZeroDivisionError)
    assert failure.origin == "continuation"


def test_continuation_returning_rejected_future_is_a_continuation_failure(collector):
    error = RuntimeError("burnt")

    async def main():
        with pytest.raises(RuntimeError):
            await join(resolved(1), lambda _: rejected(error))

    asyncio.run(main())
    [failure] = collector.failures
    assert isinstance(failure, ContinuationFailure)
    assert failure.reason is error


def test_shared_input_runs_once_for_every_join():
    runs = []

    async def fetch():
        runs.append(1)
        await asyncio.sleep(0)
        return "dough"

    async def main():
        shared = asyncio.ensure_future(fetch())
        first = join(shared, str.upper)
        second = join(shared, lambda dough: dough)
        return await asyncio.gather(first, second)

    assert asyncio.run(main()) == ["DOUGH", "dough"]
    assert runs == [1]


def test_cancelling_one_join_leaves_shared_input_alone():
    async def main():
        loop = asyncio.get_running_loop()
        shared = loop.create_future()
        first = join(shared, lambda v: v)
        second = join(shared, lambda v: v + 1)
        await asyncio.sleep(0)
        first.cancel()
        await asyncio.wait([first])
        assert not shared.cancelled()
        shared.set_result(1)
        return await second, first.cancelled()

    assert asyncio.run(main()) == (2, True)


def test_join_accepts_concurrent_futures():
    async def main():
        with ThreadPoolExecutor(max_workers=2) as pool:
            a = pool.submit(pow, 2, 10)
            b = pool.submit(sum, [1, 2, 3])
            return await join(a, b, lambda x, y: x + y)

    assert asyncio.run(main()) == 1030


def test_join_accepts_coroutines_and_plain_values():
    async def three():
        return 3

    async def main():
        return await join(three(), 4, operator.mul)

    assert asyncio.run(main()) == 12


def test_join_requires_a_callable_continuation():
    with pytest.raises(TypeError):
        join()
    with pytest.raises(TypeError):
        join(1, 2)


def test_join_rejects_non_callable_error_sink():
    async def main():
        join(resolved(1), lambda v: v, on_error="stderr")

    with pytest.raises(TypeError):
        asyncio.run(main())


def test_join_outside_running_loop_needs_explicit_loop():
    with pytest.raises(RuntimeError):
        join(lambda: None)


def test_join_with_explicit_loop_builds_graph_before_running():
    loop = asyncio.new_event_loop()
    try:
        total = join(resolved(1, loop=loop), resolved(2, loop=loop), operator.add, loop=loop)
        assert loop.run_until_complete(total) == 3
    finally:
        loop.close()


def test_per_call_sink_overrides_global_sink(collector):
    local = []

    async def main():
        with pytest.raises(KeyError):
            await join(rejected(KeyError("k")), lambda v: v, on_error=local.append)
        with pytest.raises(KeyError):
            await join(rejected(KeyError("k")), lambda v: v, on_error=None)

    asyncio.run(main())
    assert len(local) == 1
    assert collector.failures == []


def test_join_all_takes_inputs_as_sequence():
    async def main():
        return await join_all([resolved("a"), resolved("b")], lambda *parts: "".join(parts))

    assert asyncio.run(main()) == "ab"


def test_after_binds_name_to_joined_future():
    async def main():
        @after(resolved(6), resolved(7))
        def answer(a, b):
            return a * b

        assert isinstance(answer, asyncio.Future)
        return await answer

    assert asyncio.run(main()) == 42


def test_join_logs_events_when_enabled(caplog):
    global_config.log_events = True

    def plate(crepe):
        return crepe

    async def main():
        return await join(resolved("crepe"), plate)

    with caplog.at_level(logging.DEBUG, logger="conjoin"):
        assert asyncio.run(main()) == "crepe"
    messages = [r.getMessage() for r in caplog.records if r.name == "conjoin.core"]
    assert any(m.startswith("join.start") and "plate" in m for m in messages)
    assert any(m.startswith("join.end") and "elapsed=" in m for m in messages)
