import asyncio

from skillfest.client.debounce import KeyedDebouncer


class Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    async def __call__(self, *args) -> None:
        self.calls.append(args)


async def test_burst_collapses_into_single_call_with_last_value() -> None:
    recorder = Recorder()
    debouncer = KeyedDebouncer(0.05, recorder)

    for points in (10, 20, 30, 40, 50):
        debouncer("alice", "alice", points)

    await debouncer.flush()

    assert recorder.calls == [("alice", 50)]


async def test_keys_are_debounced_independently() -> None:
    recorder = Recorder()
    debouncer = KeyedDebouncer(0.05, recorder)

    debouncer("alice", "alice", 1)
    debouncer("bob", "bob", 2)
    debouncer("alice", "alice", 3)
    await debouncer.flush()

    assert sorted(recorder.calls) == [("alice", 3), ("bob", 2)]


async def test_quiet_period_separates_bursts() -> None:
    recorder = Recorder()
    debouncer = KeyedDebouncer(0.02, recorder)

    debouncer("alice", "alice", 1)
    await asyncio.sleep(0.1)
    debouncer("alice", "alice", 2)
    await debouncer.flush()

    assert recorder.calls == [("alice", 1), ("alice", 2)]


async def test_nothing_fires_before_delay() -> None:
    recorder = Recorder()
    debouncer = KeyedDebouncer(10, recorder)

    debouncer("alice", "alice", 1)
    await asyncio.sleep(0)

    assert recorder.calls == []
    assert debouncer.pending == ["alice"]
    debouncer.cancel_all()
    assert debouncer.pending == []


async def test_failing_callback_is_contained() -> None:
    async def boom(*args) -> None:
        raise RuntimeError("network down")

    debouncer = KeyedDebouncer(0.01, boom)
    debouncer("alice", "alice", 1)
    await debouncer.flush()

    assert debouncer.pending == []
