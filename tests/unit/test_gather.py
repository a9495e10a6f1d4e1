"""Unit tests for scatter/gather failure isolation"""

import asyncio

import pytest

from kedi_client.domain.exceptions import ServiceError, TransportError
from kedi_client.utils.gather import gather_mapping, gather_outcomes


async def _sub_call(index: int, failing: int, started: list[int]) -> int:
    started.append(index)
    await asyncio.sleep(0.01 * (index % 3))
    if index == failing:
        raise ServiceError(500)
    return index * 10


@pytest.mark.parametrize("failing", [0, 3, 7])
async def test_only_failing_sub_call_reflects_failure(failing: int):
    started: list[int] = []

    outcomes = await gather_outcomes(*(_sub_call(i, failing, started) for i in range(8)))

    assert len(outcomes) == 8
    assert sorted(started) == list(range(8))
    for index, outcome in enumerate(outcomes):
        if index == failing:
            assert not outcome.ok
            assert isinstance(outcome.error, ServiceError)
            assert outcome.value is None
        else:
            assert outcome.ok
            assert outcome.value == index * 10


async def test_sub_calls_run_concurrently():
    """All sub-calls are started before any of them completes"""
    gate = asyncio.Event()
    waiting = []

    async def wait_for_gate(index: int) -> int:
        waiting.append(index)
        if len(waiting) == 3:
            gate.set()
        await gate.wait()
        return index

    outcomes = await asyncio.wait_for(gather_outcomes(*(wait_for_gate(i) for i in range(3))), timeout=1)

    assert [o.value for o in outcomes] == [0, 1, 2]


async def test_gather_mapping_keys_outcomes():
    async def ok() -> str:
        return "ok"

    async def broken() -> str:
        raise TransportError(ConnectionError("offline"))

    outcomes = await gather_mapping({"summary": ok(), "chart": broken()})

    assert outcomes["summary"].value == "ok"
    assert isinstance(outcomes["chart"].error, TransportError)


async def test_non_api_errors_propagate():
    """Programming errors are not swallowed as sub-call failures"""

    async def buggy() -> None:
        raise KeyError("missing")

    with pytest.raises(KeyError):
        await gather_outcomes(buggy())
