"""Tests for the asyncio debouncer."""

import asyncio

import pytest

from taskboard_cli.utils.debounce import Debouncer


@pytest.mark.asyncio
async def test_burst_fires_once_with_last_arguments():
    calls = []
    debouncer = Debouncer(0.02, calls.append)

    debouncer.call("a")
    await asyncio.sleep(0.005)
    debouncer.call("ab")
    debouncer.call("abc")
    assert debouncer.pending

    await asyncio.sleep(0.05)
    assert calls == ["abc"]
    assert not debouncer.pending


@pytest.mark.asyncio
async def test_separate_bursts_fire_separately():
    calls = []
    debouncer = Debouncer(0.01, calls.append)
    debouncer.call(1)
    await asyncio.sleep(0.03)
    debouncer.call(2)
    await asyncio.sleep(0.03)
    assert calls == [1, 2]


@pytest.mark.asyncio
async def test_cancel():
    calls = []
    debouncer = Debouncer(0.01, calls.append)
    debouncer.call("x")
    debouncer.cancel()
    await asyncio.sleep(0.03)
    assert calls == []


@pytest.mark.asyncio
async def test_flush_runs_pending_now():
    calls = []
    debouncer = Debouncer(10, calls.append)
    debouncer.flush()
    debouncer.call("now")
    debouncer.flush()
    assert calls == ["now"]
    assert not debouncer.pending


def test_call_outside_loop_fails():
    debouncer = Debouncer(0.01, print)
    with pytest.raises(RuntimeError):
        debouncer.call("x")
