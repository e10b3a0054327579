"""Tests for the fixed-interval pacer."""

import asyncio

import pytest

from comment_analyzer.gateway.pacer import Pacer


class TestPacer:
    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            Pacer(0)

    @pytest.mark.asyncio
    async def test_first_tick_is_immediate(self):
        pacer = Pacer(0.5)
        loop = asyncio.get_running_loop()
        start = loop.time()
        await pacer.tick()
        assert loop.time() - start < 0.1
        assert pacer.ticks == 1

    @pytest.mark.asyncio
    async def test_ticks_are_spaced_by_interval(self):
        pacer = Pacer(0.05)
        loop = asyncio.get_running_loop()
        await pacer.tick()
        start = loop.time()
        await pacer.tick()
        await pacer.tick()
        assert loop.time() - start >= 0.09
        assert pacer.ticks == 3

    @pytest.mark.asyncio
    async def test_missed_ticks_do_not_burst(self):
        pacer = Pacer(0.05)
        loop = asyncio.get_running_loop()
        await pacer.tick()
        await asyncio.sleep(0.2)

        await pacer.tick()  # overdue, fires at once
        start = loop.time()
        await pacer.tick()
        assert loop.time() - start >= 0.04
