"""Tests for the per-order lock arena."""

import asyncio

from tracking.tracked_order.locks import OrderLockArena


async def test_same_order_shares_a_lock():
    arena = OrderLockArena()
    assert arena.lock_for(1) is arena.lock_for(1)
    assert arena.lock_for(1) is not arena.lock_for(2)
    assert len(arena) == 2


async def test_hold_serializes_work_on_one_order():
    arena = OrderLockArena()
    events = []

    async def step(name):
        async with arena.hold(1):
            events.append(f"{name}:start")
            await asyncio.sleep(0.01)
            events.append(f"{name}:end")

    await asyncio.gather(step("a"), step("b"))

    assert events == ["a:start", "a:end", "b:start", "b:end"]


async def test_different_orders_do_not_block_each_other():
    arena = OrderLockArena()
    events = []

    async def step(tracked_order_id):
        async with arena.hold(tracked_order_id):
            events.append(f"{tracked_order_id}:start")
            await asyncio.sleep(0.01)
            events.append(f"{tracked_order_id}:end")

    await asyncio.gather(step(1), step(2))

    assert events[:2] == ["1:start", "2:start"]
