# -*- coding: utf-8 -*-
"""Unit tests for AuctionState registries."""

from __future__ import annotations

import asyncio

import pytest

from prism_sdk.exceptions import AlreadyCompletedError, AlreadyPendingError
from prism_sdk.models.keys import AuctionKey, DetectionKey
from prism_sdk.services.auction import AuctionState


def _key(wallet: str = "0xw1", publisher: str = "0xpub", domain: str = "site.example") -> AuctionKey:
    return AuctionKey(publisher, domain, wallet)


def test_claim_moves_key_to_pending_then_complete_to_completed() -> None:
    state = AuctionState()
    key = _key()

    assert state.status(key) == "absent"
    state.claim(key)
    assert state.status(key) == "pending"
    state.complete(key)
    assert state.status(key) == "completed"
    assert key not in state.pending


def test_claim_rejects_pending_and_completed_keys() -> None:
    state = AuctionState()
    key = _key()
    state.claim(key)

    with pytest.raises(AlreadyPendingError) as pending_err:
        state.claim(key)
    assert pending_err.value.key == key

    state.complete(key)
    with pytest.raises(AlreadyCompletedError):
        state.claim(key)


def test_release_makes_key_eligible_again() -> None:
    state = AuctionState()
    key = _key()
    state.claim(key)

    state.release(key)

    assert state.status(key) == "absent"
    state.claim(key)


def test_keys_differ_by_wallet() -> None:
    state = AuctionState()
    state.claim(_key("0xw1"))
    state.complete(_key("0xw1"))

    state.claim(_key("0xw2"))

    assert state.status(_key("0xw2")) == "pending"


def test_reset_with_wallet_removes_only_that_key() -> None:
    state = AuctionState()
    for wallet in ("0xw1", "0xw2"):
        state.claim(_key(wallet))
        state.complete(_key(wallet))

    removed = state.reset("0xpub", "site.example", "0xw1")

    assert removed == 1
    assert state.status(_key("0xw1")) == "absent"
    assert state.status(_key("0xw2")) == "completed"


def test_reset_without_wallet_removes_every_key_of_publisher_and_domain() -> None:
    state = AuctionState()
    state.claim(_key("0xw1"))
    state.complete(_key("0xw1"))
    state.claim(_key("0xw2"))
    other_domain = _key("0xw1", domain="other.example")
    state.claim(other_domain)
    state.complete(other_domain)

    removed = state.reset("0xpub", "site.example")

    assert removed == 2
    assert state.status(_key("0xw1")) == "absent"
    assert state.status(_key("0xw2")) == "absent"
    assert state.status(other_domain) == "completed"


async def test_reset_without_wallet_drops_active_detection() -> None:
    state = AuctionState()
    task = asyncio.create_task(asyncio.sleep(0))
    state.active_detections[DetectionKey("0xpub", "site.example")] = task

    removed = state.reset("0xpub", "site.example")
    await task

    assert removed == 1
    assert state.active_detections == {}


def test_process_scope_guard_is_global() -> None:
    state = AuctionState()
    a = DetectionKey("0xpubA", "a.example")
    b = DetectionKey("0xpubB", "b.example")

    assert state.try_acquire_init("process", a)
    assert not state.try_acquire_init("process", b)
    state.release_init("process", a)
    assert state.try_acquire_init("process", b)


def test_publisher_scope_guard_is_per_key() -> None:
    state = AuctionState()
    a = DetectionKey("0xpubA", "a.example")
    b = DetectionKey("0xpubB", "b.example")

    assert state.try_acquire_init("publisher", a)
    assert state.try_acquire_init("publisher", b)
    assert not state.try_acquire_init("publisher", a)
    state.release_init("publisher", a)
    assert state.try_acquire_init("publisher", a)


def test_clear_drops_everything() -> None:
    state = AuctionState()
    state.claim(_key())
    state.try_acquire_init("process", DetectionKey("0xpub", "site.example"))

    state.clear()

    assert state.pending == set()
    assert state.is_requesting is False
