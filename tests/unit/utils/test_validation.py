# -*- coding: utf-8 -*-
"""Unit tests for wallet address validation helpers."""

from __future__ import annotations

from prism_sdk.config import UNCONNECTED_WALLET_ADDRESS
from prism_sdk.utils.validation import is_connected_wallet, mask_address


def test_is_connected_wallet_rejects_placeholder_case_insensitively() -> None:
    assert not is_connected_wallet(UNCONNECTED_WALLET_ADDRESS, UNCONNECTED_WALLET_ADDRESS)
    assert not is_connected_wallet("0X" + "0" * 40, UNCONNECTED_WALLET_ADDRESS)
    assert not is_connected_wallet(f"  {UNCONNECTED_WALLET_ADDRESS} ", UNCONNECTED_WALLET_ADDRESS)


def test_is_connected_wallet_rejects_empty_and_non_string() -> None:
    assert not is_connected_wallet("", UNCONNECTED_WALLET_ADDRESS)
    assert not is_connected_wallet("   ", UNCONNECTED_WALLET_ADDRESS)
    assert not is_connected_wallet(None, UNCONNECTED_WALLET_ADDRESS)
    assert not is_connected_wallet(123, UNCONNECTED_WALLET_ADDRESS)


def test_is_connected_wallet_accepts_real_address() -> None:
    assert is_connected_wallet("0xabc0000000000000000000000000000000000001", UNCONNECTED_WALLET_ADDRESS)


def test_mask_address_keeps_prefix_and_suffix() -> None:
    assert mask_address("0x2d27b6e21b3d4d7c9a43fdf58f12345678907706") == "0x2d27...7706"
    assert mask_address("short") == "***"
    assert mask_address(None) == "***"
