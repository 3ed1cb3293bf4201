# -*- coding: utf-8 -*-
"""
Command line entry point for the Prism SDK.

Runs one auction or tracking call against the configured enclave/tracking API
(API__ENCLAVE_URL, API__API_URL) and prints the result as JSON.

Run with: python -m prism_sdk.main --help   (or the ``prism-sdk`` script)
"""
from __future__ import annotations

import asyncio
import json
import sys
from typing import Any, Awaitable, Callable, Optional

import click
import structlog

from prism_sdk.DI import Container
from prism_sdk.client import PrismClient
from prism_sdk.config import get_settings
from prism_sdk.exceptions import PrismError
from prism_sdk.logging.config import configure_logging
from prism_sdk.models.options import AuctionOptions, InitOptions, TrackingOptions


def _echo_json(value: Any) -> None:
    click.echo(json.dumps(value, indent=2, sort_keys=True))


def _run(call: Callable[[PrismClient], Awaitable[Any]]) -> Any:
    """Build the client from the container, run call(client) and close the HTTP session."""

    async def _main() -> Any:
        client = Container().prism_client()
        try:
            return await call(client)
        finally:
            await client.aclose()

    return asyncio.run(_main())


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="prism-sdk")
def cli(debug: bool) -> None:
    """Prism ad-auction SDK"""
    settings = get_settings()
    if debug:
        settings = settings.model_copy(
            update={"logging": settings.logging.model_copy(update={"console_level": "DEBUG"})}
        )
    configure_logging(settings)


def _print_winner(call: Callable[[PrismClient], Awaitable[Any]]) -> None:
    try:
        winner = _run(call)
    except PrismError as e:
        structlog.get_logger("main").error("main_auction_failed", error_type=type(e).__name__, error_message=str(e))
        click.echo(f"Auction failed: {e}", err=True)
        sys.exit(1)
    _echo_json(winner.to_dict())


@cli.command("auction")
@click.option("--publisher", required=True, help="Publisher address")
@click.option("--domain", required=True, help="Publisher domain")
@click.option("--wallet", required=True, help="User wallet")
@click.option("--retries", type=int, default=None, help="Maximum attempts")
@click.option("--timeout", type=float, default=None, help="Per-attempt timeout in seconds")
def auction(publisher: str, domain: str, wallet: str, retries: Optional[int], timeout: Optional[float]) -> None:
    """Run one auction (no deduplication) and print the winner"""
    options = AuctionOptions(retries=retries, timeout=timeout)
    _print_winner(lambda client: client.auction(publisher, domain, wallet, options))


@cli.command("auto-auction")
@click.option("--publisher", required=True, help="Publisher address")
@click.option("--domain", required=True, help="Publisher domain")
@click.option("--wallet", default=None, help="User wallet (unconnected placeholder if omitted)")
@click.option("--retries", type=int, default=None, help="Maximum attempts")
@click.option("--timeout", type=float, default=None, help="Per-attempt timeout in seconds")
def auto_auction(publisher: str, domain: str, wallet: Optional[str], retries: Optional[int], timeout: Optional[float]) -> None:
    """Run a deduplicated auction and print the winner"""
    options = AuctionOptions(retries=retries, timeout=timeout)
    _print_winner(lambda client: client.auto_auction(publisher, domain, wallet, options))


@cli.command("init")
@click.option("--publisher", required=True, help="Publisher address")
@click.option("--domain", required=True, help="Publisher domain")
@click.option("--wallet", default=None, help="Connected wallet, if any")
def init(publisher: str, domain: str, wallet: Optional[str]) -> None:
    """Run init() and print its outcome"""
    options = InitOptions(connected_wallet=wallet)
    outcome = _run(lambda client: client.init_outcome(publisher, domain, options))
    _echo_json(
        {
            "status": outcome.status,
            "reason": outcome.reason,
            "error": str(outcome.error) if outcome.error is not None else None,
            "winner": outcome.winner.to_dict() if outcome.winner is not None else None,
        }
    )
    if outcome.status == "failed":
        sys.exit(1)


def _tracking_command(kind: str) -> Callable[..., None]:
    @click.option("--publisher", required=True, help="Publisher address")
    @click.option("--website-url", required=True, help="Page where the event happened")
    @click.option("--campaign-id", required=True, help="Winning campaign id")
    @click.option("--jwt", "jwt_token", required=True, help="JWT returned with the winner")
    def command(publisher: str, website_url: str, campaign_id: str, jwt_token: str) -> None:
        options = TrackingOptions()

        async def _call(client: PrismClient) -> Any:
            if kind == "click":
                return await client.clicks(publisher, website_url, campaign_id, jwt_token, options)
            return await client.impressions(publisher, website_url, campaign_id, jwt_token, options)

        try:
            response = _run(_call)
        except PrismError as e:
            click.echo(f"Tracking {kind} failed: {e}", err=True)
            sys.exit(1)
        _echo_json(response.to_dict())

    command.__doc__ = f"Report a {kind} for a winning campaign"
    return command


cli.command("click")(_tracking_command("click"))
cli.command("impression")(_tracking_command("impression"))


def main() -> None:
    cli()


__all__ = ["cli", "main"]

if __name__ == "__main__":
    main()
