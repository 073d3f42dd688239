"""CLI helpers for running async services from click commands."""

import asyncio
from typing import Awaitable, TypeVar

import click

from bucketsort.domain.category import CategoryService
from bucketsort.domain.summary import SummaryService
from bucketsort.domain.transaction import TransactionService

T = TypeVar("T")


def run(awaitable: Awaitable[T]) -> T:
    """Run a service coroutine to completion."""
    return asyncio.run(awaitable)


def user_id(ctx: click.Context) -> str:
    """Return the user whose data the command works on."""
    return ctx.obj["user_id"]


def transaction_service(ctx: click.Context) -> TransactionService:
    """Build a TransactionService for the current store and settings."""
    return TransactionService(ctx.obj["store"], ctx.obj["settings"])


def category_service(ctx: click.Context) -> CategoryService:
    """Build a CategoryService for the current store."""
    return CategoryService(ctx.obj["store"])


def summary_service(ctx: click.Context) -> SummaryService:
    """Build a SummaryService for the current store and settings."""
    return SummaryService(transaction_service(ctx), category_service(ctx))
