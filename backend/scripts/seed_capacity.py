"""Set per-day capacity overrides for a date span.

Usage::

    python -m scripts.seed_capacity 2025-12-20 2026-01-03 --capacity 25
"""
from __future__ import annotations

import argparse
import asyncio
from datetime import date, timedelta

from parking.db.session import get_sessionmaker
from parking.models import Capacity


async def seed_capacity(first: date, last: date, capacity: int) -> int:
    """Upsert one capacity row per day in ``[first, last]``; returns rows touched."""
    if last < first:
        raise ValueError("last day must not be before first day")
    if capacity < 0:
        raise ValueError("capacity must be non-negative")

    sessionmaker = get_sessionmaker()
    touched = 0
    async with sessionmaker() as session:
        day = first
        while day <= last:
            row = await session.get(Capacity, day)
            if row is None:
                session.add(Capacity(day=day, capacity=capacity))
            else:
                row.capacity = capacity
            touched += 1
            day += timedelta(days=1)
        await session.commit()
    return touched


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("first", type=date.fromisoformat)
    parser.add_argument("last", type=date.fromisoformat)
    parser.add_argument("--capacity", type=int, required=True)
    args = parser.parse_args()
    touched = asyncio.run(seed_capacity(args.first, args.last, args.capacity))
    print(f"Set capacity {args.capacity} on {touched} day(s).")


if __name__ == "__main__":
    main()
