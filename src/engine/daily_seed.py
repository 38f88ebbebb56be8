"""Map calendar dates onto stable integer seeds."""

from __future__ import annotations

import datetime as _dt
from typing import Optional, Union

from project_config import get_section

DateLike = Union[_dt.date, _dt.datetime]

DEFAULT_EPOCH: _dt.date = get_section("daily.epoch", _dt.date(2026, 1, 1))


def _elapsed_days(moment: DateLike, epoch: DateLike) -> int:
    # ``datetime`` is a subclass of ``date``; compare like with like.
    if isinstance(moment, _dt.datetime) != isinstance(epoch, _dt.datetime):
        if isinstance(moment, _dt.datetime):
            moment = moment.date()
        else:
            epoch = epoch.date()  # type: ignore[union-attr]
    # timedelta.days already floors toward negative infinity.
    return (moment - epoch).days


def derive_daily_seed(
    date: DateLike,
    epoch: DateLike = DEFAULT_EPOCH,
    puzzle_set_size: Optional[int] = None,
) -> int:
    """Return the day offset of ``date`` from ``epoch``.

    When ``puzzle_set_size`` is given the offset is reduced with a true modulo
    so dates before the epoch still select a valid index in
    ``[0, puzzle_set_size)``.
    """

    day = _elapsed_days(date, epoch)
    if puzzle_set_size is None:
        return day
    if puzzle_set_size <= 0:
        raise ValueError("puzzle_set_size must be a positive integer")
    return day % puzzle_set_size


def calendar_seed(date: DateLike) -> int:
    """Return the ``YYYYMMDD`` integer for ``date``."""

    return date.year * 10000 + date.month * 100 + date.day


__all__ = ["DEFAULT_EPOCH", "calendar_seed", "derive_daily_seed"]
