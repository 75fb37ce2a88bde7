from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from core.services.shared.errors import InvalidLineItem

DateLike = Union[date, datetime]


@dataclass(frozen=True)
class NetWorthTotals:
    total_assets: float
    total_liabilities: float

    @property
    def net_worth(self) -> float:
        return self.total_assets - self.total_liabilities


@dataclass(frozen=True)
class Snapshot:
    record_date: DateLike
    assets: Dict[str, float] = field(default_factory=dict)
    liabilities: Dict[str, float] = field(default_factory=dict)
    total_assets: float = 0.0
    total_liabilities: float = 0.0
    net_worth: float = 0.0


@dataclass(frozen=True)
class Growth:
    net_worth_change: float
    percentage_change: Optional[float]
    days_elapsed: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "net_worth_change": self.net_worth_change,
            "percentage_change": None if self.percentage_change is None else round(self.percentage_change, 2),
            "days_elapsed": self.days_elapsed,
        }


def _sum_line_items(items: Optional[Mapping[str, Any]], kind: str) -> float:
    total = 0.0
    for name, value in (items or {}).items():
        if value is None:
            continue
        try:
            amount = float(value)
        except (TypeError, ValueError):
            raise InvalidLineItem(f"{kind} '{name}' must be numeric.", item=name) from None
        if not math.isfinite(amount):
            raise InvalidLineItem(f"{kind} '{name}' must be a finite number.", item=name)
        if amount < 0:
            raise InvalidLineItem(f"{kind} '{name}' cannot be negative.", item=name)
        total += amount
    return total


def calculate_totals(assets: Optional[Mapping[str, Any]], liabilities: Optional[Mapping[str, Any]]) -> NetWorthTotals:
    return NetWorthTotals(
        total_assets=_sum_line_items(assets, "Asset"),
        total_liabilities=_sum_line_items(liabilities, "Liability"),
    )


def build_snapshot(record_date: DateLike, assets: Optional[Mapping[str, Any]], liabilities: Optional[Mapping[str, Any]]) -> Snapshot:
    totals = calculate_totals(assets, liabilities)
    return Snapshot(
        record_date=record_date,
        assets={k: float(v) for k, v in (assets or {}).items() if v is not None},
        liabilities={k: float(v) for k, v in (liabilities or {}).items() if v is not None},
        total_assets=totals.total_assets,
        total_liabilities=totals.total_liabilities,
        net_worth=totals.net_worth,
    )


def _as_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def days_between(earlier: DateLike, later: DateLike) -> int:
    seconds = (_as_datetime(later) - _as_datetime(earlier)).total_seconds()
    return math.floor(seconds / 86400)


def percentage_change(base: float, current: float) -> Optional[float]:
    if base == 0:
        return None
    return (current - base) / abs(base) * 100


def calculate_growth(current: Snapshot, previous: Optional[Snapshot]) -> Optional[Growth]:
    if previous is None:
        return None
    return Growth(
        net_worth_change=current.net_worth - previous.net_worth,
        percentage_change=percentage_change(previous.net_worth, current.net_worth),
        days_elapsed=days_between(previous.record_date, current.record_date),
    )


def find_previous_snapshot(history: Iterable[Snapshot], current: Snapshot) -> Optional[Snapshot]:
    cur = _as_datetime(current.record_date)
    earlier = [s for s in history or [] if _as_datetime(s.record_date) < cur]
    if not earlier:
        return None
    return max(earlier, key=lambda s: _as_datetime(s.record_date))


def summarize_history(snapshots: Iterable[Snapshot]) -> Optional[Dict[str, Any]]:
    ordered: List[Snapshot] = sorted(snapshots or [], key=lambda s: _as_datetime(s.record_date))
    if not ordered:
        return None
    first, latest = ordered[0], ordered[-1]
    worths = [s.net_worth for s in ordered]
    pct = percentage_change(first.net_worth, latest.net_worth)
    return {
        "total_entries": len(ordered),
        "current_net_worth": latest.net_worth,
        "current_assets": latest.total_assets,
        "current_liabilities": latest.total_liabilities,
        "total_change": latest.net_worth - first.net_worth,
        "percentage_change": None if pct is None else round(pct, 2),
        "average_net_worth": round(sum(worths) / len(worths), 2),
        "highest_net_worth": max(worths),
        "lowest_net_worth": min(worths),
        "asset_breakdown": dict(latest.assets),
        "liability_breakdown": dict(latest.liabilities),
    }
