from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from django.utils import timezone

from core.academic.net_worth import Snapshot, build_snapshot, calculate_growth, summarize_history
from core.models import Enrollment, WealthSnapshot
from core.services.shared.dto import SnapshotPayload
from core.services.shared.errors import NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)


def _to_value(row: WealthSnapshot) -> Snapshot:
    return Snapshot(
        record_date=row.record_date,
        assets=dict(row.assets or {}),
        liabilities=dict(row.liabilities or {}),
        total_assets=row.total_assets,
        total_liabilities=row.total_liabilities,
        net_worth=row.net_worth,
    )


def serialize_snapshot(row: WealthSnapshot) -> SnapshotPayload:
    return {
        "id": row.id,
        "record_date": row.record_date.isoformat(),
        "assets": dict(row.assets or {}),
        "liabilities": dict(row.liabilities or {}),
        "total_assets": row.total_assets,
        "total_liabilities": row.total_liabilities,
        "net_worth": row.net_worth,
        "is_hypothetical": row.is_hypothetical,
    }


def record_snapshot(
    enrollment: Enrollment,
    *,
    assets: Optional[Mapping[str, Any]] = None,
    liabilities: Optional[Mapping[str, Any]] = None,
    record_date: date | None = None,
    notes: str = "",
    is_hypothetical: bool = False,
) -> Dict[str, Any]:
    value = build_snapshot(record_date or timezone.localdate(), assets, liabilities)
    row = WealthSnapshot.objects.create(
        enrollment=enrollment,
        record_date=value.record_date,
        assets=value.assets,
        liabilities=value.liabilities,
        total_assets=value.total_assets,
        total_liabilities=value.total_liabilities,
        net_worth=value.net_worth,
        notes=notes or "",
        is_hypothetical=bool(is_hypothetical),
    )

    previous_row = (
        WealthSnapshot.objects.filter(enrollment=enrollment, record_date__lt=row.record_date)
        .order_by("-record_date", "-id")
        .first()
    )
    growth = calculate_growth(value, _to_value(previous_row) if previous_row else None)
    logger.info(
        "wealth_snapshot_recorded enrollment_id=%s snapshot_id=%s net_worth=%s has_previous=%s",
        enrollment.id,
        row.id,
        row.net_worth,
        previous_row is not None,
    )
    return {
        "entry": serialize_snapshot(row),
        "growth": growth.to_dict() if growth else None,
    }


def list_snapshots(enrollment: Enrollment, start: date | None = None, end: date | None = None) -> List[SnapshotPayload]:
    qs = WealthSnapshot.objects.filter(enrollment=enrollment)
    if start and end:
        qs = qs.filter(record_date__gte=start, record_date__lte=end)
    return [serialize_snapshot(r) for r in qs.order_by("record_date", "id")]


def get_wealth_summary(enrollment: Enrollment, include_hypothetical: bool = True) -> Optional[Dict[str, Any]]:
    qs = WealthSnapshot.objects.filter(enrollment=enrollment)
    if not include_hypothetical:
        qs = qs.filter(is_hypothetical=False)
    return summarize_history(_to_value(r) for r in qs.order_by("record_date", "id"))


def _owned_snapshot(snapshot_id: int, enrollment: Enrollment) -> WealthSnapshot:
    row = WealthSnapshot.objects.filter(id=snapshot_id).first()
    if row is None:
        raise NotFoundError("Wealth snapshot not found.")
    if row.enrollment_id != enrollment.id:
        raise PermissionDeniedError("Not your wealth snapshot.")
    return row


def get_snapshot(snapshot_id: int, enrollment: Enrollment) -> SnapshotPayload:
    return serialize_snapshot(_owned_snapshot(snapshot_id, enrollment))


def delete_snapshot(snapshot_id: int, enrollment: Enrollment) -> None:
    row = _owned_snapshot(snapshot_id, enrollment)
    row.delete()
    logger.info("wealth_snapshot_deleted enrollment_id=%s snapshot_id=%s", enrollment.id, snapshot_id)
