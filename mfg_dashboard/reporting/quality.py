"""
Quality Metrics
"""

from collections import Counter
from datetime import datetime
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mfg_dashboard.config import get_settings
from mfg_dashboard.database.models import QualityCheck, QualityCheckStatus
from mfg_dashboard.reporting.calculations import has_defects, parse_defects, percentage
from mfg_dashboard.reporting.instrumentation import dashboard_metric
from mfg_dashboard.reporting.periods import resolve_now, subtract_months
from mfg_dashboard.reporting.schemas import DefectFrequency, QualityMetrics

logger = structlog.get_logger(__name__)


def check_passed(status: QualityCheckStatus, defects_found: Optional[str]) -> bool:
    """A check passes only when completed without any recorded defect"""
    return status == QualityCheckStatus.COMPLETED and not has_defects(defects_found)


@dashboard_metric("quality metrics")
async def get_quality_metrics(
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> QualityMetrics:
    """Pass/fail rates and the most frequent defect tags of recent checks"""
    config = get_settings().dashboard
    now = resolve_now(now)
    since = subtract_months(now, config.quality_window_months)

    result = await db.execute(
        select(QualityCheck.status, QualityCheck.defects_found)
        .where(QualityCheck.check_date >= since)
        .order_by(QualityCheck.check_date)
    )
    checks = result.all()

    total = len(checks)
    passed = sum(1 for check in checks if check_passed(check.status, check.defects_found))

    # Counter.most_common keeps insertion order between equal counts
    tags: Counter = Counter()
    for check in checks:
        tags.update(parse_defects(check.defects_found))

    top_defects = [
        DefectFrequency(defect=tag, count=count, percentage=percentage(count, total))
        for tag, count in tags.most_common(config.top_defects)
    ]

    logger.debug("Quality metrics computed", total_checks=total, passed=passed)

    return QualityMetrics(
        total_checks=total,
        pass_rate=percentage(passed, total),
        fail_rate=percentage(total - passed, total),
        top_defects=top_defects,
    )
