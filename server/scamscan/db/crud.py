from typing import List, Optional, Sequence

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from scamscan.core.exceptions import PersistenceError, ScanNotFoundError
from scamscan.models.models import Alternative, RedFlag, Scan
from scamscan.schemas.schemas import Alternative as AlternativeIn
from scamscan.schemas.schemas import RedFlag as RedFlagIn
from scamscan.schemas.schemas import ScanStats, TrendPoint
from scamscan.services.risk import CAUTION_MAX_SCORE


async def create_scan(
    db: AsyncSession,
    title: str,
    scam_score: int,
    analysis: str,
    url: Optional[str] = None,
    image_url: Optional[str] = None,
) -> Scan:
    """Insert the scan row and commit; id and created_at come back populated."""
    scan = Scan(
        title=title,
        url=url,
        image_url=image_url,
        scam_score=max(0, min(100, scam_score)),
        analysis=analysis,
    )
    try:
        db.add(scan)
        await db.commit()
        await db.refresh(scan)
    except SQLAlchemyError as e:
        await db.rollback()
        raise PersistenceError("create_scan", e) from e
    return scan


async def add_red_flags(db: AsyncSession, scan_id: str, red_flags: Sequence[RedFlagIn]) -> int:
    if not red_flags:
        return 0

    rows = [
        {
            "scan_id": scan_id,
            "severity": flag.severity or "medium",
            "description": flag.description or "Unknown issue",
        }
        for flag in red_flags
    ]
    try:
        await db.execute(insert(RedFlag), rows)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise PersistenceError("add_red_flags", e) from e
    return len(rows)


async def add_alternatives(db: AsyncSession, scan_id: str, alternatives: Sequence[AlternativeIn]) -> int:
    if not alternatives:
        return 0

    rows = [
        {
            "scan_id": scan_id,
            "title": alt.title or "Unknown product",
            "price": alt.price or "$0",
            "url": alt.url or "#",
            "trusted": bool(alt.trusted),
        }
        for alt in alternatives
    ]
    try:
        await db.execute(insert(Alternative), rows)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise PersistenceError("add_alternatives", e) from e
    return len(rows)


def _with_details(stmt):
    return stmt.options(selectinload(Scan.red_flags), selectinload(Scan.alternatives))


async def get_scan(db: AsyncSession, scan_id: str) -> Scan:
    result = await db.execute(_with_details(select(Scan).where(Scan.id == scan_id)))
    scan = result.scalar_one_or_none()
    if scan is None:
        raise ScanNotFoundError(scan_id)
    return scan


async def list_scans(db: AsyncSession) -> List[Scan]:
    """All scans, newest first, with their red flags and alternatives loaded."""
    stmt = _with_details(select(Scan).order_by(Scan.created_at.desc(), Scan.id.desc()))
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def delete_scan(db: AsyncSession, scan_id: str) -> None:
    """
    Delete the scan row only. Red flags and alternatives are left to the
    caller, see delete_scan_details.
    """
    result = await db.execute(delete(Scan).where(Scan.id == scan_id))
    if result.rowcount == 0:
        await db.rollback()
        raise ScanNotFoundError(scan_id)
    await db.commit()


async def delete_scan_details(db: AsyncSession, scan_id: str) -> None:
    """Remove the red flags and alternatives attached to a scan, without committing."""
    await db.execute(delete(RedFlag).where(RedFlag.scan_id == scan_id))
    await db.execute(delete(Alternative).where(Alternative.scan_id == scan_id))


async def scan_stats(db: AsyncSession) -> ScanStats:
    totals = await db.execute(
        select(
            func.count(Scan.id),
            func.count(Scan.id).filter(Scan.scam_score > CAUTION_MAX_SCORE),
            func.avg(Scan.scam_score),
        )
    )
    total, high_risk, average = totals.one()

    trend_rows = await db.execute(
        select(Scan.id, Scan.created_at, Scan.scam_score).order_by(Scan.created_at.asc(), Scan.id.asc())
    )
    trend = [
        TrendPoint(id=row.id, created_at=row.created_at, scam_score=row.scam_score)
        for row in trend_rows
    ]

    return ScanStats(
        total_scans=total or 0,
        high_risk_scans=high_risk or 0,
        average_score=round(float(average)) if average is not None else 0,
        trend=trend,
    )
