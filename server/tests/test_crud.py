from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from scamscan.core.exceptions import ScanNotFoundError
from scamscan.db import crud
from scamscan.models.models import Alternative, RedFlag, Scan
from scamscan.schemas.schemas import Alternative as AlternativeIn
from scamscan.schemas.schemas import RedFlag as RedFlagIn


async def _count(db, model):
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


async def _store(db, title, score, created_at=None):
    scan = await crud.create_scan(db, title=title, scam_score=score, analysis=f"{title} analysis")
    if created_at is not None:
        scan.created_at = created_at
        await db.commit()
    return scan


async def test_create_scan_assigns_id_and_timestamp(db):
    scan = await crud.create_scan(
        db, title="Bike", scam_score=130, analysis="Too cheap", url="https://m.example/1",
    )

    assert len(scan.id) == 36
    assert scan.created_at is not None
    assert scan.scam_score == 100
    assert scan.risk_level == "danger"
    assert scan.image_url is None


async def test_get_scan_loads_details(db):
    scan = await _store(db, "Phone", 75)
    await crud.add_red_flags(db, scan.id, [
        RedFlagIn(severity="high", description="Price is 50% below market value"),
        RedFlagIn(severity="low", description="Short description"),
    ])
    await crud.add_alternatives(db, scan.id, [
        AlternativeIn(title="Phone - New", price="$800.00", url="https://shop.example/p", trusted=True),
    ])
    db.expunge_all()

    loaded = await crud.get_scan(db, scan.id)

    assert loaded.title == "Phone"
    assert [(f.severity, f.description) for f in loaded.red_flags] == [
        ("high", "Price is 50% below market value"),
        ("low", "Short description"),
    ]
    assert loaded.alternatives[0].price == "$800.00"
    assert loaded.alternatives[0].trusted is True


async def test_add_nothing_is_a_no_op(db):
    scan = await _store(db, "Lamp", 10)

    assert await crud.add_red_flags(db, scan.id, []) == 0
    assert await crud.add_alternatives(db, scan.id, []) == 0


async def test_get_missing_scan(db):
    with pytest.raises(ScanNotFoundError):
        await crud.get_scan(db, "does-not-exist")


async def test_list_scans_newest_first(db):
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    await _store(db, "first", 10, start)
    await _store(db, "third", 90, start + timedelta(hours=2))
    await _store(db, "second", 50, start + timedelta(hours=1))

    scans = await crud.list_scans(db)

    assert [s.title for s in scans] == ["third", "second", "first"]


async def test_delete_scan_leaves_details_behind(db):
    scan = await _store(db, "Watch", 40)
    await crud.add_red_flags(db, scan.id, [RedFlagIn(description="Stock photo")])

    await crud.delete_scan(db, scan.id)

    with pytest.raises(ScanNotFoundError):
        await crud.get_scan(db, scan.id)
    assert await _count(db, RedFlag) == 1


async def test_delete_scan_details_then_scan(db):
    scan = await _store(db, "Watch", 40)
    await crud.add_red_flags(db, scan.id, [RedFlagIn(description="Stock photo")])
    await crud.add_alternatives(db, scan.id, [AlternativeIn(title="Watch", price="$200.00")])

    await crud.delete_scan_details(db, scan.id)
    await crud.delete_scan(db, scan.id)

    assert await _count(db, Scan) == 0
    assert await _count(db, RedFlag) == 0
    assert await _count(db, Alternative) == 0


async def test_delete_missing_scan(db):
    with pytest.raises(ScanNotFoundError):
        await crud.delete_scan(db, "nope")


async def test_scan_stats(db):
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    await _store(db, "a", 20, start)
    await _store(db, "b", 71, start + timedelta(minutes=1))
    await _store(db, "c", 70, start + timedelta(minutes=2))
    await _store(db, "d", 95, start + timedelta(minutes=3))

    stats = await crud.scan_stats(db)

    assert stats.total_scans == 4
    assert stats.high_risk_scans == 2
    # (20 + 71 + 70 + 95) / 4 = 64
    assert stats.average_score == 64
    assert [p.scam_score for p in stats.trend] == [20, 71, 70, 95]


async def test_scan_stats_empty(db):
    stats = await crud.scan_stats(db)

    assert (stats.total_scans, stats.high_risk_scans, stats.average_score, stats.trend) == (0, 0, 0, [])
