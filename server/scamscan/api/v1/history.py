import logging
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from scamscan.core.exceptions import PersistenceError
from scamscan.db import crud
from scamscan.db.db import get_db
from scamscan.schemas.schemas import ScanOut, ScanStats

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/scan-history", response_model=List[ScanOut])
async def scan_history(db: AsyncSession = Depends(get_db)):
    """
    All stored scans, newest first, each with its red flags and alternatives.
    """
    try:
        scans = await crud.list_scans(db)
    except SQLAlchemyError:
        logger.exception("Error in scan history API")
        return JSONResponse({"error": "Failed to fetch scan history"}, status_code=500)
    return [ScanOut.model_validate(scan) for scan in scans]

@router.get("/scan-history/stats", response_model=ScanStats)
async def scan_history_stats(db: AsyncSession = Depends(get_db)):
    """
    Dashboard numbers: totals, high-risk count, average score and the score trend.
    """
    try:
        return await crud.scan_stats(db)
    except SQLAlchemyError:
        logger.exception("Error computing scan stats")
        return JSONResponse({"error": "Failed to fetch scan stats"}, status_code=500)

@router.get("/scan-history/{scan_id}", response_model=ScanOut)
async def scan_details(scan_id: str, db: AsyncSession = Depends(get_db)):
    scan = await crud.get_scan(db, scan_id)
    return ScanOut.model_validate(scan)

@router.delete("/scan-history/{scan_id}")
async def delete_scan(scan_id: str, db: AsyncSession = Depends(get_db)):
    """
    Delete a scan together with its red flags and alternatives.
    """
    try:
        await crud.delete_scan_details(db, scan_id)
        await crud.delete_scan(db, scan_id)
    except SQLAlchemyError as e:
        await db.rollback()
        raise PersistenceError("delete_scan", e) from e

    logger.info("Deleted scan %s", scan_id)
    return {"success": True}
