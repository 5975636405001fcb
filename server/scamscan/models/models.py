import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from scamscan.db import Base
from scamscan.services.risk import risk_level


def _new_scan_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Scan(Base):
    __tablename__ = "scans"

    id = Column(String(36), primary_key=True, default=_new_scan_id)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
    title = Column(String, nullable=False)
    url = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    scam_score = Column(Integer, nullable=False)
    analysis = Column(Text, nullable=False, default="")

    # children are removed by the caller, see crud.delete_scan_details
    red_flags = relationship("RedFlag", order_by="RedFlag.id", viewonly=True)
    alternatives = relationship("Alternative", order_by="Alternative.id", viewonly=True)

    @property
    def risk_level(self) -> str:
        return risk_level(self.scam_score)


class RedFlag(Base):
    __tablename__ = "red_flags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    scan_id = Column(String(36), ForeignKey("scans.id"), nullable=False, index=True)
    severity = Column(String(16), nullable=False, default="medium")
    description = Column(Text, nullable=False)


class Alternative(Base):
    __tablename__ = "alternatives"

    id = Column(Integer, primary_key=True, autoincrement=True)
    scan_id = Column(String(36), ForeignKey("scans.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    price = Column(String(32), nullable=False)
    url = Column(String, nullable=False)
    trusted = Column(Boolean, nullable=False, default=False)
