import uuid
from enum import Enum

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, Numeric, String, Text, Uuid, func

from subtrack.core.database import Base


class CycleKind(str, Enum):
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=True)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="CNY")
    # Stored as the raw tag so unreadable rows can still be loaded and fall back
    cycle_kind = Column(String(20), nullable=False, default=CycleKind.MONTHLY.value)
    cycle_duration = Column(Integer, nullable=False, default=1)
    start_date = Column(Date, nullable=False)
    next_renewal_date = Column(Date, nullable=False, index=True)
    auto_renewal = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_paused = Column(Boolean, nullable=False, default=False)
    is_one_time = Column(Boolean, nullable=False, default=False)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
