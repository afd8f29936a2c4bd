"""Table rows backing the SQL stores"""

import uuid

from sqlalchemy import JSON, BigInteger, Column, DateTime, ForeignKey, Integer, String, Uuid, func

from ..database import Base


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class EventRow(Base):
    __tablename__ = "events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    duration_hours = Column(Integer, nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # [{"start_time": epoch, "end_time": epoch}, ...] in the organizer's order
    slots = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False)


class AvailabilityRow(Base):
    __tablename__ = "users_availability"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    start_ts = Column(BigInteger, primary_key=True)
    end_ts = Column(BigInteger, primary_key=True)
