"""
SQLAlchemy ORM models.

Tables
------
* ``delivery_orders`` -- parcels waiting to be dispatched
* ``vehicles``        -- fleet with weight capacity and current position

Indexes
-------
* **Unique** constraints on ``order_id`` / ``vehicle_id``.  The service
  checks for existing ids first; the constraint only catches concurrent
  inserts that race past that check.
* **B-Tree** on ``priority``.
* Rows are read back in surrogate ``id`` (insertion) order so that orders
  with equal priority and weight keep their submission order in the plan.
"""

from sqlalchemy import Column, DateTime, Enum, Float, Index, Integer, String, func

from .database import Base
from dispatch.domain.enums import Priority


class OrderModel(Base):
    __tablename__ = "delivery_orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(50), unique=True, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String(500), nullable=False)
    package_weight = Column(Integer, nullable=False)  # grams
    priority = Column(Enum(Priority), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_orders_priority", "priority"),
    )


class VehicleModel(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(String(50), unique=True, nullable=False)
    capacity = Column(Integer, nullable=False)  # grams
    current_latitude = Column(Float, nullable=False)
    current_longitude = Column(Float, nullable=False)
    current_address = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
