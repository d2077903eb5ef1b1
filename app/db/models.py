"""Database models."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Numeric
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

MONEY = Numeric(10, 2, asdecimal=True)
# Unit prices and rates keep sub-cent precision
PRICE_SCALE = 4
PRICE = Numeric(12, PRICE_SCALE, asdecimal=True)
RATE = Numeric(7, PRICE_SCALE, asdecimal=True)


class SiteSetting(Base):
    """Key/value business setting editable from the admin dashboard."""

    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, unique=True, index=True, nullable=False)
    value = Column(Text, nullable=False)
    type = Column(String, default="text", nullable=False)  # text, json, number, boolean
    category = Column(String, default="general", nullable=False)
    description = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class Order(Base):
    """Order model. Monetary fields come from the order total calculator."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, unique=True, index=True, nullable=False)
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    delivery_address = Column(Text, nullable=True)
    order_type = Column(String, default="delivery", nullable=False)  # pickup, delivery
    # pending, confirmed, preparing, out_for_delivery, delivered, cancelled
    status = Column(String, default="pending", nullable=False)
    subtotal = Column(MONEY, nullable=False)
    gst_rate = Column(RATE, nullable=False)
    gst_amount = Column(MONEY, nullable=False)
    delivery_charges = Column(MONEY, nullable=False)
    service_charges = Column(MONEY, nullable=False)
    total_amount = Column(MONEY, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    """Order item model."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    item_name = Column(String, nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    unit_price = Column(PRICE, nullable=False)
    line_total = Column(MONEY, nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
