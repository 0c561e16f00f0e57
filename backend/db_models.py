"""
SQLAlchemy ORM models for the travel & donation payments backend.

Tables:
    users     — credential store (email + bcrypt hash, profile picture)
    orders    — payment-order ledger keyed by the gateway's order id
    feedback  — free-text feedback submissions
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Text, Index

from database import Base
from domain.enums import PaymentStatus


class User(Base):
    """Registered users (email + salted password hash)."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(254), unique=True, nullable=False, index=True)
    password_hash = Column(String(100), nullable=False)  # bcrypt, includes salt
    profile_pic = Column(Text, nullable=True)  # relative path under UPLOAD_DIR
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)


class Order(Base):
    """
    One payment attempt, tracked from creation through confirmation.

    Lifecycle:
        1. Gateway mints a remote order -> row inserted (payment_status=Pending)
        2. Client completes checkout and posts the gateway signature
        3. Signature verified -> conditional update Pending -> Paid (terminal)

    Everything except payment_status, payment_id and paid_at is immutable
    after insert.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(64), unique=True, nullable=False, index=True)  # gateway-issued
    amount = Column(Integer, nullable=False)  # minor currency units (paise)
    currency = Column(String(3), nullable=False, default="INR")
    purpose = Column(String(20), nullable=False, default="checkout")  # checkout | travel | donation
    receipt = Column(String(40), nullable=True)

    # Traveler / donor metadata
    package_name = Column(String(200), nullable=True)
    payer_name = Column(String(200), nullable=True)
    payer_email = Column(String(254), nullable=True)
    payer_phone = Column(String(32), nullable=True)

    # Status tracking
    payment_status = Column(String(10), nullable=False, default=PaymentStatus.PENDING.value)
    payment_id = Column(String(64), nullable=True)  # set together with Paid

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    paid_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("ix_orders_purpose_status", "purpose", "payment_status"),
    )


class Feedback(Base):
    """Feedback submitted from the contact form."""
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=True)
    email = Column(String(254), nullable=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
