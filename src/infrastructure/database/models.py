"""SQLAlchemy ORM models for installment entities."""

from datetime import datetime, date
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class InstallmentPlanModel(Base):
    """Persisted plan version attached to a product."""

    __tablename__ = "installment_plans"
    __table_args__ = (
        UniqueConstraint("product_id", "version", name="uq_installment_plans_product_version"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    product_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    seller_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    initial_deposit_percent: Mapped[float] = mapped_column(Float, nullable=False)
    frequency: Mapped[str] = mapped_column(String(20), nullable=False)
    duration_periods: Mapped[int] = mapped_column(Integer, nullable=False)
    min_payment_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    grace_period_days: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    allow_partial_payments: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    allow_early_completion: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    schedule: Mapped[list] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )


class InstallmentOrderModel(Base):
    """Persisted order ledger row."""

    __tablename__ = "installment_orders"
    __table_args__ = (
        CheckConstraint("amount_paid_cents >= 0", name="ck_orders_paid_non_negative"),
        CheckConstraint("amount_paid_cents <= total_cents", name="ck_orders_paid_le_total"),
        CheckConstraint("reschedule_count >= 0", name="ck_orders_reschedule_non_negative"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    buyer_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    seller_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    product_id: Mapped[str] = mapped_column(String(255), nullable=False)
    plan_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("installment_plans.id"),
        nullable=False,
    )
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    amount_paid_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    installment_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    next_due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active", index=True)
    reschedule_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )

    payments: Mapped[list["InstallmentPaymentModel"]] = relationship(
        "InstallmentPaymentModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="InstallmentPaymentModel.step_number",
    )

    __mapper_args__ = {"version_id_col": version}


class InstallmentPaymentModel(Base):
    """Persisted scheduled payment within an order."""

    __tablename__ = "installment_payments"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    order_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("installment_orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    step_number: Mapped[int] = mapped_column(Integer, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    paid_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="pending",
    )
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )

    order: Mapped["InstallmentOrderModel"] = relationship(
        "InstallmentOrderModel",
        back_populates="payments",
    )


class WalletModel(Base):
    """Persisted buyer wallet balance."""

    __tablename__ = "wallets"
    __table_args__ = (
        CheckConstraint("balance_cents >= 0", name="ck_wallets_balance_non_negative"),
    )

    buyer_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    balance_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )


class PaymentRequestModel(Base):
    """Processed payment request, one row per idempotency key."""

    __tablename__ = "installment_payment_requests"

    idempotency_key: Mapped[str] = mapped_column(String(255), primary_key=True)
    order_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("installment_orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    buyer_id: Mapped[str] = mapped_column(String(255), nullable=False)
    method: Mapped[str] = mapped_column(String(20), nullable=False)
    requested_amount_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    applied_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    amount_paid_after_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    status_after: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )
