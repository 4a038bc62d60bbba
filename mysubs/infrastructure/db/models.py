"""
SQLAlchemy ORM models
"""
from datetime import date as date_type, datetime, timezone

from sqlalchemy import String, Integer, Date, TIMESTAMP, CheckConstraint, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from mysubs.infrastructure.db.session import Base


class SubscriptionModel(Base):
    """Subscription: service, monthly price, owner and validity months"""
    __tablename__ = "subscriptions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    service_name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)

    # Always the first day of the month
    start_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    end_date: Mapped[date_type] = mapped_column(Date, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_subscriptions_price_non_negative"),
        CheckConstraint("start_date <= end_date", name="ck_subscriptions_period"),
        Index("ix_subscriptions_user_service", "user_id", "service_name"),
    )
