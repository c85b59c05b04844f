from datetime import date
from sqlalchemy import Enum, Date, String, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column
from sendiabete.db.base import Base

class AccountRecord(Base):
    __tablename__ = "accounts"

    # Chosen by the admin at creation, never changes
    account_id: Mapped[str] = mapped_column(String(64), primary_key=True)

    display_name: Mapped[str] = mapped_column(String(120))
    email: Mapped[str] = mapped_column(String(255), index=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)

    secret_hash: Mapped[str] = mapped_column(String(255))

    role: Mapped[str] = mapped_column(
        Enum("practitioner", "admin", name="account_role"),
        default="practitioner",
    )

    # Plan is copied at creation: later catalog changes do not touch existing accounts
    plan_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    photos_allowed: Mapped[int] = mapped_column(Integer, default=0)
    photos_used: Mapped[int] = mapped_column(Integer, default=0)

    activated_on: Mapped[date] = mapped_column(Date)
    expires_on: Mapped[date | None] = mapped_column(Date, nullable=True)

    status: Mapped[str] = mapped_column(
        Enum("active", "inactive", name="account_status"),
        default="active",
        index=True,
    )

    __table_args__ = (
        Index("ix_accounts_role_status", "role", "status"),
    )
