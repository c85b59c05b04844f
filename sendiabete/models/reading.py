from datetime import datetime
from sqlalchemy import BigInteger, DateTime, ForeignKey, LargeBinary, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sendiabete.db.base import Base

class ReadingRecord(Base):
    __tablename__ = "readings"

    # Monotonic, derived from the submission clock (microseconds)
    reading_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)

    owner_account_id: Mapped[str] = mapped_column(ForeignKey("accounts.account_id"), index=True)

    patient_id: Mapped[str] = mapped_column(String(64), index=True)
    patient_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    patient_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    diabetes_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    treatment: Mapped[str | None] = mapped_column(Text, nullable=True)

    image_payload: Mapped[bytes] = mapped_column(LargeBinary)

    # g/L, str(Decimal) exactly as read: no rounding, no precision limit
    numeric_value: Mapped[str] = mapped_column(String(64))
    severity_band: Mapped[str] = mapped_column(String(32))
    notification_text: Mapped[str] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
