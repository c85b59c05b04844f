from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from sendiabete.db.base import Base
from sendiabete.db.session import make_engine, make_session_factory
from sendiabete.models.account import AccountRecord
from sendiabete.models.reading import ReadingRecord
from sendiabete.services.accounts import Account, AccountStatus, Role
from sendiabete.services.classifier import SeverityBand
from sendiabete.services.readings import Reading


# ---------------------------
# record <-> domain mapping
# ---------------------------

def _account_from_record(rec: AccountRecord) -> Account:
    return Account(
        account_id=rec.account_id,
        display_name=rec.display_name,
        email=rec.email,
        phone=rec.phone,
        secret_hash=rec.secret_hash,
        plan_id=rec.plan_id,
        photos_allowed=rec.photos_allowed,
        photos_used=rec.photos_used,
        activated_on=rec.activated_on,
        expires_on=rec.expires_on,
        status=AccountStatus(rec.status),
        role=Role(rec.role),
    )


def _apply_account(rec: AccountRecord, account: Account) -> AccountRecord:
    rec.display_name = account.display_name
    rec.email = account.email
    rec.phone = account.phone
    rec.secret_hash = account.secret_hash
    rec.plan_id = account.plan_id
    rec.photos_allowed = account.photos_allowed
    rec.photos_used = account.photos_used
    rec.activated_on = account.activated_on
    rec.expires_on = account.expires_on
    rec.status = account.status.value
    rec.role = account.role.value
    return rec


def _reading_from_record(rec: ReadingRecord) -> Reading:
    return Reading(
        reading_id=rec.reading_id,
        owner_account_id=rec.owner_account_id,
        patient_id=rec.patient_id,
        patient_name=rec.patient_name,
        patient_phone=rec.patient_phone,
        diabetes_type=rec.diabetes_type,
        treatment=rec.treatment,
        image_payload=rec.image_payload,
        numeric_value=Decimal(rec.numeric_value),
        severity_band=SeverityBand(rec.severity_band),
        notification_text=rec.notification_text,
        created_at=rec.created_at,
    )


def _record_from_reading(reading: Reading) -> ReadingRecord:
    return ReadingRecord(
        reading_id=reading.reading_id,
        owner_account_id=reading.owner_account_id,
        patient_id=reading.patient_id,
        patient_name=reading.patient_name,
        patient_phone=reading.patient_phone,
        diabetes_type=reading.diabetes_type,
        treatment=reading.treatment,
        image_payload=reading.image_payload,
        numeric_value=str(reading.numeric_value),
        severity_band=reading.severity_band.value,
        notification_text=reading.notification_text,
        created_at=reading.created_at,
    )


class SqlStore:
    """
    Persistence for accounts and readings.

    Every write runs in its own transaction and is committed before the
    method returns; any error rolls the transaction back and propagates.
    """

    def __init__(self, engine: Engine, session_factory: sessionmaker | None = None):
        self.engine = engine
        self._session_factory = session_factory or make_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "SqlStore":
        return cls(make_engine(database_url, echo=echo))

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    def load_accounts(self) -> list[Account]:
        with self._session_factory() as db:
            rows = db.scalars(select(AccountRecord).order_by(AccountRecord.account_id)).all()
            return [_account_from_record(r) for r in rows]

    def load_readings(self) -> list[Reading]:
        # most recent first
        with self._session_factory() as db:
            rows = db.scalars(select(ReadingRecord).order_by(ReadingRecord.reading_id.desc())).all()
            return [_reading_from_record(r) for r in rows]

    def _upsert_account(self, db: Session, account: Account) -> None:
        rec = db.get(AccountRecord, account.account_id)
        if rec is None:
            rec = AccountRecord(account_id=account.account_id)
            db.add(rec)
        _apply_account(rec, account)

    def save_account(self, account: Account) -> None:
        db = self._session_factory()
        try:
            self._upsert_account(db, account)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def record_upload(self, account: Account, reading: Reading) -> None:
        """Persist the consumed photo and its reading together."""
        db = self._session_factory()
        try:
            self._upsert_account(db, account)
            db.add(_record_from_reading(reading))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
