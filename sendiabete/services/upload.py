"""
Photo upload workflow.

    authenticated -> quota reserved -> analyzed -> classified -> recorded

Short-circuits on the first failure. The quota reservation is taken and the
reading committed under the account lock, both in the threadpool so the
event loop never waits on a lock or a database commit. The vision call
runs between the two without any lock held. Any failure before the commit
releases the reservation and stores nothing.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from fastapi.concurrency import run_in_threadpool

from sendiabete.core.errors import AuthRequired, InvalidReading, MissingImage
from sendiabete.core.logging_config import get_logger
from sendiabete.services.accounts import Account, AccountLedger
from sendiabete.services.classifier import SeverityBand, classify, render_message
from sendiabete.services.readings import Reading, ReadingLedger

logger = get_logger(__name__)

# leading number of the analyzer's answer ("1.20", "1.20 g/L", " 0.5")
_LEADING_NUMBER = re.compile(r"\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")


def parse_reading(raw: str | None) -> Decimal:
    """Parse a reading, accepting a comma as the decimal separator."""
    if raw is None:
        raise InvalidReading()
    match = _LEADING_NUMBER.match(raw.replace(",", ".", 1))
    if not match:
        raise InvalidReading()
    try:
        value = Decimal(match.group().strip())
    except InvalidOperation:
        raise InvalidReading()
    if not value.is_finite():
        raise InvalidReading()
    return value


@dataclass(frozen=True)
class UploadSubmission:
    image: bytes | None
    patient_id: str | None = None
    patient_name: str | None = None
    phone: str | None = None
    diabetes_type: str | None = None
    treatment: str | None = None


@dataclass(frozen=True)
class UploadResult:
    reading: Reading
    photos_remaining: int

    @property
    def numeric_value(self) -> Decimal:
        return self.reading.numeric_value

    @property
    def severity_band(self) -> SeverityBand:
        return self.reading.severity_band

    @property
    def notification_text(self) -> str:
        return self.reading.notification_text


class UploadWorkflow:
    def __init__(self, accounts: AccountLedger, readings: ReadingLedger, analyzer):
        self.accounts = accounts
        self.readings = readings
        # anything with ``async analyze(bytes) -> str``
        self.analyzer = analyzer

    def _commit(self, account_id: str, submission: UploadSubmission, value: Decimal,
                band: SeverityBand, text: str) -> tuple[Reading, Account]:
        # blocking: account lock + database transaction, runs in the threadpool
        with self.accounts.locked(account_id):
            reading_id = self.readings.next_reading_id()
            reading = Reading(
                reading_id=reading_id,
                owner_account_id=account_id,
                patient_id=submission.patient_id or f"PAT{reading_id}",
                patient_name=submission.patient_name,
                patient_phone=submission.phone,
                diabetes_type=submission.diabetes_type,
                treatment=submission.treatment,
                image_payload=submission.image,
                numeric_value=value,
                severity_band=band,
                notification_text=text,
                created_at=datetime.now(timezone.utc),
            )
            account = self.accounts.decrement_quota(account_id, reading=reading, reserved=True)
            self.readings.append(reading)
            return reading, account

    async def submit(self, principal: Account | None, submission: UploadSubmission) -> UploadResult:
        if principal is None:
            raise AuthRequired()
        account_id = principal.account_id

        await run_in_threadpool(self.accounts.reserve_quota, account_id)
        committed = False
        try:
            if not submission.image:
                raise MissingImage()

            raw = await self.analyzer.analyze(submission.image)
            value = parse_reading(raw)

            band = classify(value)
            text = render_message(band, value)

            reading, account = await run_in_threadpool(self._commit, account_id, submission, value, band, text)
            committed = True
        finally:
            if not committed:
                await run_in_threadpool(self.accounts.release_quota, account_id)

        logger.info(
            "reading_recorded",
            account_id=account_id,
            reading_id=reading.reading_id,
            severity_band=band.value,
            photos_remaining=account.photos_remaining,
        )
        return UploadResult(reading=reading, photos_remaining=account.photos_remaining)
