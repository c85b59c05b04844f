import base64
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel

from sendiabete.services.readings import Reading

class UploadOut(BaseModel):
    success: bool = True
    reading_id: int
    numeric_value: Decimal
    severity_band: str
    notification_text: str
    photos_remaining: int

class ReadingOut(BaseModel):
    reading_id: int
    patient_id: str
    patient_name: str | None
    patient_phone: str | None
    diabetes_type: str | None
    treatment: str | None
    image_data: str  # base64
    numeric_value: Decimal
    severity_band: str
    notification_text: str
    created_at: datetime

    @classmethod
    def from_reading(cls, reading: Reading) -> "ReadingOut":
        return cls(
            reading_id=reading.reading_id,
            patient_id=reading.patient_id,
            patient_name=reading.patient_name,
            patient_phone=reading.patient_phone,
            diabetes_type=reading.diabetes_type,
            treatment=reading.treatment,
            image_data=base64.b64encode(reading.image_payload).decode("ascii"),
            numeric_value=reading.numeric_value,
            severity_band=reading.severity_band.value,
            notification_text=reading.notification_text,
            created_at=reading.created_at,
        )

class ErrorOut(BaseModel):
    error: str
    message: str
