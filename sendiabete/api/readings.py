from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from sendiabete.api.deps import get_current_account, get_readings, get_workflow
from sendiabete.schemas.readings import ReadingOut, UploadOut
from sendiabete.services.accounts import Account
from sendiabete.services.readings import DEFAULT_LIST_LIMIT, ReadingLedger
from sendiabete.services.upload import UploadSubmission, UploadWorkflow

router = APIRouter(prefix="/readings", tags=["readings"])

@router.post("/upload", response_model=UploadOut)
async def upload_reading(
    photo: UploadFile | None = File(None),
    patient_id: str | None = Form(None),
    patient_name: str | None = Form(None),
    phone: str | None = Form(None),
    diabetes_type: str | None = Form(None),
    treatment: str | None = Form(None),
    account: Account = Depends(get_current_account),
    workflow: UploadWorkflow = Depends(get_workflow),
):
    image = await photo.read() if photo is not None else None
    result = await workflow.submit(
        account,
        UploadSubmission(
            image=image,
            patient_id=patient_id or None,
            patient_name=patient_name,
            phone=phone,
            diabetes_type=diabetes_type,
            treatment=treatment,
        ),
    )
    return UploadOut(
        reading_id=result.reading.reading_id,
        numeric_value=result.numeric_value,
        severity_band=result.severity_band.value,
        notification_text=result.notification_text,
        photos_remaining=result.photos_remaining,
    )

@router.get("", response_model=list[ReadingOut])
def my_readings(
    limit: int = Query(DEFAULT_LIST_LIMIT, ge=1, le=500),
    account: Account = Depends(get_current_account),
    readings: ReadingLedger = Depends(get_readings),
):
    return [ReadingOut.from_reading(r) for r in readings.list_for(account.account_id, limit=limit)]
