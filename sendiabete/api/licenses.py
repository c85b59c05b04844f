from fastapi import APIRouter, Depends

from sendiabete.api.deps import get_catalog, get_current_account
from sendiabete.schemas.accounts import AccountOut
from sendiabete.schemas.licenses import PlanOut
from sendiabete.services.accounts import Account
from sendiabete.services.catalog import LicenseCatalog

router = APIRouter(tags=["licenses"])

# Display available license plans
@router.get("/licenses/plans", response_model=list[PlanOut])
def list_plans(catalog: LicenseCatalog = Depends(get_catalog)):
    return catalog.plans()

# Current practitioner's license and quota
@router.get("/me/account", response_model=AccountOut)
def my_account(account: Account = Depends(get_current_account)):
    return AccountOut.from_account(account)
