from fastapi import APIRouter, Depends

from sendiabete.api.deps import get_accounts, get_catalog, require_admin
from sendiabete.schemas.accounts import AccountOut, CreateAccountIn, CreateAccountOut, CredentialsOut, StatsOut
from sendiabete.services.accounts import AccountLedger
from sendiabete.services.catalog import LicenseCatalog
from sendiabete.services.reporting import practitioners, summarize

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

@router.get("/stats", response_model=StatsOut)
def stats(
    accounts: AccountLedger = Depends(get_accounts),
    catalog: LicenseCatalog = Depends(get_catalog),
):
    return summarize(accounts, catalog)

@router.get("/accounts", response_model=list[AccountOut])
def list_accounts(accounts: AccountLedger = Depends(get_accounts)):
    return [AccountOut.from_account(a) for a in practitioners(accounts)]

@router.post("/accounts", response_model=CreateAccountOut)
def create_account(
    payload: CreateAccountIn,
    accounts: AccountLedger = Depends(get_accounts),
    catalog: LicenseCatalog = Depends(get_catalog),
):
    account, secret = accounts.create(
        account_id=payload.account_id,
        display_name=payload.display_name,
        email=payload.email,
        phone=payload.phone,
        plan_id=payload.plan_id,
    )
    plan = catalog.lookup(account.plan_id)
    return CreateAccountOut(
        credentials=CredentialsOut(
            account_id=account.account_id,
            display_name=account.display_name,
            email=account.email,
            password=secret,
            plan_id=plan.plan_id,
            plan_name=plan.name,
            photo_allowance=account.photos_allowed,
            validity_days=plan.validity_days,
            price=plan.price,
            currency=plan.currency,
            expires_on=account.expires_on,
        )
    )
