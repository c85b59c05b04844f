from datetime import date
from decimal import Decimal
from pydantic import BaseModel, Field

from sendiabete.services.accounts import Account

class AccountOut(BaseModel):
    account_id: str
    display_name: str
    email: str
    phone: str | None
    role: str
    plan_id: str | None
    photos_allowed: int
    photos_used: int
    photos_remaining: int
    percent_used: int
    activated_on: date
    expires_on: date | None
    status: str

    class Config:
        from_attributes = True

    @classmethod
    def from_account(cls, account: Account) -> "AccountOut":
        return cls(
            account_id=account.account_id,
            display_name=account.display_name,
            email=account.email,
            phone=account.phone,
            role=account.role.value,
            plan_id=account.plan_id,
            photos_allowed=account.photos_allowed,
            photos_used=account.photos_used,
            photos_remaining=account.photos_remaining,
            percent_used=account.percent_used,
            activated_on=account.activated_on,
            expires_on=account.expires_on,
            status=account.status.value,
        )

class CreateAccountIn(BaseModel):
    account_id: str = Field(min_length=1, max_length=64)
    display_name: str = Field(min_length=1, max_length=120)
    email: str = Field(min_length=3, max_length=255)
    phone: str | None = None
    plan_id: str

class CredentialsOut(BaseModel):
    # plaintext password is only ever shown here, once
    account_id: str
    display_name: str
    email: str
    password: str
    plan_id: str
    plan_name: str
    photo_allowance: int
    validity_days: int
    price: Decimal
    currency: str
    expires_on: date

class CreateAccountOut(BaseModel):
    success: bool = True
    credentials: CredentialsOut

class StatsOut(BaseModel):
    total_accounts: int
    active_accounts: int
    photos_sold: int
    revenue: Decimal
    photos_used: int

    class Config:
        from_attributes = True
