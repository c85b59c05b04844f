from pydantic import BaseModel

class LoginIn(BaseModel):
    # account id or email
    identifier: str
    password: str

class SessionOut(BaseModel):
    account_id: str
    display_name: str
    is_admin: bool

class TokenOut(SessionOut):
    access_token: str
    token_type: str = "bearer"
