from pydantic import BaseModel, EmailStr, Field, ConfigDict


class SignUpIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    full_name: str = Field(alias="fullName", min_length=2, max_length=50)
    email: EmailStr


class SignInIn(BaseModel):
    email: EmailStr


class VerifyIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    account_id: str = Field(alias="accountId", min_length=1)
    password: str = Field(min_length=6, max_length=6, description="The 6-digit code from the email")


class UserOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    id: str = Field(alias="$id")
    full_name: str = Field(alias="fullName")
    email: str
    avatar: str
    account_id: str = Field(alias="accountId")
