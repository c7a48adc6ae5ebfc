from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional

# Identity resolved from a session token by the external users service
class CurrentUser(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    email: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v):
        return str(v) if v is not None else v

# Body of the session creation request (OAuth authorization code)
class SessionCreate(BaseModel):
    code: Optional[str] = None

class RedirectUrlResponse(BaseModel):
    redirectUrl: str

class SuccessResponse(BaseModel):
    success: bool = True
