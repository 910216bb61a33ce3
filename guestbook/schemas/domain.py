from pydantic import BaseModel, Field

class DomainConnect(BaseModel):
    custom_domain: str = Field(..., min_length=1, max_length=255)

class DomainResolveResponse(BaseModel):
    username: str
