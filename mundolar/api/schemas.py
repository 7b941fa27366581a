from pydantic import BaseModel
from typing import Optional

# Fields are optional so missing values get the handlers' own 400 messages
# instead of FastAPI's generic 422.

class InviteUserIn(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None

class UpdateUserIn(BaseModel):
    id: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = None

class PresignedUploadIn(BaseModel):
    fileName: Optional[str] = None
    contentType: Optional[str] = None
    folder: Optional[str] = None

class DeleteUploadIn(BaseModel):
    publicUrl: Optional[str] = None
