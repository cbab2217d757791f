from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional

class RenameIn(BaseModel):
    name: str = Field(min_length=1, max_length=255, description="New base name, without extension")
    extension: Optional[str] = Field(default=None, max_length=32, description="Defaults to the file's current extension")
    path: str = "/"

class ShareIn(BaseModel):
    emails: List[EmailStr] = Field(default_factory=list)
    path: str = "/"

class BucketUsage(BaseModel):
    size: int
    latestDate: str

class TotalSpace(BaseModel):
    document: BucketUsage
    image: BucketUsage
    video: BucketUsage
    audio: BucketUsage
    other: BucketUsage
    used: int
    all: int
