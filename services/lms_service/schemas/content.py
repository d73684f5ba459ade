from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

# --- Library ---


class AdminContentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    video_url: Optional[str] = None
    created_at: Optional[datetime] = None


# --- Modules ---


class ModuleCreate(BaseModel):
    title: Optional[str] = None


class ModuleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    instructor_id: int
    created_at: Optional[datetime] = None


class InstructorContentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    module_id: int
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    video: Optional[str] = None
    admin_content_id: Optional[int] = None
    created_at: Optional[datetime] = None


class ModuleWithContents(ModuleResponse):
    contents: List[InstructorContentResponse] = []


class MessageResponse(BaseModel):
    message: str
