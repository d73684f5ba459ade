from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EnrollRequest(BaseModel):
    content_id: Optional[int] = None
    trainee_ids: List[int] = []


class EnrollResult(BaseModel):
    message: str
    content_id: int
    enrolled: List[int]


class TraineeSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str


# --- Instructor enrollment table: module -> content -> trainees ---


class EnrolledTrainee(BaseModel):
    first_name: str
    last_name: str
    trainee_id: Optional[str] = None


class ContentEnrollments(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    enrolled_trainees: List[EnrolledTrainee] = Field(
        default_factory=list, alias="enrolledTrainees"
    )


class ModuleEnrollments(BaseModel):
    id: int
    title: str
    contents: List[ContentEnrollments]


# --- Trainee course view: module -> contents ---


class TraineeContent(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    video: Optional[str] = None


class TraineeModule(BaseModel):
    id: int
    title: str
    contents: List[TraineeContent]
