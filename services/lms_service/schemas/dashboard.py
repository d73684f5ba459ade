"""Role-specific dashboard view-models.

``DashboardResponse.stats`` is one of ``AdminStats``, ``InstructorStats`` or
``TraineeStats``; ``user.role`` tells the front end which one it received.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict


class DashboardUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    role: str
    title: Optional[str] = None
    trainee_id: Optional[str] = None
    profile_picture: Optional[str] = None


# --- Admin ---


class RoleBucket(BaseModel):
    name: str
    value: int


class AdminStats(BaseModel):
    total_users: int
    total_admins: int
    total_instructors: int
    total_trainees: int
    role_distribution: List[RoleBucket]


# --- Instructor ---


class InstructorContentStat(BaseModel):
    content_id: int
    content_title: str
    trainee_count: int = 0


class InstructorModuleStat(BaseModel):
    module_id: int
    module_title: str
    contents: List[InstructorContentStat] = []


class InstructorStats(BaseModel):
    total_modules: int
    total_contents: int
    total_trainees: int
    modules: List[InstructorModuleStat]


# --- Trainee ---


class TraineeModuleRef(BaseModel):
    module_title: str


class TraineeContentGroup(BaseModel):
    content_title: str
    modules: List[TraineeModuleRef]


class TraineeStats(BaseModel):
    trainee_id: Optional[str] = None
    total_modules_enrolled: int
    total_contents_enrolled: int
    contents: List[TraineeContentGroup]


DashboardStats = Union[AdminStats, InstructorStats, TraineeStats]


class DashboardResponse(BaseModel):
    user: DashboardUser
    stats: DashboardStats
