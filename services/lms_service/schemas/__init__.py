"""Pydantic view-models for the LMS service."""

from services.lms_service.schemas.content import (
    AdminContentResponse,
    InstructorContentResponse,
    MessageResponse,
    ModuleCreate,
    ModuleResponse,
    ModuleWithContents,
)
from services.lms_service.schemas.dashboard import (
    AdminStats,
    DashboardResponse,
    DashboardStats,
    DashboardUser,
    InstructorContentStat,
    InstructorModuleStat,
    InstructorStats,
    RoleBucket,
    TraineeContentGroup,
    TraineeModuleRef,
    TraineeStats,
)
from services.lms_service.schemas.enrollment import (
    ContentEnrollments,
    EnrolledTrainee,
    EnrollRequest,
    EnrollResult,
    ModuleEnrollments,
    TraineeContent,
    TraineeModule,
    TraineeSummary,
)
from services.lms_service.schemas.users import (
    LoginRequest,
    LoginResponse,
    PasswordResetRequest,
    PasswordResetResponse,
    ProfileUpdateResponse,
    UserCreate,
    UserCreatedResponse,
    UserResponse,
)

__all__ = [
    "AdminContentResponse",
    "AdminStats",
    "ContentEnrollments",
    "DashboardResponse",
    "DashboardStats",
    "DashboardUser",
    "EnrollRequest",
    "EnrollResult",
    "EnrolledTrainee",
    "InstructorContentResponse",
    "InstructorContentStat",
    "InstructorModuleStat",
    "InstructorStats",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "ModuleCreate",
    "ModuleEnrollments",
    "ModuleResponse",
    "ModuleWithContents",
    "PasswordResetRequest",
    "PasswordResetResponse",
    "ProfileUpdateResponse",
    "RoleBucket",
    "TraineeContent",
    "TraineeContentGroup",
    "TraineeModule",
    "TraineeModuleRef",
    "TraineeStats",
    "TraineeSummary",
    "UserCreate",
    "UserCreatedResponse",
    "UserResponse",
]
