from datetime import date, datetime
from enum import Enum
from typing import Optional, Dict, List

from pydantic import BaseModel, ConfigDict, Field, computed_field


class CompanyStatus(str, Enum):
    """Pipeline stages, in board order."""
    PENDING = "pending"
    APPLIED = "applied"
    APTITUDE = "aptitude"
    INTERVIEW = "interview"
    PASSED = "passed"
    REJECTED = "rejected"


class PositionType(str, Enum):
    NEW_GRAD = "new-grad"
    INTERN_CONVERSION = "intern-conversion"
    INTERN_EXPERIENCE = "intern-experience"


STATUS_ORDER: List[CompanyStatus] = list(CompanyStatus)

# Shared by every model that speaks the camelCase wire format
CAMEL_CONFIG = ConfigDict(populate_by_name=True, from_attributes=True, use_enum_values=False)


# Token Schemas
class Token(BaseModel):
    access_token: str
    token_type: str

class TokenData(BaseModel):
    email: Optional[str] = None

# User Schemas
class UserBase(BaseModel):
    email: str

class UserCreate(UserBase):
    password: str

class User(UserBase):
    id: int
    is_active: bool

    class Config:
        from_attributes = True


# Profile Schemas
class UserProfileBase(BaseModel):
    full_name: Optional[str] = None
    university: Optional[str] = None
    major: Optional[str] = None

class UserProfileUpdate(UserProfileBase):
    pass

class UserProfile(UserProfileBase):
    id: int
    email: Optional[str] = None


# User Settings Schemas
class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"

class NotificationSettings(BaseModel):
    model_config = CAMEL_CONFIG

    email_notifications: bool = Field(default=True, alias="emailNotifications")
    interview_reminders: bool = Field(default=True, alias="interviewReminders")
    application_deadlines: bool = Field(default=True, alias="applicationDeadlines")
    sound_enabled: bool = Field(default=True, alias="soundEnabled")

class DisplayPreferences(BaseModel):
    model_config = CAMEL_CONFIG

    language: str = Field(default="ko", min_length=2, max_length=10)
    theme: Theme = Theme.SYSTEM
    auto_save: bool = Field(default=True, alias="autoSave")
    compact_view: bool = Field(default=False, alias="compactView")

class UserSettings(BaseModel):
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    preferences: DisplayPreferences = Field(default_factory=DisplayPreferences)


# Cover Letter Section Schemas
class CoverLetterSectionBase(BaseModel):
    model_config = CAMEL_CONFIG

    title: str = ""
    content: str = ""
    max_length: Optional[int] = Field(default=None, alias="maxLength")

class CoverLetterSectionCreate(CoverLetterSectionBase):
    id: Optional[str] = None

class CoverLetterSection(CoverLetterSectionBase):
    id: str

    @computed_field(alias="isOverLimit")
    @property
    def is_over_limit(self) -> bool:
        """Advisory only, never enforced on write."""
        return self.max_length is not None and len(self.content) > self.max_length


# Company Schemas
class CompanyBase(BaseModel):
    model_config = CAMEL_CONFIG

    name: str
    position: str
    position_type: Optional[PositionType] = Field(default=None, alias="positionType")
    status: CompanyStatus = CompanyStatus.PENDING
    deadline: Optional[str] = None
    description: Optional[str] = None
    application_link: Optional[str] = Field(default=None, alias="applicationLink")
    cover_letter: Optional[str] = Field(default=None, alias="coverLetter")

class CompanyCreate(CompanyBase):
    cover_letter_sections: List[CoverLetterSectionCreate] = Field(default_factory=list, alias="coverLetterSections")

class CompanyUpdate(BaseModel):
    model_config = CAMEL_CONFIG

    name: Optional[str] = None
    position: Optional[str] = None
    position_type: Optional[PositionType] = Field(default=None, alias="positionType")
    status: Optional[CompanyStatus] = None
    deadline: Optional[str] = None
    description: Optional[str] = None
    application_link: Optional[str] = Field(default=None, alias="applicationLink")
    cover_letter: Optional[str] = Field(default=None, alias="coverLetter")
    cover_letter_sections: Optional[List[CoverLetterSectionCreate]] = Field(default=None, alias="coverLetterSections")

class Company(CompanyBase):
    id: str
    created_at: datetime = Field(alias="createdAt")
    cover_letter_sections: List[CoverLetterSection] = Field(default_factory=list, alias="coverLetterSections")


# Kanban Board Schemas
class StatusColumnConfig(BaseModel):
    title: str
    color: str = ""
    shadow: str = ""

class BoardColumn(StatusColumnConfig):
    model_config = CAMEL_CONFIG

    status: CompanyStatus
    companies: List[Company] = []

    @computed_field
    @property
    def count(self) -> int:
        return len(self.companies)

class Board(BaseModel):
    columns: List[BoardColumn]
    total: int

class MoveRequest(BaseModel):
    model_config = CAMEL_CONFIG

    company_id: str = Field(alias="companyId")
    status: CompanyStatus

class MoveResult(BaseModel):
    moved: bool
    company: Optional[Company] = None

class ColumnTitleUpdate(BaseModel):
    title: str


# Statistics Schemas
class StatsOverview(BaseModel):
    model_config = CAMEL_CONFIG

    total: int
    pending: int
    active: int
    passed: int
    rejected: int
    success_rate: int = Field(alias="successRate")

class StageCount(BaseModel):
    status: CompanyStatus
    count: int
    percentage: int

class TimelinePoint(BaseModel):
    month: str
    counts: Dict[CompanyStatus, int]
    total: int

class Statistics(BaseModel):
    overview: StatsOverview
    stages: List[StageCount]
    timeline: List[TimelinePoint]


# Calendar Schemas
class DeadlineEvent(BaseModel):
    model_config = CAMEL_CONFIG

    company_id: str = Field(alias="companyId")
    company_name: str = Field(alias="companyName")
    position: str
    status: CompanyStatus
    deadline: datetime
    day: date
    time: Optional[str] = None
