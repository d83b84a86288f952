"""
Course Content Schemas

Pydantic models for teacher-side course, competency, assignment and material
requests, plus enrollment batches.
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from .records import UTCDateTime


# Course Schemas
class CourseCreate(BaseModel):
    """Schema for creating a course. The creator becomes its teacher."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)


# Competency Schemas
class CompetencyCreate(BaseModel):
    """Schema for adding a competency to a course."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)


class CompetencyUpdate(BaseModel):
    """Schema for updating a competency. Only provided fields change."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None


# Assignment Schemas
class AssignmentCreate(BaseModel):
    """Schema for creating an assignment."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    type: str = Field(default="homework", min_length=1, max_length=50)
    start_date: UTCDateTime | None = None
    end_date: UTCDateTime | None = None
    max_attempts: int | None = Field(None, ge=1, description="NULL = unlimited")

    @model_validator(mode="after")
    def check_window(self) -> "AssignmentCreate":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class AssignmentUpdate(BaseModel):
    """Schema for updating an assignment. Only provided fields change."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    type: str | None = Field(None, min_length=1, max_length=50)
    start_date: UTCDateTime | None = None
    end_date: UTCDateTime | None = None
    max_attempts: int | None = Field(None, ge=1)


# Material Schemas
class MaterialCreate(BaseModel):
    """Schema for attaching an already-uploaded file to a course."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    file_url: str = Field(..., min_length=1, max_length=1000)


class MaterialUpdate(BaseModel):
    """Schema for updating material metadata."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    file_url: str | None = Field(None, min_length=1, max_length=1000)


# Enrollment Schemas
class EnrollmentRequest(BaseModel):
    """Batch of students to enroll in one course."""

    student_ids: list[str] = Field(..., min_length=1)


class EnrollmentResult(BaseModel):
    """Per-student outcome of a bulk enroll."""

    student_id: str
    outcome: Literal["enrolled", "alreadyEnrolled"]
