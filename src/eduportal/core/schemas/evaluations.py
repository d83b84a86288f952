"""
Submission and Evaluation Schemas

Student submission requests and teacher evaluation patches.
"""

from pydantic import BaseModel, Field, StrictFloat, StrictInt


class SubmissionCreate(BaseModel):
    """Schema for a student's attempt at an assignment."""

    content: str = Field(..., min_length=1, max_length=100_000)


class EvaluationPatch(BaseModel):
    """Partial evaluation of a submission.

    Only the fields present in the request are merged into the submission;
    an explicit null clears the field. Range checks on the grade happen in
    the evaluation mutator so they surface as InvalidGrade; booleans and
    numeric strings are rejected outright.
    """

    grade: StrictFloat | StrictInt | None = None
    feedback: str | None = Field(None, max_length=10_000)

    def changes(self) -> dict[str, float | int | str | None]:
        """Fields explicitly provided, keyed by their submission column name."""
        provided = self.model_dump(exclude_unset=True)
        columns = {"grade": "score", "feedback": "feedback"}
        return {columns[name]: value for name, value in provided.items()}
