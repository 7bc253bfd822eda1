from sqlmodel import SQLModel, Field
from typing import Optional

class StudySession(SQLModel, table=True):
    __tablename__ = "study_sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    student_id: str = Field(index=True)
    grade: str
    subject: str
    question: str
    response: str # the tutor's guide message
    timestamp: str # iso-8601, utc
