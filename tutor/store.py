from sqlmodel import create_engine, SQLModel, Session, select, func
from typing import List, Optional
from tutor.models import StudySession

class SessionStore:
    """Append-only access to the study_sessions table."""

    def __init__(self, pg_engine):
        self.pg_engine = pg_engine

    @classmethod
    def from_url(cls, database_url: str):
        return cls(create_engine(database_url))

    def create_tables(self):
        SQLModel.metadata.create_all(self.pg_engine)

    def insert(self, student_id: str, grade: str, subject: str, question: str, response: str, timestamp: str):
        with Session(self.pg_engine) as session:
            session.add(StudySession(
                student_id=student_id,
                grade=grade,
                subject=subject,
                question=question,
                response=response,
                timestamp=timestamp,
            ))
            session.commit()

    def count_by_subject(self, student_id: Optional[str]) -> List[dict]:
        # a missing student id never equals a stored one
        if student_id is None:
            return []

        statement = (
            select(StudySession.subject, func.count().label("count"))
            .where(StudySession.student_id == student_id)
            .group_by(StudySession.subject)
        )
        with Session(self.pg_engine) as session:
            rows = session.exec(statement).all()
        return [{"subject": subject, "count": count} for subject, count in rows]

    def sessions_by_student(self) -> dict:
        grouped = {}
        with Session(self.pg_engine) as session:
            records = session.exec(select(StudySession).order_by(StudySession.student_id, StudySession.timestamp)).all()
        for record in records:
            grouped.setdefault(record.student_id, []).append(record)
        return grouped
