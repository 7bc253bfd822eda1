from tutor.config import Settings
from tutor.store import SessionStore

def main(store: SessionStore):
    for student_id, records in store.sessions_by_student().items():
        print(student_id)
        for record in records:
            print(f"[{record.timestamp}] {record.grade} / {record.subject}")
            print(f"Q: {record.question}")
            print(f"A: {record.response}")
            print()
        print("------------")

if __name__ == "__main__":
    main(SessionStore.from_url(Settings.from_env().database_url))
