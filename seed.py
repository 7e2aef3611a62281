from datetime import datetime, timedelta
import random
import string
import uuid

from database.connection import SessionLocal, engine, Base
from models.like import Like
from models.note import Note, NoteColor
from models.report import Report

SAMPLE_NOTES = [
    {"message": "To whoever left coffee on my desk: thank you!", "recipient": "Desk neighbour", "color": NoteColor.ORANGE},
    {"message": "The library is quieter on Fridays. Tell no one.", "color": NoteColor.BLUE},
    {"message": "You looked happy today. Keep it up.", "recipient": "Blue scarf", "from_sender": "A stranger", "color": NoteColor.PINK},
    {"message": "Who keeps stealing the good chairs?", "color": NoteColor.YELLOW},
]

def short_code():
    return ''.join(random.choices(string.ascii_uppercase + string.digits, k=6))

def seed_database():
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    session_id = str(uuid.uuid4())

    try:
        existing_note = db.query(Note).first()
        if existing_note:
            print("Board already has notes. Clearing...")
            db.query(Like).delete()
            db.query(Report).delete()
            db.query(Note).filter(Note.replying_to_id.isnot(None)).delete()
            db.query(Note).delete()
            db.commit()

        start = datetime.utcnow() - timedelta(hours=len(SAMPLE_NOTES))
        notes = []
        for i, data in enumerate(SAMPLE_NOTES):
            note = Note(
                short_id=short_code(),
                session_id=session_id,
                created_at=start + timedelta(hours=i),
                **data
            )
            db.add(note)
            notes.append(note)

        db.commit()
        print(f"{len(notes)} notes created")

        reply = Note(
            short_id=short_code(),
            message="Same here, every single morning.",
            color=NoteColor.GREEN,
            replying_to_id=notes[-1].id,
            session_id=session_id,
        )
        db.add(reply)
        db.commit()
        print(f"Reply created for note {notes[-1].short_id}")

        print("\n✓ Seed finished")
        print(f"✓ Seed session id: {session_id}")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
    finally:
        db.close()

if __name__ == "__main__":
    seed_database()
