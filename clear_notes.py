from database.connection import SessionLocal
from models.like import Like
from models.note import Note
from models.report import Report

def clear_board():
    db = SessionLocal()

    try:
        likes_deleted = db.query(Like).delete()
        reports_deleted = db.query(Report).delete()
        replies_deleted = db.query(Note).filter(Note.replying_to_id.isnot(None)).delete()
        notes_deleted = db.query(Note).delete()
        db.commit()

        print(f"✓ {notes_deleted} notes and {replies_deleted} replies removed")
        print(f"✓ {likes_deleted} likes and {reports_deleted} reports removed")
        print("\nBoard cleared.")

    except Exception as e:
        print(f"Error clearing board: {e}")
        db.rollback()
    finally:
        db.close()

if __name__ == "__main__":
    clear_board()
