from sqlalchemy import text
from database.connection import engine

def add_image_url_column():
    with engine.connect() as conn:
        try:
            conn.execute(text("ALTER TABLE notes ADD COLUMN image_url TEXT"))
            conn.commit()
            print("✓ Column image_url added")
        except Exception as e:
            message = str(e).lower()
            if "duplicate column name" in message or "already exists" in message:
                print("✓ Column image_url already exists")
            else:
                print(f"Error: {e}")

if __name__ == "__main__":
    add_image_url_column()
