import psycopg2
from dotenv import load_dotenv
import os

load_dotenv()

# Creates the listing indexes on an existing PostgreSQL database.
# Fresh databases get them from SQLModel.metadata.create_all at startup.

conn = psycopg2.connect(
    dbname=os.getenv("DB_NAME"),
    user=os.getenv("DB_USER"),
    password=os.getenv("DB_PASSWORD"),
    host=os.getenv("DB_HOST"),
)

cur = conn.cursor()

index_commands = [
    "CREATE INDEX IF NOT EXISTS ix_shifts_user_id ON shifts (user_id);",
    "CREATE INDEX IF NOT EXISTS ix_shifts_date ON shifts (date);",
    "CREATE INDEX IF NOT EXISTS ix_shifts_status ON shifts (status);",
    "CREATE INDEX IF NOT EXISTS ix_shifts_location_id ON shifts (location_id);",
    "CREATE INDEX IF NOT EXISTS ix_shifts_user_id_date ON shifts (user_id, date);",
    "CREATE UNIQUE INDEX IF NOT EXISTS ix_locations_name ON locations (name);",
]

for cmd in index_commands:
    print(f"Executing: {cmd}")
    cur.execute(cmd)

conn.commit()

cur.close()
conn.close()

print("Indexes created successfully!")
