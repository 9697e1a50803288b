# matchpoint/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from matchpoint.core.config import settings

# SQLite connections are handed between threadpool workers by FastAPI,
# so the same-thread guard has to be lifted.
connect_args = {"check_same_thread": False} if settings.is_sqlite else {}

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)

# One session per request; the registration services commit explicitly.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        # Always release the connection, even if the endpoint raised.
        db.close()
