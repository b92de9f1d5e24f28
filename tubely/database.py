"""Engine and session factory for the video/user record store."""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from tubely.config import get_settings

settings = get_settings()

_is_sqlite = settings.database_url.startswith("sqlite")

# Sessions are used from Starlette's threadpool, not the thread that opened them
engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
    pool_pre_ping=not _is_sqlite,
)

if _is_sqlite:
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # videos.user_id references users.id
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

SessionLocal = sessionmaker(bind=engine, autoflush=False)
Base = declarative_base()


def get_db():
    """Request-scoped session; closed once the response is sent."""
    with SessionLocal() as db:
        yield db
