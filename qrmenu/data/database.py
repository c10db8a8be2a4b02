# qrmenu/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from qrmenu.utils.settings import DATABASE_URL, SQL_ECHO

engine = create_engine(DATABASE_URL, echo=SQL_ECHO, pool_pre_ping=True)

SessionLocal = sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


def get_db():
    """Dependency FastAPI - jedna sesja na request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    # import modeli rejestruje tabele w Base.metadata
    import qrmenu.data.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
