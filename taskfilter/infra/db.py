from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

from taskfilter.config import SETTINGS

engine = create_engine(SETTINGS.database_url, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def init_db(bind=None) -> None:
    from . import models  # noqa: F401  registers tables on Base.metadata

    target = bind or engine
    with target.connect() as connection:
        connection.execute(text("SELECT 1"))
    # checkfirst keeps this a no-op on databases managed by the migrations
    Base.metadata.create_all(target)
