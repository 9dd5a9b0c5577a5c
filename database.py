from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import DATABASE_URL

Base = declarative_base()


def make_engine(url: str = DATABASE_URL):
    connect_args = {}
    if url.startswith("sqlite"):
        # FastAPI serves requests from a threadpool
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args)


def make_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine):
    # Tables register themselves on Base when task_models is imported
    import task_models  # noqa: F401
    Base.metadata.create_all(bind=engine)
