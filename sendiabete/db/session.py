from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

def make_engine(database_url: str, echo: bool = False) -> Engine:
    """Engine = the DB connection factory"""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # sessions are opened from the threadpool and the event loop alike
        connect_args["check_same_thread"] = False
    return create_engine(
        database_url,
        echo=echo,
        connect_args=connect_args,
        future=True,
    )

def make_session_factory(engine: Engine) -> sessionmaker:
    """SessionLocal = the session factory"""
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
