"""
Configuration de la connexion à la base de données relationnelle.
Utilise SQLAlchemy avec un moteur synchrone.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def make_engine(database_url: str, **kwargs) -> Engine:
    """
    Crée un moteur SQLAlchemy.
    Sous SQLite, les clés étrangères ne sont appliquées qu'avec le PRAGMA foreign_keys.
    """
    engine = create_engine(database_url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Crée les tables manquantes (tous les modèles doivent être importés avant)."""
    import portal.models  # noqa: F401 (enregistre tous les modèles dans Base.metadata)

    Base.metadata.create_all(bind=engine)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

