"""
Sélection du magasin d'entités selon la configuration (STORE_BACKEND).
"""

import logging
from functools import lru_cache
from typing import Optional

from portal.config import Settings, settings
from portal.database import init_db, make_engine, make_session_factory
from portal.stores.base import EntityStore
from portal.stores.local_store import LocalDocumentStore
from portal.stores.sql_store import SqlEntityStore

logger = logging.getLogger(__name__)


def build_store(config: Optional[Settings] = None) -> EntityStore:
    """Construit le magasin configuré : "sql" (par défaut) ou "local"."""
    config = config or settings
    backend = config.STORE_BACKEND.lower()

    if backend == "local":
        logger.info("Magasin local (fichier : %s)", config.LOCAL_STORE_PATH or "mémoire")
        return LocalDocumentStore(path=config.LOCAL_STORE_PATH or None)

    if backend == "sql":
        engine = make_engine(config.DATABASE_URL, pool_pre_ping=True)
        init_db(engine)
        logger.info("Magasin relationnel (%s)", engine.dialect.name)
        return SqlEntityStore(make_session_factory(engine))

    raise ValueError(f"Backend de persistance inconnu : {config.STORE_BACKEND!r}")


@lru_cache
def get_store() -> EntityStore:
    """Dépendance FastAPI — magasin unique pour tout le processus."""
    return build_store()
