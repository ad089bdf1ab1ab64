from __future__ import annotations

import logging

from app.infrastructure.db.engine import Base, get_engine
from app.infrastructure.db.models import accounts  # noqa: F401  registra as tabelas no metadata
from app.shared.config import get_settings


logger = logging.getLogger(__name__)


def create_schema(engine) -> None:
    Base.metadata.create_all(engine)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    settings = get_settings()
    if not settings.postgres_dsn:
        raise SystemExit("POSTGRES_DSN is required.")
    create_schema(get_engine(settings.postgres_dsn))
    logger.info("init_schema: created tables=%s", sorted(Base.metadata.tables))


if __name__ == "__main__":
    main()
