import logging

from app.config import configure_logging, get_settings
from app.db.engine import get_engine
from app.db.schema import metadata

logger = logging.getLogger(__name__)


def main():
    configure_logging(get_settings())
    engine = get_engine()
    metadata.drop_all(engine)
    metadata.create_all(engine)
    logger.info("DB schema created at %s", engine.url)

if __name__ == "__main__":
    main()
