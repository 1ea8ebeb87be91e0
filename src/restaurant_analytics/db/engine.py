"""
Database connection handling for the restaurant analytics reports.
"""
import logging
from sqlalchemy import create_engine
from sqlalchemy.engine import URL
from restaurant_analytics.config import Config

logger = logging.getLogger(__name__)

# Configured database type -> SQLAlchemy driver name
DRIVERS = {
    'sqlite': 'sqlite',
    'postgresql': 'postgresql+psycopg2',
    'mysql': 'mysql+pymysql',
}


def build_connection_string(db_config):
    """
    Build the SQLAlchemy URL for the configured database type.

    Credentials are escaped by the URL, so passwords may hold any character.
    """
    db_type = db_config['type']
    if db_type not in DRIVERS:
        raise ValueError(f"Unsupported database type: {db_type}")

    if db_type == 'sqlite':
        return URL.create(DRIVERS[db_type], database=db_config['name'])

    return URL.create(
        DRIVERS[db_type],
        username=db_config['user'] or None,
        password=db_config['password'] or None,
        host=db_config['host'],
        port=int(db_config['port']) if db_config['port'] else None,
        database=db_config['name'],
    )


def create_db_engine(config=None):
    """
    Engine for the configured database. Server connections are pinged before
    use.
    """
    try:
        if config is None:
            config = Config()

        db_config = config.get_database_config()
        url = build_connection_string(db_config)
        engine = create_engine(url, pool_pre_ping=db_config['type'] != 'sqlite')
        logger.info(f"Database engine created for {url.render_as_string(hide_password=True)}")
        return engine
    except Exception as e:
        logger.error(f"Failed to create database connection: {str(e)}")
        raise


def init_db(engine, base):
    """
    Create the order store tables, used to seed local databases.
    """
    base.metadata.create_all(engine)
    logger.info("Database tables initialized")
