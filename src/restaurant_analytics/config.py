"""
Configuration handling for the restaurant analytics reports.
"""
import os
import logging
import configparser
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()
# Load environment variables
POSTGRES_HOST = os.getenv("POSTGRES_HOST")
POSTGRES_PORT = os.getenv("POSTGRES_PORT")
POSTGRES_DB = os.getenv("POSTGRES_DB")
POSTGRES_USER = os.getenv("POSTGRES_USER")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD")

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager for the restaurant analytics reports."""

    def __init__(self, config_file='config.ini'):
        """
        Initialize configuration from config file.
        """
        self.config = configparser.ConfigParser()

        # Set default values
        self._set_defaults()

        # Try to read from config file
        config_path = Path(config_file)
        if config_path.exists():
            self.config.read(config_path)
            self._setup_logging()
        else:
            logger.warning(f"Config file {config_file} not found. Using defaults.")

    def _set_defaults(self):
        """Set default configuration values."""
        self.config['DATABASE'] = {
            'type': 'postgresql',
            'name': POSTGRES_DB or '',
            'host': POSTGRES_HOST or 'localhost',
            'port': POSTGRES_PORT or '5432',
            'user': POSTGRES_USER or '',
            'password': POSTGRES_PASSWORD or ''
        }

        self.config['LOGGING'] = {
            'level': 'INFO',
            'file': 'logs/analytics.log'
        }

        self.config['PATHS'] = {
            'input_dir': 'data/input'
        }

        self.config['ANALYTICS'] = {
            'source': 'database',
            'days': '7',
            'top_foods': '10',
            'fetch_timeout': '5.0',
            'timezone': '',
            'quality_check': 'true'
        }

    def _setup_logging(self):
        """Configure logging based on settings."""
        log_config = self.config['LOGGING']
        log_level = getattr(logging, log_config.get('level', 'INFO').upper(), logging.INFO)
        log_file = log_config.get('file', 'logs/analytics.log')

        # Create directory for log file if it doesn't exist
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        logging.basicConfig(
            level=log_level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[
                logging.FileHandler(log_file),
                logging.StreamHandler()
            ]
        )

    def get_database_config(self):
        """
        Get database configuration.

        """
        return {
            'type': self.config['DATABASE'].get('type'),
            'name': self.config['DATABASE'].get('name'),
            'host': self.config['DATABASE'].get('host'),
            'port': self.config['DATABASE'].get('port'),
            'user': self.config['DATABASE'].get('user'),
            'password': self.config['DATABASE'].get('password')
        }

    def get_input_path(self, filename=None):
        """
        Get input directory or file path.

        """
        input_dir = self.config['PATHS'].get('input_dir', 'data/input')

        if filename:
            return os.path.join(input_dir, filename)
        return input_dir

    def get_source(self):
        """
        Where the collections are read from: 'database' or 'csv'.
        """
        source = self.config['ANALYTICS'].get('source', 'database').strip().lower()
        if source not in ('database', 'csv'):
            raise ValueError(f"Unsupported data source: {source}")
        return source

    def get_days(self):
        return self.config['ANALYTICS'].getint('days', 7)

    def get_top_foods_limit(self):
        return self.config['ANALYTICS'].getint('top_foods', 10)

    def get_fetch_timeout(self):
        """
        Seconds to wait for each collection fetch before treating it as empty.
        """
        return self.config['ANALYTICS'].getfloat('fetch_timeout', 5.0)

    def get_timezone(self):
        """
        Timezone used to localize timezone-aware timestamps, None for system local.
        """
        timezone = self.config['ANALYTICS'].get('timezone', '').strip()
        return timezone or None

    def is_quality_check_enabled(self):
        """
        Check if data quality checks are enabled.

        """
        return self.config['ANALYTICS'].getboolean('quality_check', True)
