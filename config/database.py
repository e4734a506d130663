"""
Database configuration for TaskCatalyst.

Supports:
- DATABASE_URL (postgres:// or postgresql://) for hosted deployments
- Individual DB_* environment variables
- SQLite fallback for local development and tests
"""
import os
import re
from pathlib import Path


DATABASE_URL_PATTERN = re.compile(
    r'postgres(?:ql)?://(?P<user>[^:]+):(?P<password>[^@]+)@(?P<host>[^:/]+)(?::(?P<port>\d+))?/(?P<name>[^?]+)'
)


def get_database_config(base_dir: Path) -> dict:
    """
    Returns the default database configuration based on environment.

    Resolution order: DATABASE_URL, then DB_HOST and friends, then SQLite.
    """
    database_url = os.getenv('DATABASE_URL', '')

    if database_url.startswith('postgres'):
        return parse_database_url(database_url)

    if os.getenv('DB_HOST'):
        return _get_env_config()

    return {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': base_dir / 'db.sqlite3',
    }


def parse_database_url(url: str) -> dict:
    """Parse a PostgreSQL DATABASE_URL into a Django database dict."""
    match = DATABASE_URL_PATTERN.match(url)

    if not match:
        raise ValueError("Invalid DATABASE_URL format")

    return {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': match.group('name'),
        'USER': match.group('user'),
        'PASSWORD': match.group('password'),
        'HOST': match.group('host'),
        'PORT': match.group('port') or '5432',
        'CONN_MAX_AGE': int(os.getenv('DB_CONN_MAX_AGE', '60')),
        'OPTIONS': {
            'connect_timeout': 5,
        },
    }


def _get_env_config() -> dict:
    """Build config from individual environment variables."""
    config = {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.getenv('DB_NAME', 'taskcatalyst'),
        'USER': os.getenv('DB_USER', 'postgres'),
        'HOST': os.getenv('DB_HOST', 'localhost'),
        'PORT': os.getenv('DB_PORT', '5432'),
        'CONN_MAX_AGE': int(os.getenv('DB_CONN_MAX_AGE', '60')),
    }

    password = os.getenv('DB_PASSWORD')
    if password:
        config['PASSWORD'] = password

    if os.getenv('DB_SSL_REQUIRE', '').lower() == 'true':
        config['OPTIONS'] = {'sslmode': 'require'}

    return config
