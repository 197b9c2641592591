"""
==============================================
Configuration management for CRUD generation.
==============================================

Loads all configuration from environment variables (.env file) and provides
a centralized Config singleton for application-wide access.

The configuration covers two concerns:
- Where generated statements are executed (PostgreSQL connection)
- Where the build-time generator reads schemas, and its log level

Example:
    >>> from core.config import config
    >>>
    >>> # Database connection for the SQLAlchemy store client
    >>> url = config.database_url or f"{config.db_host}:{config.db_port}"
    >>>
    >>> # Generator settings
    >>> print(f"Schemas: {config.schema_dir}, log level: {config.log_level}")
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


@dataclass
class DatabaseConfig:
    """Database configuration settings.

    Attributes:
        host: PostgreSQL server hostname or IP address
        port: PostgreSQL server port number
        user: Database username
        password: Database password
        database: Database holding the generated tables
        url: Full connection URL; overrides the individual settings when set
    """

    host: str
    port: int
    user: str
    password: str
    database: str
    url: Optional[str] = None


@dataclass
class GeneratorConfig:
    """Build-time generator settings.

    Attributes:
        schema_dir: Directory searched for JSON schema descriptors
        log_level: Default logging level for the CLI
    """

    schema_dir: Path
    log_level: str = 'INFO'


class Config:
    """Centralized configuration manager.

    Attributes:
        db: DatabaseConfig instance with database connection settings
        generator: GeneratorConfig instance with generator settings

    Example:
        >>> config = Config()
        >>> print(f"Connecting to {config.db_host}:{config.db_port}")
    """

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.db = DatabaseConfig(
            host=os.getenv('POSTGRES_HOST', 'localhost'),
            port=int(os.getenv('POSTGRES_PORT', '5432')),
            user=os.getenv('POSTGRES_USER', 'postgres'),
            password=os.getenv('POSTGRES_PASSWORD', ''),
            database=os.getenv('POSTGRES_DB', 'postgres'),
            url=os.getenv('DATABASE_URL') or None
        )

        project_root = Path(__file__).parent.parent
        self.generator = GeneratorConfig(
            schema_dir=Path(os.getenv('CRUDGEN_SCHEMA_DIR', project_root / 'schemas')),
            log_level=os.getenv('CRUDGEN_LOG_LEVEL', 'INFO').upper()
        )

    @property
    def db_host(self) -> str:
        """Get database server hostname."""
        return self.db.host

    @property
    def db_port(self) -> int:
        """Get database server port number."""
        return self.db.port

    @property
    def db_user(self) -> str:
        return self.db.user

    @property
    def db_password(self) -> str:
        return self.db.password

    @property
    def db_name(self) -> str:
        return self.db.database

    @property
    def database_url(self) -> Optional[str]:
        """Get the explicit DATABASE_URL, if any."""
        return self.db.url

    @property
    def schema_dir(self) -> Path:
        return self.generator.schema_dir

    @property
    def log_level(self) -> str:
        return self.generator.log_level


# Global configuration instance
config = Config()
