# src/repository_pattern/app.py
import logging
from typing import Dict, Optional

from omegaconf import DictConfig, OmegaConf
from pydantic import ValidationError
from rich.console import Console  # type: ignore
from rich.table import Table  # type: ignore

from repository_pattern.common.custom_exceptions import ConfigException, DatabaseException
from repository_pattern.common.utils import sanitize_connection_string
from repository_pattern.configs.pydantic_models import MainConfig
from repository_pattern.db.connection import check_connection, create_client, get_database


logger = logging.getLogger(__name__)


class App:
    """Connects to the configured store and reports on its collections."""

    def __init__(self, cfg: DictConfig, console: Optional[Console] = None):
        config_dict = OmegaConf.to_container(cfg, resolve=True)
        try:
            self._config = MainConfig(**config_dict)
        except ValidationError as e:
            raise ConfigException(f"Invalid configuration: {e}") from e

        self._client = create_client(self._config.db)
        self._database = get_database(self._client, self._config.db)
        self._console = console or Console()

    @property
    def config(self) -> MainConfig:
        return self._config

    async def run(self) -> Dict[str, int]:
        """Pings the server and returns the document count of every configured collection."""
        db_config = self._config.db
        logger.info(f"Checking database '{db_config.database_name}'")
        try:
            if not await check_connection(self._client):
                raise DatabaseException(
                    f"MongoDB at {sanitize_connection_string(db_config.connection_string)} is unreachable."
                )

            counts: Dict[str, int] = {}
            for name in self._config.collections:
                counts[name] = await self._database[name].count_documents({})
                logger.debug(f"Collection '{name}' holds {counts[name]} documents")
        finally:
            self._client.close()

        table = Table(title=f"{db_config.database_name}")
        table.add_column("collection")
        table.add_column("documents", justify="right")
        for name, count in counts.items():
            table.add_row(name, str(count))
        self._console.print(table)
        logger.info("Database check complete.")
        return counts
