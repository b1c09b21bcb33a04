# src/repository_pattern/cli.py
import asyncio
import logging
import sys
from pathlib import Path

import hydra
from dotenv import load_dotenv
from omegaconf import DictConfig

from repository_pattern.app import App
from repository_pattern.common.custom_exceptions import ConfigException, DatabaseException
from repository_pattern.common.utils import sanitize_connection_string

logger = logging.getLogger(__name__)

# Load environment variables before the Hydra decorator runs so ${oc.env:...} resolves them
project_root = Path(__file__).parent.parent.parent
load_dotenv(project_root / ".env")


def describe_target(cfg: DictConfig) -> str:
    """One-line summary of the database and collections a run will check."""
    collections = ", ".join(cfg.get("collections") or []) or "no collections"
    url = sanitize_connection_string(str(cfg.db.connection_string))
    return f"database '{cfg.db.database_name}' at {url} ({collections})"


@hydra.main(config_path="../../configs", config_name="main", version_base=None)
def main(cfg: DictConfig):
    """Checks that the configured MongoDB is reachable and reports collection sizes."""

    log_level = str(cfg.logging.level).upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    )

    try:
        logger.info(f"Checking {describe_target(cfg)}")
        app = App(cfg)
        asyncio.run(app.run())

    except ConfigException as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except DatabaseException as e:
        logger.error(f"Database error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.critical(f"A critical error occurred: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
