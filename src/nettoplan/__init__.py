"""nettoplan: deterministic portfolio projection and German tax calculations."""

from loguru import logger

__version__ = "0.1.0"

# Silent until the application calls nettoplan.core.utils.logging.setup_logging()
logger.disable("nettoplan")
