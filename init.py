import logging

from app.app import init_db
from app.core.utils.config import construct_prod_settings
from app.core.utils.log import LogConfig

# We call `construct_prod_settings()` and not the dependency `get_settings()` because:
# - we know we want to use the production settings
# - `get_settings()` is a cached function
settings = construct_prod_settings()

# Initialize loggers
LogConfig().initialize_loggers(settings=settings)

shareit_error_logger = logging.getLogger("shareit.error")

shareit_error_logger.warning(
    "Initializing the database before starting the server.",
)

init_db(
    settings=settings,
    shareit_error_logger=shareit_error_logger,
    drop_db=False,
)
