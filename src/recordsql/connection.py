"""Connection manager: builds and verifies a pooled database handle."""

from recordsql.config import Config, DatabaseConfig
from recordsql.exceptions import ConfigError, ConnectError
from recordsql.observability import get_logger
from recordsql.plugins import create_database
from recordsql.protocols import Database

# Pool bounds are fixed; they are not read from configuration
MAX_CONN_LIFETIME_SECONDS = 100
MAX_IDLE_CONNS = 2
MAX_OPEN_CONNS = 5

logger = get_logger(__name__)


def connect(config: Config | DatabaseConfig, *, strict: bool = False) -> Database:
    """Open a pooled handle for ``config`` and ping the server.

    A failed ping is logged and the returned handle is left unusable: every
    later statement or query on it raises NotConnectedError.

    Args:
        config: Full configuration or just its database section
        strict: Raise ConnectError on a failed ping instead of logging it

    Returns:
        The database handle

    Raises:
        ConfigError: If the configured backend is not installed
        ConnectError: If ``strict`` and the ping failed
    """
    db_config = config.database if isinstance(config, Config) else config
    target = db_config.dsn(redact=True)
    logger.info(
        "starting to connect to db server...",
        context={"backend": db_config.backend, "uri": target},
    )

    options = db_config.model_dump(exclude={"backend"})
    try:
        db = create_database(
            db_config.backend,
            **options,
            max_conn_lifetime=MAX_CONN_LIFETIME_SECONDS,
            max_idle_conns=MAX_IDLE_CONNS,
            max_open_conns=MAX_OPEN_CONNS,
        )
    except ValueError as e:
        raise ConfigError(str(e)) from e

    try:
        db.ping()
    except ConnectError as e:
        logger.error("connect to db failed", context={"uri": target}, error=e)
        if strict:
            db.close()
            raise
        return db

    logger.info("DB connected", context={"uri": target})
    return db
