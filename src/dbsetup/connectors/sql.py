import logging
import threading
from sqlalchemy import create_engine, text, event, select, literal_column, table
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from ..domain.models import Credentials, QueryError, QueryResult
from ..exceptions import ClientConstructionError

logger = logging.getLogger(__name__)

# Each backend words a missing relation its own way
DIALECT_ABSENT_PHRASES = {
    "sqlite": ("no such table",),
    "mysql": ("doesn't exist",),
    "mariadb": ("doesn't exist",),
}

class SQLStoreClient:
    """
    SQLAlchemy client for stores reached through a database URL
    (postgresql://, sqlite://, ...). The access key is used as the
    password when the URL names a user.
    """
    def __init__(self, credentials: Credentials, connect_timeout_s: float = 30.0):
        self.credentials = credentials
        self.connect_timeout_s = connect_timeout_s
        try:
            url = make_url(credentials.endpoint)
        except ArgumentError as e:
            raise ClientConstructionError(f"Malformed database URL: {e}")
        if url.username and not url.password:
            url = url.set(password=credentials.access_key)
        self.url = url
        self.absent_phrases = DIALECT_ABSENT_PHRASES.get(url.get_backend_name(), ())
        self._engine = None
        self._engine_lock = threading.Lock()

    @staticmethod
    def _enforce_read_only_listener(conn, cursor, statement, parameters, context, executemany):
        """
        Blocks any SQL that doesn't start with a whitelisted keyword.
        Probes are read-only; nothing here may create or alter relations.
        """
        sql = statement.strip().upper()

        allowed_starts = (
            "SELECT",
            "WITH",
            "EXPLAIN",
            "SHOW",
            "SET",          # session configuration
            "ALTER SESSION" # Oracle session configuration
        )

        if not any(sql.startswith(keyword) for keyword in allowed_starts):
            raise PermissionError(
                f"SAFETY BLOCK: Operation blocked! Only read-only queries are allowed. "
                f"Attempted: {sql[:50]}..."
            )

    @staticmethod
    def _set_readonly_transaction_listener(connection):
        """Puts the session in READ ONLY mode right after connecting."""
        dialect = connection.dialect.name.lower()
        try:
            if dialect == 'oracle':
                connection.execute(text("SET TRANSACTION READ ONLY"))
            elif dialect == 'postgresql':
                connection.execute(text("SET SESSION CHARACTERISTICS AS TRANSACTION READ ONLY"))
        except SQLAlchemyError as e:
            # The statement listener is still in place
            logger.warning("Failed to set READ ONLY session on %s: %s", dialect, e)

    def connect(self) -> None:
        # Queries from the schema fan-out share one engine
        with self._engine_lock:
            if self._engine:
                return
            connect_args = {}
            if self.url.get_backend_name() == "postgresql":
                connect_args["connect_timeout"] = int(self.connect_timeout_s)
            try:
                engine = create_engine(self.url, connect_args=connect_args)
            except (ArgumentError, ImportError) as e:
                raise ClientConstructionError(f"Failed to create engine: {e}")

            event.listen(engine, "before_cursor_execute", self._enforce_read_only_listener)
            event.listen(engine, "engine_connect", self._set_readonly_transaction_listener)
            self._engine = engine

    def close(self) -> None:
        with self._engine_lock:
            if self._engine:
                self._engine.dispose()
                self._engine = None

    def query(self, resource: str, projection: str = "*", limit: int = 1) -> QueryResult:
        self.connect()
        try:
            conn = self._engine.connect()
        except SQLAlchemyError as e:
            return QueryResult(resource=resource, error=_to_query_error(e, transport=True))

        stmt = select(literal_column(projection)).select_from(table(resource)).limit(limit)
        try:
            with conn:
                rows = [dict(row._mapping) for row in conn.execute(stmt)]
        except SQLAlchemyError as e:
            return QueryResult(resource=resource, error=_to_query_error(e))
        return QueryResult(resource=resource, rows=rows)

def _to_query_error(exc: SQLAlchemyError, transport: bool = False) -> QueryError:
    # Prefer the driver's message, it carries the store's own wording
    orig = getattr(exc, "orig", None)
    message = str(orig).strip() if orig is not None else str(exc)
    code = getattr(orig, "pgcode", None)
    return QueryError(message=message, code=code, transport=transport)
