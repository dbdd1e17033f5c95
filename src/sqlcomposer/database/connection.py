import re
import time
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from sqlalchemy import bindparam, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.types import Boolean, Integer, LargeBinary, String, TypeEngine

from sqlcomposer.common.exceptions import (
    connection_error,
    platform_not_supported_error,
    query_execution_error,
)
from sqlcomposer.constants import ParameterType, Platform
from sqlcomposer.context import Context
from sqlcomposer.database.result import QueryResult
from sqlcomposer.logging import get_logger
from sqlcomposer.platform import PlatformCapabilities, get_capabilities
from sqlcomposer.query_builder.expression import ExpressionBuilder
from sqlcomposer.query_builder.quoting import IdentifierQuoter
from sqlcomposer.schema import SchemaRegistry
from sqlcomposer.utils.decorators import traced

if TYPE_CHECKING:
    from sqlcomposer.query_builder.query_builder import QueryBuilder
    from sqlcomposer.settings import _Settings

logger = get_logger(__name__)


_PARAMETER_TYPES: Dict[ParameterType, TypeEngine] = {
    ParameterType.INTEGER: Integer(),
    ParameterType.STRING: String(),
    ParameterType.BOOLEAN: Boolean(),
    ParameterType.LARGE_OBJECT: LargeBinary(),
    ParameterType.BINARY: LargeBinary(),
    ParameterType.INTEGER_ARRAY: Integer(),
    ParameterType.STRING_ARRAY: String(),
}

ParameterKey = Union[str, int]


def _to_text_sql(sql: str, keys: List[int]) -> str:
    """Rewrite raw SQL for ``sqlalchemy.text()``.

    ``?`` placeholders outside quoted sections become ``:__positionN`` for
    the given positional keys. Colons inside quoted sections are escaped so
    inlined literals such as ``':x'`` are not read as bind parameters.
    """
    out = []
    quote: Optional[str] = None
    position = 0
    for char in sql:
        if quote is not None:
            if char == quote:
                quote = None
            elif char == ":":
                out.append("\\:")
                continue
        elif char in ("'", '"', "`"):
            quote = char
        elif char == "?" and position < len(keys):
            out.append(f":__position{keys[position]}")
            position += 1
            continue
        out.append(char)
    return "".join(out)


class Connection:
    """Database connection used by query builders.

    Wraps a SQLAlchemy :class:`~sqlalchemy.engine.Engine` and owns everything a
    query builder needs from the database: the platform and its identifier
    quoting, the table control configuration and the request context
    restrictions compare against. SQL is executed through short lived
    connections borrowed from the engine's pool.

    Example:
        >>> from sqlalchemy import create_engine
        >>> connection = Connection(create_engine("sqlite://"))
        >>> connection.quote_identifier("pages.uid")
        '"pages"."uid"'
        >>> qb = connection.create_query_builder()
    """

    def __init__(
        self,
        engine: Engine,
        platform: Optional[Platform] = None,
        schema: Optional[SchemaRegistry] = None,
        context: Optional[Context] = None,
        additional_restrictions: Optional[Mapping[Any, Any]] = None,
    ):
        self.engine = engine
        if platform is None:
            platform = self._detect_platform(engine)
        self.platform = Platform(platform)
        self.capabilities: PlatformCapabilities = get_capabilities(self.platform)
        self._quoter = IdentifierQuoter(self.capabilities)
        self.schema = schema or SchemaRegistry()
        self.context = context or Context()
        self.additional_restrictions: Dict[Any, Any] = dict(additional_restrictions or {})

    @classmethod
    def from_settings(cls, settings: Optional["_Settings"] = None) -> "Connection":
        """Create a connection, engine included, from settings.

        Raises:
            QueryBuilderError: CONNECTION_ERROR if the engine cannot be created
        """
        if settings is None:
            from sqlcomposer.settings import get_settings
            settings = get_settings()

        database = settings.database
        try:
            engine = create_engine(
                database.url,
                echo=database.echo,
                pool_pre_ping=database.pool_pre_ping,
            )
        except (SQLAlchemyError, ImportError, ValueError) as e:
            raise connection_error(
                "Failed to create database engine",
                service=database.url.split(":", 1)[0],
                cause=e,
            )

        schema = SchemaRegistry.from_file(settings.schema_file) if settings.schema_file else None
        connection = cls(
            engine,
            platform=database.platform,
            schema=schema,
            context=Context.from_settings(settings.restrictions),
            additional_restrictions={
                path: options.model_dump()
                for path, options in settings.restrictions.additional_query_restrictions.items()
            },
        )
        logger.info(
            f"Created {connection.platform.value} engine",
            extra={"db.platform": connection.platform.value},
        )
        return connection

    @staticmethod
    def _detect_platform(engine: Engine) -> Platform:
        dialect = engine.dialect
        try:
            return Platform.from_dialect_name(dialect.name, getattr(dialect, "is_mariadb", False))
        except ValueError as e:
            raise platform_not_supported_error(
                str(e),
                platform=dialect.name,
                cause=e,
            )

    def get_database_platform(self) -> Platform:
        return self.platform

    # Quoting

    def quote_identifier(self, identifier: str) -> str:
        return self._quoter.quote_identifier(identifier)

    def quote_identifiers(self, identifiers: Iterable[str]) -> List[str]:
        return [self.quote_identifier(identifier) for identifier in identifiers]

    def quote_single_identifier(self, identifier: str) -> str:
        return self._quoter.quote_single_identifier(identifier)

    def unquote_single_identifier(self, identifier: str) -> str:
        return self._quoter.unquote_single_identifier(identifier)

    def quote_column_value_pairs(self, pairs: Dict[str, Any]) -> Dict[str, Any]:
        return {self.quote_identifier(column): value for column, value in pairs.items()}

    def quote(self, value: Any) -> str:
        """Quote a value as a SQL literal of this platform."""
        return self._quoter.quote_value(value)

    # Builders

    def get_expression_builder(self) -> ExpressionBuilder:
        return ExpressionBuilder(self)

    def create_query_builder(self, **kwargs: Any) -> "QueryBuilder":
        from sqlcomposer.query_builder.query_builder import QueryBuilder
        return QueryBuilder(self, **kwargs)

    # Execution

    def _span_attributes(self, sql: str, *, operation: str) -> Dict[str, Any]:
        """Build OpenTelemetry span attributes for SQL operations."""
        sanitized = (sql or "").strip()
        if sanitized and len(sanitized) > 4096:
            sanitized = f"{sanitized[:4093]}..."

        attributes: Dict[str, Any] = {
            "db.system": self.platform.value,
            "db.operation": operation,
        }
        if sanitized:
            attributes["db.statement"] = sanitized
            attributes["db.statement.length"] = len(sanitized)
        return attributes

    def _prepare(
        self,
        sql: str,
        params: Optional[Mapping[ParameterKey, Any]],
        types: Optional[Mapping[ParameterKey, ParameterType]],
    ) -> Tuple[Any, Dict[str, Any]]:
        """Turn SQL and builder parameters into a bound ``text()`` clause."""
        params = dict(params or {})
        types = dict(types or {})

        positional = sorted(key for key in params if isinstance(key, int))
        sql = _to_text_sql(sql, positional)

        values: Dict[str, Any] = {}
        binds = []
        for key, value in params.items():
            name = f"__position{key}" if isinstance(key, int) else str(key)
            if not re.search(rf"(?<![:\w\\]):{re.escape(name)}\b", sql):
                continue
            parameter_type = ParameterType(types.get(key, ParameterType.STRING))
            sa_type = _PARAMETER_TYPES.get(parameter_type)
            if parameter_type.is_array:
                # expanding binds render their own parentheses
                sql = re.sub(rf"\(\s*:{re.escape(name)}\s*\)", f":{name}", sql)
                binds.append(bindparam(name, type_=sa_type, expanding=True))
                value = list(value)
            elif sa_type is not None and value is not None:
                binds.append(bindparam(name, type_=sa_type))
            values[name] = value

        statement = text(sql)
        if binds:
            statement = statement.bindparams(*binds)
        return statement, values

    @traced(
        span_name="sqlcomposer.database.execute_query",
        attribute_getter=lambda self, sql, params=None, types=None: self._span_attributes(
            sql,
            operation="query",
        ),
    )
    def execute_query(
        self,
        sql: str,
        params: Optional[Mapping[ParameterKey, Any]] = None,
        types: Optional[Mapping[ParameterKey, ParameterType]] = None,
    ) -> QueryResult:
        """Execute a SELECT statement and fetch all rows.

        Raises:
            QueryBuilderError: QUERY_EXECUTION_ERROR if the database rejects the statement
        """
        start_time = time.time()
        payload = {"db.platform": self.platform.value}
        try:
            statement, values = self._prepare(sql, params, types)
            with self.engine.connect() as conn:
                result = conn.execute(statement, values)
                columns = list(result.keys())
                rows = [dict(row) for row in result.mappings().all()]

            duration = time.time() - start_time
            logger.debug(
                "Query executed",
                extra={**payload, "row_count": str(len(rows)), "duration.seconds": f"{duration:.6f}"},
            )
            return QueryResult(columns=columns, rows=rows)

        except SQLAlchemyError as exc:
            logger.error(
                "Query failed",
                extra={**payload, "error": str(exc)},
            )
            raise query_execution_error("Query execution failed", query=sql, cause=exc)

    @traced(
        span_name="sqlcomposer.database.execute_statement",
        attribute_getter=lambda self, sql, params=None, types=None: self._span_attributes(
            sql,
            operation="statement",
        ),
    )
    def execute_statement(
        self,
        sql: str,
        params: Optional[Mapping[ParameterKey, Any]] = None,
        types: Optional[Mapping[ParameterKey, ParameterType]] = None,
    ) -> int:
        """Execute an INSERT, UPDATE or DELETE statement in its own transaction.

        Returns:
            Number of affected rows

        Raises:
            QueryBuilderError: QUERY_EXECUTION_ERROR if the database rejects the statement
        """
        start_time = time.time()
        payload = {"db.platform": self.platform.value}
        try:
            statement, values = self._prepare(sql, params, types)
            with self.engine.begin() as conn:
                result = conn.execute(statement, values)
                affected = result.rowcount

            duration = time.time() - start_time
            logger.debug(
                "Statement executed",
                extra={**payload, "affected_rows": str(affected), "duration.seconds": f"{duration:.6f}"},
            )
            return affected

        except SQLAlchemyError as exc:
            logger.error(
                "Statement failed",
                extra={**payload, "error": str(exc)},
            )
            raise query_execution_error("Statement execution failed", query=sql, cause=exc)

    def dispose(self) -> None:
        self.engine.dispose()
