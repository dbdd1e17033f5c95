"""Database platform constants."""

from enum import Enum


class Platform(str, Enum):
    """Database platforms the query builder can render SQL for.

    Values:
        MYSQL: MySQL server
        MARIADB: MariaDB server (mysql dialect family)
        POSTGRESQL: PostgreSQL server
        SQLITE: SQLite database file or in-memory database
    """

    MYSQL = "mysql"
    MARIADB = "mariadb"
    POSTGRESQL = "postgresql"
    SQLITE = "sqlite"

    @property
    def family(self) -> str:
        """Dialect family; MySQL and MariaDB share one."""
        if self in (Platform.MYSQL, Platform.MARIADB):
            return "mysql"
        return self.value

    @classmethod
    def from_dialect_name(cls, name: str, is_mariadb: bool = False) -> "Platform":
        """Map a SQLAlchemy dialect name to a platform.

        Args:
            name: ``engine.dialect.name``
            is_mariadb: ``engine.dialect.is_mariadb`` for the mysql dialect

        Raises:
            ValueError: If the dialect is not supported
        """
        normalized = name.lower()
        if normalized == "mysql" and is_mariadb:
            return cls.MARIADB
        if normalized in ("postgres", "postgresql"):
            return cls.POSTGRESQL
        try:
            return cls(normalized)
        except ValueError:
            supported = ", ".join(p.value for p in cls)
            raise ValueError(
                f"Unsupported database dialect: {name}. Supported platforms: {supported}"
            )
