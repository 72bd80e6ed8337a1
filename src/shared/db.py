"""Database schema management for the storefront domains."""

from protean.domain import Domain
from sqlalchemy import create_engine, inspect

RDBMS_PROVIDERS = ("sqlite", "postgresql")


def _rdbms_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in RDBMS_PROVIDERS:
            yield name, provider


def setup_db(domain: Domain):
    """Create tables for every aggregate and entity of the domain."""
    with domain.domain_context():
        domain.setup_database()


def drop_db(domain: Domain):
    """Drop the domain's tables."""
    with domain.domain_context():
        domain.drop_database()


def describe_db(domain: Domain) -> dict[str, list[str]]:
    """Table names per relational provider, as seen by the database itself."""
    tables = {}
    with domain.domain_context():
        for name, provider in _rdbms_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            try:
                tables[name] = sorted(inspect(engine).get_table_names())
            finally:
                engine.dispose()
    return tables
