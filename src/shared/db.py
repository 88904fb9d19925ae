from protean.domain import Domain
from sqlalchemy import create_engine

_RDBMS_PROVIDERS = ("sqlite", "postgresql")


def _register_models(domain: Domain, provider_name: str) -> None:
    # Accessing _dao forces each element's SQLAlchemy model to be built and
    # registered on the provider's metadata.
    for _, aggregate_record in domain.registry.aggregates.items():
        if aggregate_record.cls.meta_.provider == provider_name:
            domain.repository_for(aggregate_record.cls)._dao  # noqa: B018

    for _, entity_record in domain.registry.entities.items():
        if entity_record.cls.meta_.provider == provider_name:
            domain.repository_for(entity_record.cls)._dao  # noqa: B018


def setup_db(domain: Domain):
    """Create the database schema of every relational provider in the domain"""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in _RDBMS_PROVIDERS:
                engine = create_engine(provider.conn_info["database_uri"])
                _register_models(domain, provider.name)
                provider._metadata.create_all(engine)


def drop_db(domain: Domain):
    """Drop the database schema of every relational provider in the domain"""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in _RDBMS_PROVIDERS:
                engine = create_engine(provider.conn_info["database_uri"])
                provider._metadata.drop_all(engine)
