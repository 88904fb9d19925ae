import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def accounts_bed():
    from accounts.domain import accounts

    bed = DomainFixture(accounts)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(accounts_bed):
    with accounts_bed.domain_context():
        yield


@pytest.fixture()
def address_fields():
    return {
        "receiver_name": "Jane Doe",
        "receiver_phone": "555-0100",
        "city": "Springfield",
        "detail_address": "123 Main St",
    }
