"""AddressBook aggregate: a user's shipping addresses and the default among them."""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, String

from accounts.domain import accounts

_ADDRESS_FIELDS = (
    "receiver_name",
    "receiver_phone",
    "province",
    "city",
    "district",
    "detail_address",
    "postal_code",
)


@accounts.entity(part_of="AddressBook")
class Address:
    """A delivery destination saved by the user."""

    receiver_name: String(required=True, max_length=100)
    receiver_phone: String(required=True, max_length=30)
    province: String(max_length=100)
    city: String(required=True, max_length=100)
    district: String(max_length=100)
    detail_address: String(required=True, max_length=255)
    postal_code: String(max_length=20)
    is_default: Boolean(default=False)
    created_at: DateTime(default=lambda: datetime.now(UTC))


@accounts.aggregate
class AddressBook:
    """All addresses of one user, kept together so the default is exclusive.

    Clearing the old default and setting the new one happen in a single
    aggregate change that is persisted in one unit of work, so two defaults
    can never be observed, and concurrent writers conflict on the aggregate
    version instead of interleaving.
    """

    user_id: Identifier(required=True, unique=True)
    addresses: HasMany(Address)

    @invariant.post
    def exactly_one_default_address_when_addresses_exist(self):
        if not self.addresses:
            return
        defaults = [a for a in self.addresses if a.is_default]
        if len(defaults) != 1:
            raise ValidationError({"addresses": ["Exactly one address must be marked as default"]})

    def _find(self, address_id) -> Address:
        address = next((a for a in self.addresses if str(a.id) == str(address_id)), None)
        if address is None:
            raise ObjectNotFoundError(f"Address {address_id} not found")
        return address

    def default_address(self) -> Address | None:
        return next((a for a in self.addresses if a.is_default), None)

    def listed(self) -> list[Address]:
        """Default address first, then newest first."""
        newest_first = sorted(self.addresses, key=lambda a: a.created_at, reverse=True)
        return sorted(newest_first, key=lambda a: not a.is_default)

    def add_address(self, is_default=False, **fields) -> Address:
        # First address is always default
        if not self.addresses:
            is_default = True

        with atomic_change(self):
            if is_default:
                for addr in self.addresses:
                    if addr.is_default:
                        addr.is_default = False

            address = Address(is_default=is_default, **fields)
            self.add_addresses(address)

        return address

    def update_address(self, address_id, is_default=None, **fields) -> Address:
        address = self._find(address_id)

        if is_default is False and address.is_default:
            raise ValidationError({"addresses": ["Set another address as default instead"]})

        with atomic_change(self):
            for field, value in fields.items():
                if field in _ADDRESS_FIELDS and value is not None:
                    setattr(address, field, value)

            if is_default:
                for addr in self.addresses:
                    if addr.is_default and addr is not address:
                        addr.is_default = False
                address.is_default = True

        return address

    def remove_address(self, address_id) -> None:
        address = self._find(address_id)
        was_default = address.is_default

        with atomic_change(self):
            self.remove_addresses(address)

            # Promote the first remaining address when the default goes away
            if was_default and self.addresses:
                self.addresses[0].is_default = True

    def set_default_address(self, address_id) -> Address:
        address = self._find(address_id)

        with atomic_change(self):
            for addr in self.addresses:
                if addr.is_default:
                    addr.is_default = False
            address.is_default = True

        return address
