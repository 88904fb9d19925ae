"""Address book management: commands, handler and repository."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from accounts.address.address_book import AddressBook
from accounts.domain import accounts

logger = structlog.get_logger(__name__)


@accounts.repository(part_of=AddressBook)
class AddressBookRepository:
    def for_user(self, user_id) -> AddressBook:
        """The user's address book, or a new empty one on first use."""
        book = self.query.filter(user_id=user_id).first
        return book if book is not None else AddressBook(user_id=user_id)


@accounts.command(part_of="AddressBook")
class AddAddress:
    user_id: Identifier(required=True)
    receiver_name: String(required=True, max_length=100)
    receiver_phone: String(required=True, max_length=30)
    province: String(max_length=100)
    city: String(required=True, max_length=100)
    district: String(max_length=100)
    detail_address: String(required=True, max_length=255)
    postal_code: String(max_length=20)
    is_default: Boolean(default=False)


@accounts.command(part_of="AddressBook")
class UpdateAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    receiver_name: String(max_length=100)
    receiver_phone: String(max_length=30)
    province: String(max_length=100)
    city: String(max_length=100)
    district: String(max_length=100)
    detail_address: String(max_length=255)
    postal_code: String(max_length=20)
    is_default: Boolean()


@accounts.command(part_of="AddressBook")
class RemoveAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@accounts.command(part_of="AddressBook")
class SetDefaultAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


_FIELDS = ("receiver_name", "receiver_phone", "province", "city", "district", "detail_address", "postal_code")


@accounts.command_handler(part_of=AddressBook)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        repo = current_domain.repository_for(AddressBook)
        book = repo.for_user(command.user_id)

        fields = {field: getattr(command, field) for field in _FIELDS if getattr(command, field) is not None}
        address = book.add_address(is_default=bool(command.is_default), **fields)
        repo.add(book)
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command):
        repo = current_domain.repository_for(AddressBook)
        book = repo.for_user(command.user_id)

        updates = {field: getattr(command, field) for field in _FIELDS if getattr(command, field) is not None}
        book.update_address(command.address_id, is_default=command.is_default, **updates)
        repo.add(book)

    @handle(RemoveAddress)
    def remove_address(self, command):
        repo = current_domain.repository_for(AddressBook)
        book = repo.for_user(command.user_id)
        book.remove_address(command.address_id)
        repo.add(book)

    @handle(SetDefaultAddress)
    def set_default_address(self, command):
        repo = current_domain.repository_for(AddressBook)
        book = repo.for_user(command.user_id)
        book.set_default_address(command.address_id)
        repo.add(book)
        logger.info("address.default_changed", user_id=command.user_id, address_id=command.address_id)
