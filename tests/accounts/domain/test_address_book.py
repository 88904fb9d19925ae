"""Tests for default-address exclusivity on the AddressBook aggregate."""

import pytest
from accounts.address.address_book import AddressBook
from protean.exceptions import ObjectNotFoundError, ValidationError


def _fields(name="Jane Doe", city="Springfield"):
    return {
        "receiver_name": name,
        "receiver_phone": "555-0100",
        "city": city,
        "detail_address": "123 Main St",
    }


def _defaults(book):
    return [a for a in book.addresses if a.is_default]


class TestAddAddress:
    def test_first_address_becomes_default(self):
        book = AddressBook(user_id="user-001")
        address = book.add_address(**_fields())
        assert address.is_default is True

    def test_second_address_is_not_default(self):
        book = AddressBook(user_id="user-001")
        book.add_address(**_fields())
        second = book.add_address(**_fields(name="John"))
        assert second.is_default is False
        assert len(_defaults(book)) == 1

    def test_new_default_clears_previous(self):
        book = AddressBook(user_id="user-001")
        first = book.add_address(**_fields())
        second = book.add_address(is_default=True, **_fields(name="John"))
        assert second.is_default is True
        assert first.is_default is False
        assert _defaults(book) == [second]


class TestUpdateAddress:
    def test_fields_are_updated(self):
        book = AddressBook(user_id="user-001")
        address = book.add_address(**_fields())
        book.update_address(address.id, city="Shelbyville")
        assert address.city == "Shelbyville"

    def test_promoting_clears_other_defaults(self):
        book = AddressBook(user_id="user-001")
        first = book.add_address(**_fields())
        second = book.add_address(**_fields(name="John"))
        book.update_address(second.id, is_default=True)
        assert _defaults(book) == [second]
        assert first.is_default is False

    def test_unsetting_the_only_default_is_rejected(self):
        book = AddressBook(user_id="user-001")
        address = book.add_address(**_fields())
        with pytest.raises(ValidationError):
            book.update_address(address.id, is_default=False)
        assert address.is_default is True

    def test_unknown_address(self):
        book = AddressBook(user_id="user-001")
        with pytest.raises(ObjectNotFoundError):
            book.update_address("missing", city="X")


class TestSetDefault:
    def test_exactly_one_default_after_switching(self):
        book = AddressBook(user_id="user-001")
        addresses = [book.add_address(**_fields(name=f"R{i}")) for i in range(3)]
        for address in addresses:
            book.set_default_address(address.id)
            assert _defaults(book) == [address]


class TestRemoveAddress:
    def test_removing_default_promotes_another(self):
        book = AddressBook(user_id="user-001")
        first = book.add_address(**_fields())
        book.add_address(**_fields(name="John"))
        book.remove_address(first.id)
        assert len(book.addresses) == 1
        assert len(_defaults(book)) == 1

    def test_removing_last_address_leaves_empty_book(self):
        book = AddressBook(user_id="user-001")
        only = book.add_address(**_fields())
        book.remove_address(only.id)
        assert book.addresses == []
        assert book.default_address() is None


class TestListing:
    def test_default_is_listed_first(self):
        book = AddressBook(user_id="user-001")
        book.add_address(**_fields(name="A"))
        second = book.add_address(**_fields(name="B"))
        book.set_default_address(second.id)
        assert book.listed()[0] is second
