"""Address book management: commands, handler and the ownership lookup."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.customer.address_book import EDITABLE_FIELDS, AddressBook
from storefront.domain import storefront
from storefront.exceptions import NotFound
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="AddressBook")
class AddAddress:
    """Save a new address for a user, optionally making it the default."""

    user_id: Identifier(required=True)
    first_name: String(required=True, max_length=100)
    last_name: String(required=True, max_length=100)
    company: String(max_length=150)
    address1: String(required=True, max_length=255)
    address2: String(max_length=255)
    city: String(required=True, max_length=100)
    state: String(max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100)
    phone: String(max_length=30)
    is_default: Boolean(default=False)


@storefront.command(part_of="AddressBook")
class UpdateAddress:
    """Modify fields of an existing address."""

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    first_name: String(max_length=100)
    last_name: String(max_length=100)
    company: String(max_length=150)
    address1: String(max_length=255)
    address2: String(max_length=255)
    city: String(max_length=100)
    state: String(max_length=100)
    postal_code: String(max_length=20)
    country: String(max_length=100)
    phone: String(max_length=30)
    is_default: Boolean()


@storefront.command(part_of="AddressBook")
class RemoveAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@storefront.command(part_of="AddressBook")
class SetDefaultAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


def _address_book(user_id):
    repo = current_domain.repository_for(AddressBook)
    book = repo.for_user(user_id)
    if book is None:
        raise NotFound("Address not found")
    return repo, book


def _require_owned(book, address_id):
    if book.find(address_id) is None:
        raise NotFound("Address not found")


@storefront.command_handler(part_of=AddressBook)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        repo = current_domain.repository_for(AddressBook)
        book = repo.for_user_or_new(command.user_id)

        fields = {field: getattr(command, field) for field in EDITABLE_FIELDS}
        address = book.add_address(is_default=bool(command.is_default), **fields)
        repo.add(book)

        logger.info(
            "address_added",
            user_id=str(command.user_id),
            address_id=str(address.id),
            is_default=address.is_default,
        )
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command):
        repo, book = _address_book(command.user_id)
        _require_owned(book, command.address_id)

        updates = {}
        for field in EDITABLE_FIELDS:
            value = getattr(command, field, None)
            if value is not None:
                updates[field] = value

        book.update_address(command.address_id, is_default=command.is_default, **updates)
        repo.add(book)

    @handle(RemoveAddress)
    def remove_address(self, command):
        repo, book = _address_book(command.user_id)
        _require_owned(book, command.address_id)
        book.remove_address(command.address_id)
        repo.add(book)

    @handle(SetDefaultAddress)
    def set_default_address(self, command):
        repo, book = _address_book(command.user_id)
        _require_owned(book, command.address_id)
        book.set_default_address(command.address_id)
        repo.add(book)


def address_for(user_id, address_id):
    """Return the user's address with ``address_id``, or None.

    Addresses belonging to other users are indistinguishable from addresses
    that do not exist.
    """
    book = current_domain.repository_for(AddressBook).for_user(user_id)
    if book is None:
        return None
    return book.find(address_id)


def addresses_for(user_id):
    """The user's addresses, default first, then newest first."""
    book = current_domain.repository_for(AddressBook).for_user(user_id)
    if book is None:
        return []
    newest_first = sorted(book.addresses, key=lambda a: a.created_at, reverse=True)
    return sorted(newest_first, key=lambda a: not a.is_default)
