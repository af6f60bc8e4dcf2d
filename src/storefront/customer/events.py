"""Domain events for the AddressBook aggregate."""

from protean.fields import Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="AddressBook")
class AddressAdded:
    """A new address was saved for a user."""

    __version__ = 1

    address_book_id: Identifier(required=True)
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    city: String(max_length=100)
    country: String(max_length=100)
    is_default: String(max_length=5)


@storefront.event(part_of="AddressBook")
class AddressUpdated:
    """Fields of a saved address changed."""

    __version__ = 1

    address_book_id: Identifier(required=True)
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@storefront.event(part_of="AddressBook")
class AddressRemoved:
    """An address was removed from the address book."""

    __version__ = 1

    address_book_id: Identifier(required=True)
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@storefront.event(part_of="AddressBook")
class DefaultAddressChanged:
    """The user's default shipping address changed."""

    __version__ = 1

    address_book_id: Identifier(required=True)
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    previous_default_address_id: Identifier()
