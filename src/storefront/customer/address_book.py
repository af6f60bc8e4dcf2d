"""AddressBook aggregate: a user's saved shipping addresses.

All of a user's addresses live in one aggregate so that the "exactly one
default address" rule is checked on every change, and demoting the previous
default happens in the same write as promoting the new one.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, String

from storefront.customer.events import AddressAdded, AddressRemoved, AddressUpdated, DefaultAddressChanged
from storefront.domain import storefront

MAX_ADDRESSES = 10

# Fields a caller may change on an existing address
EDITABLE_FIELDS = (
    "first_name",
    "last_name",
    "company",
    "address1",
    "address2",
    "city",
    "state",
    "postal_code",
    "country",
    "phone",
)


@storefront.entity(part_of="AddressBook")
class Address:
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
    created_at: DateTime()

    def snapshot(self):
        """Plain dict of the address fields, as copied onto an order."""
        return {field: getattr(self, field) for field in EDITABLE_FIELDS}


@storefront.aggregate
class AddressBook:
    user_id: Identifier(required=True, unique=True)
    addresses: HasMany(Address)
    updated_at: DateTime()

    @invariant.post
    def addresses_cannot_exceed_maximum(self):
        if len(self.addresses) > MAX_ADDRESSES:
            raise ValidationError({"addresses": [f"Cannot have more than {MAX_ADDRESSES} addresses"]})

    @invariant.post
    def exactly_one_default_address_when_addresses_exist(self):
        if not self.addresses:
            return
        defaults = [a for a in self.addresses if a.is_default]
        if len(defaults) != 1:
            raise ValidationError({"addresses": ["Exactly one address must be marked as default"]})

    @classmethod
    def open(cls, user_id):
        return cls(user_id=user_id, updated_at=datetime.now(UTC))

    def find(self, address_id):
        return next((a for a in self.addresses if str(a.id) == str(address_id)), None)

    @property
    def default_address(self):
        return next((a for a in self.addresses if a.is_default), None)

    def _require(self, address_id):
        address = self.find(address_id)
        if address is None:
            raise ValidationError({"addresses": [f"Address {address_id} not found"]})
        return address

    def add_address(self, is_default=False, **fields):
        if len(self.addresses) >= MAX_ADDRESSES:
            raise ValidationError({"addresses": [f"Cannot have more than {MAX_ADDRESSES} addresses"]})

        # First address is always default
        if not self.addresses:
            is_default = True

        with atomic_change(self):
            if is_default:
                for addr in self.addresses:
                    if addr.is_default:
                        addr.is_default = False

            address = Address(is_default=is_default, created_at=datetime.now(UTC), **fields)
            self.add_addresses(address)

        self.updated_at = datetime.now(UTC)
        self.raise_(
            AddressAdded(
                address_book_id=self.id,
                user_id=self.user_id,
                address_id=address.id,
                city=address.city,
                country=address.country,
                is_default=str(is_default),
            )
        )
        return address

    def update_address(self, address_id, is_default=None, **fields):
        address = self._require(address_id)

        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({"addresses": [f"Unknown address fields: {', '.join(sorted(unknown))}"]})

        for field, value in fields.items():
            setattr(address, field, value)

        self.updated_at = datetime.now(UTC)
        self.raise_(
            AddressUpdated(
                address_book_id=self.id,
                user_id=self.user_id,
                address_id=address.id,
            )
        )

        if is_default and not address.is_default:
            self.set_default_address(address_id)

    def remove_address(self, address_id):
        address = self._require(address_id)
        was_default = address.is_default

        with atomic_change(self):
            self.remove_addresses(address)

            # Promote the first remaining address when the default goes away
            if was_default and self.addresses:
                self.addresses[0].is_default = True

        self.updated_at = datetime.now(UTC)
        self.raise_(
            AddressRemoved(
                address_book_id=self.id,
                user_id=self.user_id,
                address_id=address_id,
            )
        )

    def set_default_address(self, address_id):
        address = self._require(address_id)

        previous = self.default_address
        if previous is not None and str(previous.id) == str(address.id):
            return

        with atomic_change(self):
            for addr in self.addresses:
                if addr.is_default:
                    addr.is_default = False
            address.is_default = True

        self.updated_at = datetime.now(UTC)
        self.raise_(
            DefaultAddressChanged(
                address_book_id=self.id,
                user_id=self.user_id,
                address_id=address.id,
                previous_default_address_id=previous.id if previous else None,
            )
        )


@storefront.repository(part_of=AddressBook)
class AddressBookRepository:
    """Address books are looked up by the owning user, never by their own id."""

    def for_user(self, user_id) -> AddressBook | None:
        """Find the address book of a user, if one was ever opened."""
        results = self._dao.query.filter(user_id=str(user_id)).all().items
        return results[0] if results else None

    def for_user_or_new(self, user_id) -> AddressBook:
        return self.for_user(user_id) or AddressBook.open(user_id)
