"""Category aggregate: a node in the catalogue tree."""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from storefront.catalogue.events import CategoryCreated
from storefront.domain import storefront


@storefront.aggregate
class Category:
    """A grouping of products. Categories nest through ``parent_id``.

    Listing products by category includes the products of every descendant
    category, so a shopper browsing "Clothing" also sees "Clothing > Shirts".
    """

    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=120, unique=True)
    description: Text()
    parent_id: Identifier()
    display_order: Integer(default=0)
    is_active: Boolean(default=True)
    created_at: DateTime()

    @invariant.post
    def category_cannot_be_its_own_parent(self):
        if self.parent_id and str(self.parent_id) == str(self.id):
            raise ValidationError({"parent_id": ["A category cannot be its own parent"]})

    @classmethod
    def create(cls, name, slug, parent_id=None, description=None, display_order=0):
        category = cls(
            name=name,
            slug=slug,
            parent_id=parent_id,
            description=description,
            display_order=display_order,
            created_at=datetime.now(UTC),
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                name=name,
                slug=slug,
                parent_id=parent_id,
            )
        )
        return category
