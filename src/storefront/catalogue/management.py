"""Catalogue administration: commands and handlers for categories and products."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.exceptions import Conflict, NotFound
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _slug_taken(aggregate_cls, slug):
    repo = current_domain.repository_for(aggregate_cls)
    return bool(repo._dao.query.filter(slug=slug).all().items)


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=120)
    parent_id: Identifier()
    description: Text()
    display_order: Integer(default=0)


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=255)
    price: Float(required=True)
    category_id: Identifier()
    description: Text()
    original_price: Float()
    discount: Float(default=0.0)
    quantity: Integer(default=0)
    brand: String(max_length=100)
    material: String(max_length=100)
    is_active: Boolean(default=True)


@storefront.command(part_of="Product")
class AddVariant:
    product_id: Identifier(required=True)
    size: String(max_length=50)
    color: String(max_length=50)
    quantity: Integer(default=0)
    sku: String(max_length=64)
    price: Float()


@storefront.command(part_of="Product")
class SetStock:
    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    variant_id: Identifier()


@storefront.command(part_of="Product")
class UpdatePricing:
    product_id: Identifier(required=True)
    price: Float()
    discount: Float()
    original_price: Float()


@storefront.command_handler(part_of=Category)
class ManageCategoriesHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)

        if command.parent_id:
            try:
                repo.get(command.parent_id)
            except ObjectNotFoundError as exc:
                raise NotFound(f"Parent category {command.parent_id} not found") from exc

        if _slug_taken(Category, command.slug):
            raise Conflict(f"Category slug '{command.slug}' is already in use")

        category = Category.create(
            name=command.name,
            slug=command.slug,
            parent_id=command.parent_id,
            description=command.description,
            display_order=command.display_order or 0,
        )
        repo.add(category)
        logger.info("category_created", category_id=str(category.id), slug=category.slug)
        return str(category.id)


@storefront.command_handler(part_of=Product)
class ManageProductsHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        if command.category_id:
            try:
                current_domain.repository_for(Category).get(command.category_id)
            except ObjectNotFoundError as exc:
                raise NotFound(f"Category {command.category_id} not found") from exc

        if _slug_taken(Product, command.slug):
            raise Conflict(f"Product slug '{command.slug}' is already in use")

        product = Product.create(
            name=command.name,
            slug=command.slug,
            price=command.price,
            category_id=command.category_id,
            description=command.description,
            original_price=command.original_price,
            discount=command.discount,
            quantity=command.quantity,
            brand=command.brand,
            material=command.material,
        )
        if command.is_active is False:
            product.is_active = False

        current_domain.repository_for(Product).add(product)
        logger.info("product_created", product_id=str(product.id), slug=product.slug)
        return str(product.id)

    @handle(AddVariant)
    def add_variant(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        variant = product.add_variant(
            size=command.size,
            color=command.color,
            quantity=command.quantity or 0,
            sku=command.sku,
            price=command.price,
        )
        repo.add(product)
        return str(variant.id)

    @handle(SetStock)
    def set_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_stock(command.quantity, variant_id=command.variant_id)
        repo.add(product)

    @handle(UpdatePricing)
    def update_pricing(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_pricing(
            price=command.price,
            discount=command.discount,
            original_price=command.original_price,
        )
        repo.add(product)
