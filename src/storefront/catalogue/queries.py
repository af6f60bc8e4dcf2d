"""Read side of the catalogue: category tree and product listing."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.exceptions import NotFound
from storefront.utils.queries import find_all


def category_tree(active_only=True):
    """Return root categories, each with a nested ``children`` list."""
    categories = find_all(Category)
    if active_only:
        categories = [c for c in categories if c.is_active]

    nodes = {str(c.id): {"category": c, "children": []} for c in categories}
    roots = []
    for node in sorted(nodes.values(), key=lambda n: (n["category"].display_order or 0, n["category"].name)):
        parent_id = node["category"].parent_id
        if parent_id and str(parent_id) in nodes:
            nodes[str(parent_id)]["children"].append(node)
        else:
            roots.append(node)
    return roots


def descendant_ids(category_id):
    """The category itself plus every category below it."""
    children_of = {}
    for category in find_all(Category):
        if category.parent_id:
            children_of.setdefault(str(category.parent_id), []).append(str(category.id))

    found = {str(category_id)}
    frontier = [str(category_id)]
    while frontier:
        current = frontier.pop()
        for child in children_of.get(current, []):
            if child not in found:
                found.add(child)
                frontier.append(child)
    return found


def _in_stock(product):
    if product.variants:
        return any(v.quantity > 0 for v in product.variants)
    return (product.quantity or 0) > 0


def list_products(category_id=None, search=None, on_sale=False, in_stock=False, include_inactive=False):
    """Products matching the filters, newest first."""
    products = find_all(Product) if include_inactive else find_all(Product, is_active=True)

    if category_id:
        allowed = descendant_ids(category_id)
        products = [p for p in products if p.category_id and str(p.category_id) in allowed]

    if search:
        needle = search.lower()
        products = [
            p for p in products if needle in (p.name or "").lower() or needle in (p.description or "").lower()
        ]

    if on_sale:
        products = [p for p in products if (p.discount or 0) > 0]

    if in_stock:
        products = [p for p in products if _in_stock(p)]

    return sorted(products, key=lambda p: p.created_at, reverse=True)


def get_product(id_or_slug):
    """Look a product up by id, falling back to its slug."""
    try:
        return current_domain.repository_for(Product).get(id_or_slug)
    except ObjectNotFoundError:
        matches = find_all(Product, slug=id_or_slug)
        if not matches:
            raise NotFound("Product not found") from None
        return matches[0]


def get_category(category_id):
    try:
        return current_domain.repository_for(Category).get(category_id)
    except ObjectNotFoundError:
        raise NotFound("Category not found") from None
