"""Repository query helpers shared by the read paths."""

from protean.utils.globals import current_domain

# Upper bound for reads that scan a whole aggregate table. Protean applies a
# small default limit to queries that do not set one.
SCAN_LIMIT = 10_000


def find_all(aggregate_cls, **filters):
    """Return every record of ``aggregate_cls`` matching ``filters``."""
    query = current_domain.repository_for(aggregate_cls)._dao.query
    if filters:
        query = query.filter(**filters)
    return query.limit(SCAN_LIMIT).all().items


def paginate(records, page, limit):
    """Slice ``records`` for a 1-based page and report the pagination block."""
    total = len(records)
    start = (page - 1) * limit
    return records[start : start + limit], {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": (total + limit - 1) // limit if limit else 0,
    }
