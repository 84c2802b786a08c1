"""Repository read helpers."""

BATCH_SIZE = 500


def fetch_all(query, batch_size=BATCH_SIZE):
    """Drain a query past the DAO's default page limit."""
    items = []
    offset = 0
    while True:
        result = query.offset(offset).limit(batch_size).all()
        items.extend(result.items)
        if not result.has_next:
            return items
        offset += batch_size
