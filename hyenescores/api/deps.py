from hyenescores.config import get_settings
from hyenescores.store import TableStore, get_store as build_store


def get_store() -> TableStore | None:
    """Store handle for the current request, None when running offline."""
    return build_store(get_settings())
