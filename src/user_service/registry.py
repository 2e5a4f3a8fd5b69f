"""Decorator-based plugin registry for user stores and id generators.

Concrete classes register themselves at import time via decorators like
``@register_store("dynamodb")``.  The app resolves string keys from config
to classes via ``get_store("dynamodb")`` — it never imports a concrete class
directly.
"""

from __future__ import annotations

_store_registry: dict[str, type] = {}
_id_generator_registry: dict[str, type] = {}


# ---------------------------------------------------------------------------
# Decorator factories
# ---------------------------------------------------------------------------

def register_store(name: str):
    """Class decorator that registers a user store under *name*."""

    def decorator(cls: type) -> type:
        if name in _store_registry:
            raise ValueError(
                f"Duplicate store registration: {name!r} is already "
                f"registered to {_store_registry[name].__name__}"
            )
        _store_registry[name] = cls
        return cls

    return decorator


def register_id_generator(name: str):
    """Class decorator that registers an id generator under *name*."""

    def decorator(cls: type) -> type:
        if name in _id_generator_registry:
            raise ValueError(
                f"Duplicate id generator registration: {name!r} is already "
                f"registered to {_id_generator_registry[name].__name__}"
            )
        _id_generator_registry[name] = cls
        return cls

    return decorator


# ---------------------------------------------------------------------------
# Getters — used by the app to resolve config keys → classes
# ---------------------------------------------------------------------------

def get_store(name: str) -> type:
    """Return the store class registered under *name*."""
    try:
        return _store_registry[name]
    except KeyError:
        available = ", ".join(sorted(_store_registry)) or "(none)"
        raise KeyError(
            f"Unknown store {name!r}. Available: {available}"
        ) from None


def get_id_generator(name: str) -> type:
    """Return the id generator class registered under *name*."""
    try:
        return _id_generator_registry[name]
    except KeyError:
        available = ", ".join(sorted(_id_generator_registry)) or "(none)"
        raise KeyError(
            f"Unknown id generator {name!r}. Available: {available}"
        ) from None


def list_registered() -> dict[str, dict[str, str]]:
    """Return all registered modules grouped by category.

    Returns a dict like::

        {
            "stores":        {"dynamodb": "DynamoDBUserStore", ...},
            "id_generators": {"xid": "XidGenerator", ...},
        }
    """
    return {
        "stores": {k: v.__name__ for k, v in sorted(_store_registry.items())},
        "id_generators": {
            k: v.__name__ for k, v in sorted(_id_generator_registry.items())
        },
    }
