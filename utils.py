import importlib
from typing import Any, Callable

from integrations import STORES


def lazy_external_import(module_name: str, class_name: str) -> Callable[..., Any]:
    """Defer importing `class_name` from `module_name` until it is first instantiated."""

    def import_class(*args: Any, **kwargs: Any):
        cls = getattr(importlib.import_module(module_name), class_name)
        return cls(*args, **kwargs)

    return import_class


def get_store_class(store_name: str) -> Callable[..., Any]:
    if store_name not in STORES:
        raise ValueError(f"Unknown integration store: {store_name}. Choose one of {', '.join(STORES)}")
    return lazy_external_import(STORES[store_name], store_name)
