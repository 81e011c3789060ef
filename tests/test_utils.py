import pytest

from integrations.integration_store_local import IntegrationStoreLocal
from utils import get_store_class


def test_store_class_is_imported_by_name():
    store = get_store_class("IntegrationStoreLocal")(user_id="u1")
    assert isinstance(store, IntegrationStoreLocal)
    assert store.get_integration("u1", "facebook") is not None


def test_unknown_store_name():
    with pytest.raises(ValueError, match="Unknown integration store"):
        get_store_class("IntegrationStoreRedis")
