import os

# settings are read at import time; give the OpenAI config a key before anything imports it
os.environ.setdefault("APP_OPENAI__API_KEY", "test-key")
os.environ.setdefault("APP_MODULES__INTEGRATION_STORE_NAME", "IntegrationStoreLocal")

import pytest

from integrations.integration_store_local import IntegrationStoreLocal


@pytest.fixture
def store():
    return IntegrationStoreLocal()
