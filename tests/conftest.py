from unittest.mock import Mock

import pytest
from django.test import RequestFactory

from django_http_errors.lib import configure, resetSettings


@pytest.fixture(autouse=True)
def fresh_settings():
    resetSettings()
    yield
    resetSettings()


@pytest.fixture
def rf() -> RequestFactory:
    return RequestFactory()


@pytest.fixture
def logger() -> Mock:
    mock = Mock()
    configure(logger=mock)
    return mock
