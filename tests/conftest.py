import io
import logging

import pytest

from lars.model.enums import DisplayPolicy, ResourceType
from lars.remote.connection import MemoryRepositoryConnection
from lars.resources.resource import RepositoryResource


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("lars")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream  # Yield the stream to the test function

    # Cleanup after the test
    logger.removeHandler(handler)
    log_stream.close()


@pytest.fixture
def connection():
    """A fresh in-memory repository."""
    return MemoryRepositoryConnection()


@pytest.fixture
def make_feature(connection):
    """Factory for visible feature resources, optionally with one content attachment."""

    def _make(
        name="JSON Processing",
        symbolic_name="com.ibm.websphere.appserver.jsonp-1.0",
        applies_to="com.ibm.websphere.appserver; productVersion=8.5.5.9+",
        version="1.0.0",
        description="JSON-P support",
        content=b"feature content",
        policy=DisplayPolicy.VISIBLE,
        provider="IBM",
        target=None,
    ):
        resource = RepositoryResource(
            target if target is not None else connection,
            type=ResourceType.FEATURE,
            name=name,
            provider=provider,
            version=version,
            description=description,
        )
        resource.wlp.provide_feature = symbolic_name
        resource.wlp.applies_to = applies_to
        resource.wlp.web_display_policy = policy
        if content is not None:
            resource.add_content(f"{symbolic_name}.esa", content)
        return resource

    return _make
