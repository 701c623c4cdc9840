"""
Pytest configuration and shared fixtures.

Registers the ``integration`` marker and the ``--run-integration`` option,
and makes sure no test reaches real AWS unless it opts in.
"""

from unittest.mock import Mock

import pytest

from invoice_pipeline.core.config import settings
from invoice_pipeline.services.document_source import DocumentSource
from invoice_pipeline.services.pipeline import InvoicePipeline
from invoice_pipeline.services.storage import InMemoryInvoiceStore, set_invoice_store
from invoice_pipeline.services.textract_client import TextractAnalyzer


def pytest_addoption(parser):
    """Add custom command-line options"""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against real AWS resources"
    )


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test requiring real AWS resources"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is specified"""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def memory_store():
    """Every test gets a fresh in-memory store as the process-wide store"""
    store = InMemoryInvoiceStore()
    set_invoice_store(store)
    yield store
    set_invoice_store(None)


@pytest.fixture
def s3_client():
    client = Mock()
    client.head_object.return_value = {"ContentLength": 2048}
    return client


@pytest.fixture
def textract_client():
    client = Mock()
    client.analyze_document.return_value = {"Blocks": []}
    return client


@pytest.fixture
def publisher():
    """Mock NotificationPublisher matching the real interface"""
    return Mock()


@pytest.fixture
def pipeline(s3_client, textract_client, memory_store, publisher):
    """Pipeline wired to mock AWS clients; retries are instant"""
    return InvoicePipeline(
        source=DocumentSource(s3_client=s3_client),
        analyzer=TextractAnalyzer(
            textract_client=textract_client,
            max_retries=settings.textract_max_retries,
            retry_delay=0,
            sleep=lambda _: None,
        ),
        store=memory_store,
        publisher=publisher,
    )
