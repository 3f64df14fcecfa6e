"""
Pytest configuration for TextPDF
"""

import pytest
import logging
import sys
from pathlib import Path

from textpdf.diagnostics import Diagnostics
from textpdf.engine.placeholder_resolver import DataStore
from textpdf.parser.template_parser import TemplateCompiler
from textpdf.renderers.recording_renderer import RecordingRenderer


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid handlers leaking between tests."""
    # Clear all existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    # Set up console-only logging for tests
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)  # Only show warnings and errors during tests

    formatter = logging.Formatter(
        '%(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    # Cleanup after test
    root_logger.handlers.clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    import tempfile
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def diagnostics():
    """Fresh diagnostics collector."""
    return Diagnostics()


@pytest.fixture
def recorder():
    """Renderer that records every contract call."""
    return RecordingRenderer()


@pytest.fixture
def compile_markup(recorder, diagnostics):
    """Compile markup against the recording renderer and return it."""

    def _compile(markup, data=None):
        store = DataStore.from_mapping(data, diagnostics) if data is not None else None
        TemplateCompiler(recorder, data_store=store, diagnostics=diagnostics).compile(markup)
        return recorder

    return _compile


@pytest.fixture
def sample_template():
    """A small template exercising blocks, placeholders and a table."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<textpdf>
    <title>Loan agreement</title>
    <chapter>Parties</chapter>
    <para>Lender: <value id="lender"/></para>
    <para>Amount: <value id="amount" minlen="12"/><hspace size="2"/>EUR</para>
    <para></para>
    <table columns="1,2">
        <cell>Name</cell>
        <cell>Role</cell>
        <cell>ACME</cell>
        <cell>Lender</cell>
    </table>
    <pagebreak/>
    <section align="center">Signatures</section>
</textpdf>
"""


@pytest.fixture
def sample_data():
    """Data matching :func:`sample_template`."""
    return {
        "title": "Loan agreement",
        "data": {"lender": "ACME Bank", "amount": "160000"},
    }
