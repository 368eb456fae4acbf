"""Shared fixtures for blockdoc tests."""

import pytest

from blockdoc import BlockDocument, KeyedNodeList
from blockdoc.config import reset_document_config


@pytest.fixture
def doc() -> BlockDocument:
    return BlockDocument()


@pytest.fixture
def target() -> KeyedNodeList:
    return KeyedNodeList()


@pytest.fixture(autouse=True)
def _default_config():
    """Keep context-local config changes from leaking between tests."""
    yield
    reset_document_config()
