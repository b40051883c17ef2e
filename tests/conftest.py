"""Common test fixtures for schemadoc."""

from pathlib import Path

import pytest

from schemadoc.docstore import DeclarationStore

TESTMODELS_DIR = Path(__file__).parent / "testmodels"


@pytest.fixture(scope="session")
def store() -> DeclarationStore:
    """Declarations parsed from the ``testmodels`` package.

    The same modules are importable at runtime (``tests`` is on ``sys.path``),
    so runtime types and parsed declarations describe the same code.
    """
    return DeclarationStore.load(TESTMODELS_DIR, doc_link_base_url="")
