import pytest

from reactprops.parser import parse_code
from reactprops.extractors.react_extractor import ReactComponentExtractor


@pytest.fixture(scope="session")
def collect():
    """Parse ``source`` and return the raw, unresolved Result."""

    def _collect(source, filename="Component.tsx"):
        code, tree = parse_code(filename, source)
        return ReactComponentExtractor().collect(tree.root_node, code)

    return _collect
