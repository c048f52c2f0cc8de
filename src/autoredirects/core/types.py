"""Core type definitions."""

from typing import NewType

# Stable cross-build page identifier (e.g., a CMS content ID)
# Always a string so it survives a round trip through JSON object keys
PageId = NewType("PageId", str)

# URL path a page is served at during one build (e.g., "/guide")
URLPath = NewType("URLPath", str)

# Mapping of page identifiers to rendered paths for one build
PageTable = dict[PageId, URLPath]
