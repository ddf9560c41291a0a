"""Exceptions raised while building the document index.

None of these escape ``DocumentSearchService``: extraction failures are
counted per document, listing failures end up in ``IndexStatus.last_error``
and a cancelled read dies with the cancelled build.
"""


class DocSearchError(Exception):
    """Base class for docsearch failures."""


class ExtractionError(DocSearchError):
    """A single document could not be opened or parsed."""


class ListingError(DocSearchError):
    """The corpus itself could not be enumerated."""


class ExtractionCancelled(DocSearchError):
    """The index build was cancelled while a document was being read."""
