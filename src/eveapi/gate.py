"""
Envelope checks run on every parsed document before normalization.
"""

import logging
from typing import Optional, Union

from .dom_parser import DomDocument
from .errors import SchemaError
from .results import UpstreamError
from .xml_parser import ParsedDocument

logger = logging.getLogger(__name__)

ROOT_TAG = "eveapi"
SUPPORTED_VERSION = "2"


def check(doc: Union[ParsedDocument, DomDocument]) -> Optional[UpstreamError]:
    """
    Inspect the document envelope.

    Returns:
        None when the document can be normalized, or the UpstreamError
        carried by its error envelope.

    Raises:
        SchemaError: If the document is not an API document (a proxy or
            maintenance page), declares an unsupported API version, or has
            neither a result nor a cachedUntil.
    """
    if doc.tag != ROOT_TAG:
        raise SchemaError(f"Not an EVE API document: root element is <{doc.tag}>")

    version = doc.version
    if version is not None and version.strip() != SUPPORTED_VERSION:
        raise SchemaError(
            f"Unsupported EveOnline API XML version {version!r} "
            f"(requires version {SUPPORTED_VERSION})"
        )

    error = doc.error
    if error is not None:
        code, message = error
        logger.info(f"API returned error {code}: {message}")
        return UpstreamError(code=code, message=message)

    if not doc.has_result and doc.cached_until is None:
        raise SchemaError("EVE API document has neither a result nor a cachedUntil")
    return None
