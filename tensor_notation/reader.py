# tensor_notation/reader.py
"""
Entry point used by the inference layer to turn a feature string into inputs.
"""

from __future__ import annotations

from loguru import logger

from tensor_notation.errors import ExtensionError
from tensor_notation.notation.document import InputAccumulator
from tensor_notation.notation.parser import TensorParser, Text

FAILURE_PREFIX = "OnnxExtension: Failed to deserialize tensor: "


def read_tensor_notation(
    text: Text, context: InputAccumulator, *, strict: bool = False
) -> None:
    """Parse ``text`` into ``context``.

    Raises:
        ExtensionError: if the text is malformed. Whatever ``context`` received
            before the failure must be discarded by the caller.
    """
    parser = TensorParser(text, context, strict=strict)
    if not parser.cached_parse():
        logger.debug("Rejected feature string: {msg}", msg=parser.error_message())
        raise ExtensionError(FAILURE_PREFIX + parser.error_message(), parser.error)
