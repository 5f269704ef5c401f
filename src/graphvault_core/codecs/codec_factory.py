"""
CodecFactory - Selects the graph codec for a format tag.

Supports JSON, CSV, XML and YAML.
"""

from __future__ import annotations

from typing import Dict, List, Type

import structlog

from graphvault_core.codecs.base import GraphCodec
from graphvault_core.codecs.csv_codec import CSVCodec
from graphvault_core.codecs.json_codec import JSONCodec
from graphvault_core.codecs.xml_codec import XMLCodec
from graphvault_core.codecs.yaml_codec import YAMLCodec
from graphvault_core.exceptions import UnknownFormatError

logger = structlog.get_logger(__name__)

CODECS: Dict[str, Type[GraphCodec]] = {
    JSONCodec.format_name: JSONCodec,
    CSVCodec.format_name: CSVCodec,
    XMLCodec.format_name: XMLCodec,
    YAMLCodec.format_name: YAMLCodec,
}


def supported_formats() -> List[str]:
    """Format tags in registration order."""
    return list(CODECS)


def get_codec(format_name: str, pretty_print: bool = True, csv_delimiter: str = ",") -> GraphCodec:
    """
    Return a codec instance for a format tag.

    Tags are matched case-insensitively with surrounding whitespace ignored.

    Args:
        format_name: One of supported_formats()
        pretty_print: Indent JSON/XML output
        csv_delimiter: Field delimiter for the CSV codec

    Raises:
        UnknownFormatError: If the tag has no codec
    """
    tag = (format_name or "").strip().lower()
    codec_cls = CODECS.get(tag)
    if codec_cls is None:
        raise UnknownFormatError(
            f"Unknown format '{format_name}'. Supported formats: {', '.join(CODECS)}",
            details={"format": format_name, "supported": supported_formats()},
        )

    logger.debug("codec_selected", format=tag)
    if codec_cls is CSVCodec:
        return CSVCodec(pretty_print=pretty_print, delimiter=csv_delimiter)
    return codec_cls(pretty_print=pretty_print)
