# api/services/scripture/detector.py
"""
Format detection and dispatch for raw Bible module bytes.

Raw input is tried as a zip archive first. If it is one, the first .json or
.xml entry is decoded; otherwise the bytes themselves are treated as a JSON
or XML document, sniffed by their first character. XML is then routed to the
OSIS or simple decoder by its root tag.
"""

import io
import logging
import zipfile
from typing import Callable, Optional

from .errors import DecodeFailure, EmptyCorpus
from .json_decoder import decode_json
from .models import UNZIPPING, DecodedCorpus, ImportProgress
from .osis_xml import decode_osis_xml
from .simple_xml import decode_simple_xml
from .xml_tree import Node, parse_document

logger = logging.getLogger(__name__)

JSON = "json"
XML = "xml"
OSIS = "osis"
SIMPLE = "simple"

BIBLE_EXTENSIONS = (".json", ".xml")


def _decode_text(data: bytes) -> str:
    return data.decode("utf-8-sig", errors="replace")


def unpack_archive(raw: bytes) -> Optional[tuple]:
    """
    Extract the Bible document from a zip archive.

    Returns:
        (entry_name, text) if `raw` is a zip archive, None if it is not

    Raises:
        DecodeFailure: If the archive is corrupt or holds no .json/.xml entry
    """
    if not zipfile.is_zipfile(io.BytesIO(raw)):
        return None

    try:
        with zipfile.ZipFile(io.BytesIO(raw), "r") as zf:
            entry = next(
                (
                    info for info in zf.infolist()
                    if not info.is_dir() and info.filename.lower().endswith(BIBLE_EXTENSIONS)
                ),
                None,
            )
            if entry is None:
                raise DecodeFailure("No valid Bible file (JSON/XML) found in ZIP")
            logger.debug(f"Using archive entry: {entry.filename}")
            return entry.filename, _decode_text(zf.read(entry))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as e:
        raise DecodeFailure(f"Corrupt archive: {e}")


def sniff_format(content: str) -> str:
    """JSON if the text starts with '{', XML otherwise."""
    return JSON if content.lstrip().startswith("{") else XML


def xml_dialect(root: Node) -> str:
    return OSIS if root.name == "osis" else SIMPLE


def decode_corpus(
    raw: bytes,
    filename: Optional[str] = None,
    on_progress: Optional[Callable[[ImportProgress], None]] = None,
) -> DecodedCorpus:
    """
    Detect the format of `raw` and decode it into canonical records.

    Args:
        raw: Archive or document bytes
        filename: Optional filename hint (e.g. "NKJV.zip", "kjv.xml")
        on_progress: Optional callable receiving ImportProgress events

    Raises:
        DecodeFailure: Corrupt archive or malformed document
        UnsupportedDialect: XML with no recognisable books
        EmptyCorpus: Decoding produced zero verses
    """
    progress = on_progress or (lambda p: None)
    progress(ImportProgress(UNZIPPING, 0))

    unpacked = unpack_archive(raw)
    if unpacked is not None:
        entry_name, content = unpacked
        fmt = JSON if entry_name.lower().endswith(".json") else XML
        name_hint = entry_name
    else:
        content = _decode_text(raw)
        fmt = sniff_format(content)
        name_hint = filename
    progress(ImportProgress(UNZIPPING, 100))

    logger.info(f"Decoding {fmt.upper()} document ({len(content)} chars) from {name_hint or 'upload'}")

    if fmt == JSON:
        corpus = decode_json(content, name_hint, progress)
    else:
        root = parse_document(content)
        if xml_dialect(root) == OSIS:
            corpus = decode_osis_xml(root, name_hint, progress, size=len(content))
        else:
            corpus = decode_simple_xml(root, name_hint, progress, size=len(content))

    if not corpus.verses:
        raise EmptyCorpus(f"No verses found in {name_hint or 'document'}")

    return corpus
