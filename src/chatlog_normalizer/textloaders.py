"""Extract chat log text from the document formats people paste logs into.

Supported extensions: .txt, .log, .md, .docx, .rtf, .pdf. Anything else is
read as text with best-effort decoding.
"""

from __future__ import annotations

import codecs
import logging
from pathlib import Path

from docx import Document  # python-docx
from pdfminer.high_level import extract_text as pdf_extract_text
from striprtf.striprtf import rtf_to_text

logger = logging.getLogger(__name__)

# pdfminer is chatty; suppress warnings like "FontBBox ... 4 floats"
for name in ("pdfminer", "pdfminer.pdfinterp", "pdfminer.psparser", "pdfminer.pdffont"):
    logging.getLogger(name).setLevel(logging.ERROR)

PLAIN_TEXT_EXTENSIONS = frozenset({".txt", ".log", ".md"})
SUPPORTED_EXTENSIONS = PLAIN_TEXT_EXTENSIONS | {".docx", ".rtf", ".pdf"}


class LoadError(Exception):
    """Raised when a loader fails to extract text from a file."""


def load_chatlog_text(path: Path) -> str:
    """Return the plain text of a chat log file with LF line endings.

    Raises ``FileNotFoundError`` when ``path`` does not exist and
    :class:`LoadError` when a document library cannot read it.
    """
    if not path.is_file():
        raise FileNotFoundError(path)
    ext = path.suffix.lower()
    if ext == ".docx":
        return load_docx_text(path)
    if ext == ".rtf":
        return load_rtf_text(path)
    if ext == ".pdf":
        return load_pdf_text(path)
    if ext not in SUPPORTED_EXTENSIONS:
        logger.info("Unrecognised extension %r; reading %s as plain text", ext, path)
    return normalize_newlines(read_text_best_effort(path))


def read_text_best_effort(path: Path) -> str:
    """Read raw bytes and decode using a best-effort set of encodings.

    Honours UTF-8/16/32 byte order marks, then tries UTF-8 and cp1252 before
    falling back to latin-1, which accepts any byte sequence.
    """
    raw = path.read_bytes()
    if raw.startswith(codecs.BOM_UTF8):
        return raw.decode("utf-8-sig", errors="replace")
    if raw.startswith((codecs.BOM_UTF32_LE, codecs.BOM_UTF32_BE)):
        return raw.decode("utf-32", errors="replace")
    if raw.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return raw.decode("utf-16", errors="replace")
    for enc in ("utf-8", "cp1252"):
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue
    return raw.decode("latin-1")


def load_docx_text(path: Path) -> str:
    """Extract text from a .docx file, one paragraph or table row per line."""
    try:
        doc = Document(str(path))
    except Exception as e:
        raise LoadError(f"python-docx failed: {e}") from e
    parts = [p.text for p in doc.paragraphs]
    for tbl in getattr(doc, "tables", []):
        for row in tbl.rows:
            parts.append("\t".join(cell.text for cell in row.cells))
    return normalize_newlines("\n".join(parts))


def load_rtf_text(path: Path) -> str:
    """Extract text from an RTF file using striprtf."""
    try:
        txt = rtf_to_text(path.read_text(encoding="utf-8", errors="ignore"))
    except Exception as e:
        raise LoadError(f"RTF parse failed: {e}") from e
    return normalize_newlines(txt)


def load_pdf_text(path: Path) -> str:
    """Extract text from a PDF via pdfminer (no OCR)."""
    try:
        txt = pdf_extract_text(str(path)) or ""
    except Exception as e:
        raise LoadError(f"pdfminer failed: {e}") from e
    # Page breaks become blank lines; the normalizer drops those anyway.
    return normalize_newlines(txt.replace("\f", "\n"))


def normalize_newlines(s: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return s.replace("\r\n", "\n").replace("\r", "\n")
