from __future__ import annotations
import io
import zipfile
from PIL import Image, UnidentifiedImageError


ALLOWED_MIME = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/png",
    "text/plain",
    "application/zip",
}
EXT_FOR_MIME = {
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "image/jpeg": "jpg",
    "image/png": "png",
    "text/plain": "txt",
    "application/zip": "zip",
}
# Browsers disagree on a few of these
MIME_ALIASES = {
    "image/jpg": "image/jpeg",
    "application/x-zip-compressed": "application/zip",
}
_OLE_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


def normalize_mime(declared: str | None) -> str | None:
    if not declared:
        return None
    declared = declared.split(";", 1)[0].strip().lower()
    return MIME_ALIASES.get(declared, declared)


def _sniff_image(data: bytes) -> str | None:
    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.format == "JPEG":
                return "image/jpeg"
            elif img.format == "PNG":
                return "image/png"
            return None
    except Exception:
        return None


def sniff_mime(data: bytes, declared: str | None = None) -> str | None:
    """Detect the real type of an upload from its bytes; the client's content-type is only a hint."""
    if data.startswith(b"%PDF-"):
        return "application/pdf"
    if data.startswith(_OLE_MAGIC):
        return "application/msword"
    if data.startswith(b"PK\x03\x04"):
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as zf:
                if "word/document.xml" in zf.namelist():
                    return "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        except zipfile.BadZipFile:
            return None
        return "application/zip"
    image = _sniff_image(data)
    if image:
        return image
    if normalize_mime(declared) == "text/plain":
        try:
            data.decode("utf-8")
            return "text/plain"
        except UnicodeDecodeError:
            return None
    return None


def validate_upload(data: bytes, declared: str | None, max_bytes: int) -> str:
    """Returns the detected mime type or raises ValueError."""
    if not data:
        raise ValueError("Empty file")
    if len(data) > max_bytes:
        raise ValueError(f"File too large (max {max_bytes // (1024 * 1024)} MB)")
    mime = sniff_mime(data, declared)
    if mime not in ALLOWED_MIME:
        raise ValueError("Invalid file type. Only PDF, DOC, DOCX, JPG, PNG, TXT, and ZIP files are allowed.")
    if mime in ("image/jpeg", "image/png"):
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.verify()  # basic integrity
        except (UnidentifiedImageError, OSError, SyntaxError):
            raise ValueError("Invalid image file")
    return mime


def derive_title(data: bytes, mime: str) -> str | None:
    """First non-empty line of a text upload, capped at 100 chars."""
    if mime != "text/plain":
        return None
    for line in data.decode("utf-8", errors="ignore").splitlines():
        trimmed = line.strip()
        if trimmed:
            return trimmed[:100]
    return None


def ext_for_mime(mime: str) -> str:
    return EXT_FOR_MIME.get(mime, "bin")
