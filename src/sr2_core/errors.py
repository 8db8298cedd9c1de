"""Error codes and exceptions shared by extractors and explorers."""
from __future__ import annotations

ERRORS = {
    "E_OUT_OF_RANGE": "Byte access outside buffer bounds",
    "E_TIME_FORMAT": "Time string is not MM:SS.cc",
    "E_LAYOUT_JSON": "Layout JSON invalid",
    "E_IMAGE_MISSING": "NVRAM image missing",
    "E_TOP3_MISMATCH": "Top-3 times do not match expected",
}


class DecodeError(ValueError):
    """Base error: carries a stable code from ERRORS plus a detail string."""

    code = "E_OUT_OF_RANGE"

    def __init__(self, detail: str = ""):
        self.detail = detail
        message = ERRORS[self.code]
        super().__init__(f"{message}: {detail}" if detail else message)


class OutOfRange(DecodeError):
    code = "E_OUT_OF_RANGE"


class FormatError(DecodeError):
    code = "E_TIME_FORMAT"


class LayoutError(DecodeError):
    code = "E_LAYOUT_JSON"


class ImageMissing(DecodeError):
    code = "E_IMAGE_MISSING"
