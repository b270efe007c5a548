from __future__ import annotations

from enum import Enum

OCTET_STREAM = "application/octet-stream"


class OutputFormat(str, Enum):
    BITS = "bits"
    PBM = "pbm"
    PNG = "png"

    @property
    def content_type(self) -> str:
        if self is OutputFormat.PNG:
            return "image/png"
        return OCTET_STREAM

    @property
    def suffix(self) -> str:
        return "." + self.value

    @classmethod
    def from_name(cls, name: str) -> "OutputFormat":
        try:
            return cls(name.lower().lstrip("."))
        except ValueError:
            choices = ", ".join(fmt.value for fmt in cls)
            raise ValueError(f"Unknown output format '{name}' (expected one of: {choices})") from None
