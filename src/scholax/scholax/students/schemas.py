from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AddStudentRequest:
    name: str
    registration_no: str
    branch: str
    batch: str
    section: str

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "AddStudentRequest":
        payload = payload or {}
        values = {k: str(payload.get(k) or "").strip() for k in ("name", "registrationNo", "branch", "batch", "section")}
        if not all(values.values()):
            raise ValidationError("All fields are required")
        return cls(
            name=values["name"],
            registration_no=values["registrationNo"],
            branch=values["branch"],
            batch=values["batch"],
            section=values["section"],
        )


@dataclass(frozen=True)
class ImportUpload:
    filename: str
    content: bytes
    batch: str
    section: str

    @classmethod
    def from_request(cls, files: Mapping[str, Any], form: Mapping[str, Any]) -> "ImportUpload":
        upload = files.get("file")
        batch = str(form.get("batch") or "").strip()
        section = str(form.get("section") or "").strip()
        if upload is None or not upload.filename or not batch or not section:
            raise ValidationError("File, batch, and section are required")
        return cls(filename=upload.filename, content=upload.read(), batch=batch, section=section)
