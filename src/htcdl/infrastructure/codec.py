"""Model codec — ``.htcdl.json`` text to :class:`Model` and back.

Decoding failures are a separate outcome from validation defects: they
raise :class:`ModelDecodeError` with one of the ``DECODE_*`` codes below,
and the service layer turns them into failed results.

Encoding is a lossless projection: wire aliases, absent fields omitted.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from htcdl.domain.model import Model

FILE_NOT_FOUND = "FILE_NOT_FOUND"
INVALID_JSON = "INVALID_JSON"
DECODING_ERROR = "DECODING_ERROR"
IO_ERROR = "IO_ERROR"


class ModelDecodeError(Exception):
    """A model document could not be read or decoded."""

    def __init__(self, code: str, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.detail = detail or {}


def decode_model(text: str) -> Model:
    """Decode a JSON document into a :class:`Model`."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ModelDecodeError(INVALID_JSON, f"Invalid JSON format: {exc}") from exc
    return decode_data(data)


def decode_data(data: Any) -> Model:
    """Decode already-parsed JSON data into a :class:`Model`."""
    try:
        return Model.model_validate(data)
    except ValidationError as exc:
        errors = [
            {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
            for err in exc.errors(include_url=False)
        ]
        summary = "; ".join(f"{e['loc']}: {e['msg']}" if e["loc"] else e["msg"] for e in errors)
        raise ModelDecodeError(
            DECODING_ERROR,
            f"JSON decoding error: {summary}",
            {"errors": errors},
        ) from exc


def load_model(path: Path) -> Model:
    """Read and decode the model stored at *path*."""
    if not path.is_file():
        raise ModelDecodeError(FILE_NOT_FOUND, f"File not found: {path}", {"path": str(path)})
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ModelDecodeError(IO_ERROR, f"I/O error: {exc}", {"path": str(path)}) from exc
    return decode_model(text)


def to_data(model: Model) -> dict[str, Any]:
    """Wire-form dict of *model*."""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def encode_model(model: Model, *, indent: int | None = 2) -> str:
    """Serialize *model* to its JSON wire form."""
    return json.dumps(to_data(model), indent=indent, ensure_ascii=False)


def write_model(model: Model, path: Path) -> None:
    """Write *model* to *path*, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(encode_model(model) + "\n", encoding="utf-8")
