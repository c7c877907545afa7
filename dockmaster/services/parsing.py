"""Helpers that turn runtime CLI text into typed values."""

import json
import logging
import re
from datetime import UTC, datetime, timedelta, timezone
from typing import Any, TypeVar

from pydantic import BaseModel

from dockmaster.core.errors import BadRequestError, InternalError, NotFoundError
from dockmaster.schemas.containers import PortBinding

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# SI units step by 1000, IEC units by 1024; docker prints both depending on the command.
_SIZE_FACTORS: dict[str, int] = {
    "b": 1,
    "kb": 1000,
    "mb": 1000**2,
    "gb": 1000**3,
    "tb": 1000**4,
    "pb": 1000**5,
    "kib": 1024,
    "mib": 1024**2,
    "gib": 1024**3,
    "tib": 1024**4,
    "pib": 1024**5,
}
_SIZE_PATTERN = re.compile(r"([0-9]*\.?[0-9]+)\s*([a-zA-Z]+)?")

# "2024-01-15 10:30:00 +0000 UTC", "2024-01-15 10:30:00.123456789 +0000 UTC", "2024-01-15T10:30:00Z"
_TIME_PATTERN = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[ T](\d{2}):(\d{2}):(\d{2})(?:\.\d+)?\s*(Z|[+-]\d{2}:?\d{2})?"
)


def parse_json_lines(output: str, model: type[ModelT], kind: str) -> list[ModelT]:
    """
    Parse one JSON object per line into model instances.
    Blank lines are ignored; malformed lines are logged and skipped, never failing the list.
    """
    records: list[ModelT] = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            records.append(model.model_validate(json.loads(line)))
        except ValueError as e:
            logger.warning(
                "Skipping unparseable %s line",
                kind,
                extra={"line": line[:500], "error": str(e)},
            )
    return records


def parse_json_document(output: str, kind: str, ident: str) -> dict[str, Any]:
    """Return the first object of an `inspect` JSON array."""
    try:
        parsed = json.loads(output)
    except ValueError as e:
        raise InternalError(f"Failed to parse {kind} inspect output") from e
    if isinstance(parsed, list):
        if not parsed:
            raise NotFoundError(f"{kind.capitalize()} not found: {ident}")
        parsed = parsed[0]
    if not isinstance(parsed, dict):
        raise InternalError(f"Unexpected {kind} inspect output")
    return parsed


def parse_size(value: str) -> int:
    """Bytes for a CLI size such as "120MB" or "1.5GiB"; unparseable values and "N/A" give 0."""
    raw = (value or "").strip()
    match = _SIZE_PATTERN.fullmatch(raw)
    if not match:
        return 0
    factor = _SIZE_FACTORS.get((match.group(2) or "B").lower())
    if factor is None:
        return 0
    return round(float(match.group(1)) * factor)


def parse_docker_time(value: str) -> int | None:
    """Parse the CLI's CreatedAt formats to Unix seconds; None when unrecognised."""
    match = _TIME_PATTERN.match((value or "").strip())
    if not match:
        return None
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    offset = match.group(7)
    tz = UTC
    if offset and offset != "Z":
        digits = offset[1:].replace(":", "")
        delta = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
        tz = timezone(-delta if offset[0] == "-" else delta)
    try:
        return int(datetime(year, month, day, hour, minute, second, tzinfo=tz).timestamp())
    except ValueError:
        return None


def parse_ports(value: str) -> list[PortBinding]:
    """
    Parse the `docker ps` Ports column.

    "0.0.0.0:8080->80/tcp, :::8080->80/tcp, 443/tcp" yields three bindings.
    Port ranges and unrecognised fragments are skipped.
    """
    bindings: list[PortBinding] = []
    for fragment in (value or "").split(","):
        fragment = fragment.strip()
        if not fragment:
            continue
        public_part, arrow, private_part = fragment.rpartition("->")
        if not arrow:
            private_part = fragment
        private_port, _, proto = private_part.partition("/")
        if not private_port.isdigit():
            continue
        ip: str | None = None
        public_port: int | None = None
        if arrow:
            host, _, port = public_part.rpartition(":")
            if not port.isdigit():
                continue
            public_port = int(port)
            ip = host.strip("[]") or None
        bindings.append(
            PortBinding(ip=ip, public_port=public_port, private_port=int(private_port), type=proto or "tcp")
        )
    return bindings


def parse_labels(value: str) -> dict[str, str]:
    """Split a "a=b,c=d" label string into a dict."""
    labels: dict[str, str] = {}
    for item in (value or "").split(","):
        if not item.strip():
            continue
        key, _, val = item.partition("=")
        key = key.strip()
        if key:
            labels[key] = val.strip()
    return labels


def parse_percent(value: str) -> float:
    raw = (value or "").strip().rstrip("%")
    try:
        return float(raw)
    except ValueError:
        return 0.0


def parse_int(value: str) -> int:
    try:
        return int((value or "").strip())
    except ValueError:
        return 0


def split_pair(value: str) -> tuple[str, str]:
    """Split a "used / limit" column into its two halves."""
    left, _, right = (value or "").partition("/")
    return left.strip(), right.strip()


def split_list(value: str) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def reject_option_like(value: str, field: str) -> str:
    """Refuse request values that the CLI would read as a flag."""
    if value.startswith("-"):
        raise BadRequestError(f"Invalid {field}: must not start with '-'")
    return value
