"""Volume operations via the runtime CLI."""

import logging
from typing import Any

from dockmaster.core.errors import ConflictError
from dockmaster.schemas.volumes import (
    DEFAULT_VOLUME_ROOT,
    CreateVolumeRequest,
    VolumeLine,
    VolumeRecord,
)
from dockmaster.services.parsing import (
    parse_json_document,
    parse_json_lines,
    parse_labels,
    reject_option_like,
)
from dockmaster.services.translator import JSON_FORMAT, CliTranslator

logger = logging.getLogger(__name__)


def to_volume_record(line: VolumeLine) -> VolumeRecord:
    return VolumeRecord(
        name=line.name,
        driver=line.driver or "local",
        mountpoint=line.mountpoint or f"{DEFAULT_VOLUME_ROOT}/{line.name}/_data",
        created_at=line.created_at,
        scope=line.scope or "local",
        labels=parse_labels(line.labels),
        options=parse_labels(line.options),
    )


def _key_value_args(flag: str, values: dict[str, str], field: str) -> list[str]:
    args: list[str] = []
    for key, value in values.items():
        args += [flag, f"{reject_option_like(key, field)}={value}"]
    return args


class VolumeService(CliTranslator):
    kind = "volume"

    def list_volumes(self) -> list[VolumeRecord]:
        output = self._output(["volume", "ls", "--format", JSON_FORMAT])
        return [to_volume_record(line) for line in parse_json_lines(output, VolumeLine, self.kind)]

    def create(self, req: CreateVolumeRequest) -> str:
        """Create a volume; returns its name (generated by the runtime when omitted)."""
        args = ["volume", "create"]
        if req.driver:
            args += ["--driver", reject_option_like(req.driver, "driver")]
        args += _key_value_args("--opt", req.driver_opts, "driver option")
        args += _key_value_args("--label", req.labels, "label")
        if req.name:
            args.append(reject_option_like(req.name, "name"))
        name = self._output(args).strip()
        logger.info("Volume created", extra={"volume": name})
        return name

    def inspect(self, name: str) -> dict[str, Any]:
        reject_option_like(name, "volume name")
        output = self._output(["volume", "inspect", name], name)
        return parse_json_document(output, self.kind, name)

    def is_in_use(self, name: str) -> bool:
        """True when any container, running or stopped, mounts the volume."""
        reject_option_like(name, "volume name")
        output = self._output(["ps", "-a", "--filter", f"volume={name}", "--format", "{{.ID}}"])
        return bool(output.strip())

    def remove(self, name: str, force: bool = False) -> None:
        """
        Delete a volume. Without force, a volume used by any container is
        refused with ConflictError and no deletion is attempted.
        """
        reject_option_like(name, "volume name")
        if not force and self.is_in_use(name):
            raise ConflictError(
                f"Volume {name} is in use by one or more containers; use force=true to remove it"
            )
        args = ["volume", "rm", "-f", name] if force else ["volume", "rm", name]
        self._output(args, name)
