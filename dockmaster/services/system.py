"""Runtime-wide info: container/image counts, versions, host summary."""

import json
import logging
from typing import Any

from dockmaster.core.errors import InternalError
from dockmaster.schemas.system import ContainerCounts, HostSummary, RuntimeVersion, SystemInfo
from dockmaster.services.executor import CommandError
from dockmaster.services.translator import JSON_FORMAT, CliTranslator

logger = logging.getLogger(__name__)


def _int(data: dict[str, Any], key: str) -> int:
    value = data.get(key)
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return 0
    return 0


def _str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


class SystemService(CliTranslator):
    kind = "system"

    def _version(self) -> RuntimeVersion | None:
        """Server version block, or None when `docker version` fails or is unparseable."""
        try:
            output = self._output(["version", "--format", JSON_FORMAT])
            data = json.loads(output)
        except CommandError as e:
            logger.warning("Failed to get runtime version", extra={"error": e.message})
            return None
        except ValueError:
            logger.warning("Failed to parse runtime version output")
            return None
        server = data.get("Server") if isinstance(data, dict) else None
        if not isinstance(server, dict):
            return None
        return RuntimeVersion(
            version=_str(server, "Version"),
            api_version=_str(server, "ApiVersion"),
            go_version=_str(server, "GoVersion"),
        )

    def info(self) -> SystemInfo:
        output = self._output(["system", "info", "--format", JSON_FORMAT])
        try:
            raw = json.loads(output)
        except ValueError as e:
            raise InternalError("Failed to parse system info") from e
        if not isinstance(raw, dict):
            raise InternalError("Failed to parse system info")

        return SystemInfo(
            containers=ContainerCounts(
                total=_int(raw, "Containers"),
                running=_int(raw, "ContainersRunning"),
                paused=_int(raw, "ContainersPaused"),
                stopped=_int(raw, "ContainersStopped"),
            ),
            images=_int(raw, "Images"),
            version=self._version(),
            system=HostSummary(
                total_memory=_int(raw, "MemTotal"),
                cpus=_int(raw, "NCPU"),
                os_type=_str(raw, "OSType"),
                architecture=_str(raw, "Architecture"),
            ),
        )
