"""Container operations via the runtime CLI."""

import logging
import re
import shlex
from typing import Any

from dockmaster.core.errors import BadRequestError
from dockmaster.schemas.containers import (
    ContainerLine,
    ContainerRecord,
    ContainerStats,
    LogLine,
    PortMapping,
    RunContainerRequest,
    StatsLine,
    VolumeMapping,
)
from dockmaster.services.parsing import (
    parse_docker_time,
    parse_int,
    parse_json_document,
    parse_json_lines,
    parse_labels,
    parse_percent,
    parse_ports,
    parse_size,
    reject_option_like,
    split_list,
    split_pair,
)
from dockmaster.services.translator import JSON_FORMAT, CliTranslator

logger = logging.getLogger(__name__)

DEFAULT_LOG_TAIL = "100"

# host[:ip]:port or bare port, optional /proto on the container side.
_PORT_PART = re.compile(r"[0-9A-Za-z.:\[\]-]*[0-9]")
_CONTAINER_PORT = re.compile(r"\d+(-\d+)?(/(tcp|udp|sctp))?")
_ENV_KEY = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")


def to_container_record(line: ContainerLine) -> ContainerRecord:
    return ContainerRecord(
        id=line.id,
        names=split_list(line.names),
        image=line.image,
        command=line.command.strip('"'),
        created=parse_docker_time(line.created_at),
        ports=parse_ports(line.ports),
        labels=parse_labels(line.labels),
        state=line.state,
        status=line.status,
        mounts=split_list(line.mounts),
    )


def to_container_stats(container_id: str, line: StatsLine) -> ContainerStats:
    mem_used, mem_limit = (parse_size(v) for v in split_pair(line.mem_usage))
    net_rx, net_tx = (parse_size(v) for v in split_pair(line.net_io))
    block_read, block_write = (parse_size(v) for v in split_pair(line.block_io))
    mem_perc = parse_percent(line.mem_perc)
    if not mem_perc and mem_limit:
        mem_perc = mem_used / mem_limit * 100
    return ContainerStats(
        id=line.id or container_id,
        name=line.name,
        cpu_perc=parse_percent(line.cpu_perc),
        mem_usage=mem_used,
        mem_limit=mem_limit,
        mem_perc=mem_perc,
        net_rx=net_rx,
        net_tx=net_tx,
        block_read=block_read,
        block_write=block_write,
        pids=parse_int(line.pids),
    )


def _port_args(ports: dict[str, str] | list[PortMapping] | None) -> list[str]:
    if not ports:
        return []
    if isinstance(ports, dict):
        pairs = list(ports.items())
    else:
        pairs = [
            (p.host_port, p.container_port if p.protocol == "tcp" else f"{p.container_port}/{p.protocol}")
            for p in ports
        ]
    args: list[str] = []
    for host, container in pairs:
        host, container = host.strip(), container.strip()
        if not _PORT_PART.fullmatch(host) or not _CONTAINER_PORT.fullmatch(container):
            raise BadRequestError(f"Invalid port mapping: {host}:{container}")
        args += ["-p", f"{host}:{container}"]
    return args


def _env_args(environment: list[str] | dict[str, str] | None) -> list[str]:
    if not environment:
        return []
    items = (
        [f"{k}={v}" for k, v in environment.items()]
        if isinstance(environment, dict)
        else [e for e in environment if e.strip()]
    )
    args: list[str] = []
    for item in items:
        key = item.partition("=")[0]
        if not _ENV_KEY.fullmatch(key):
            raise BadRequestError(f"Invalid environment variable: {key!r}")
        args += ["-e", item]
    return args


def _volume_args(volumes: list[str | VolumeMapping] | None) -> list[str]:
    args: list[str] = []
    for volume in volumes or []:
        if isinstance(volume, VolumeMapping):
            mount = f"{volume.host_path}:{volume.container_path}"
            if volume.read_only:
                mount += ":ro"
        else:
            mount = volume.strip()
            if not mount:
                continue
        args += ["-v", reject_option_like(mount, "volume")]
    return args


def build_run_args(req: RunContainerRequest) -> list[str]:
    """Assemble `run -d ...` from a validated request. Raises BadRequestError on option-like values."""
    args = ["run", "-d"]
    if req.name:
        args += ["--name", reject_option_like(req.name, "name")]
    args += _port_args(req.ports)
    args += _env_args(req.environment)
    args += _volume_args(req.volumes)
    if req.working_dir:
        args += ["-w", reject_option_like(req.working_dir, "working_dir")]
    if req.restart_policy:
        args += ["--restart", req.restart_policy]
    args.append(reject_option_like(req.image, "image"))
    if isinstance(req.command, str):
        try:
            args += shlex.split(req.command)
        except ValueError as e:
            raise BadRequestError(f"Invalid command: {e}") from e
    elif req.command:
        args += req.command
    return args


def _parse_log_output(output: str, stream: str) -> list[LogLine]:
    lines: list[LogLine] = []
    for raw in output.splitlines():
        if not raw:
            continue
        timestamp, sep, message = raw.partition(" ")
        if sep and parse_docker_time(timestamp) is not None:
            lines.append(LogLine(timestamp=timestamp, stream=stream, log=message))
        else:
            lines.append(LogLine(timestamp=None, stream=stream, log=raw))
    return lines


def normalize_tail(tail: str | int | None) -> str:
    """Accept a non-negative integer or "all"."""
    if tail is None or tail == "":
        return DEFAULT_LOG_TAIL
    value = str(tail).strip().lower()
    if value == "all" or value.isdigit():
        return value
    raise BadRequestError("tail must be a non-negative integer or 'all'")


class ContainerService(CliTranslator):
    kind = "container"

    def list_containers(self, all: bool = False) -> list[ContainerRecord]:
        args = ["ps", "--format", JSON_FORMAT, "--no-trunc"]
        if all:
            args.append("-a")
        lines = parse_json_lines(self._output(args), ContainerLine, self.kind)
        return [to_container_record(line) for line in lines]

    def run_container(self, req: RunContainerRequest) -> str:
        """Create and start a container; returns its id."""
        output = self._output(build_run_args(req))
        container_id = output.strip().splitlines()[-1] if output.strip() else ""
        logger.info("Container created and started", extra={"container": container_id, "image": req.image})
        return container_id

    def start(self, container_id: str) -> None:
        self._output(["start", reject_option_like(container_id, "container id")], container_id)

    def stop(self, container_id: str) -> None:
        self._output(["stop", reject_option_like(container_id, "container id")], container_id)

    def restart(self, container_id: str) -> None:
        self._output(["restart", reject_option_like(container_id, "container id")], container_id)

    def remove(self, container_id: str, force: bool = False) -> None:
        args = ["rm", "-f"] if force else ["rm"]
        self._output([*args, reject_option_like(container_id, "container id")], container_id)

    def stats(self, container_id: str) -> ContainerStats:
        reject_option_like(container_id, "container id")
        output = self._output(["stats", "--no-stream", "--format", JSON_FORMAT, container_id], container_id)
        lines = parse_json_lines(output, StatsLine, "stats")
        if not lines:
            return ContainerStats(id=container_id)
        return to_container_stats(container_id, lines[0])

    def logs(self, container_id: str, tail: str | int | None = None) -> list[LogLine]:
        """Recent log lines; stdout and stderr are tagged by stream and merged by timestamp."""
        reject_option_like(container_id, "container id")
        result = self._run(
            ["logs", "--timestamps", "--tail", normalize_tail(tail), container_id], container_id
        )
        merged = _parse_log_output(result.stdout, "stdout") + _parse_log_output(result.stderr, "stderr")
        merged.sort(key=lambda entry: entry.timestamp or "")
        return merged

    def inspect(self, container_id: str) -> dict[str, Any]:
        reject_option_like(container_id, "container id")
        output = self._output(["container", "inspect", container_id], container_id)
        return parse_json_document(output, self.kind, container_id)
