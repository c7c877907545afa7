"""Network operations via the runtime CLI."""

import logging
from typing import Any

from dockmaster.schemas.networks import CreateNetworkRequest, NetworkLine, NetworkRecord
from dockmaster.services.parsing import (
    parse_docker_time,
    parse_json_document,
    parse_json_lines,
    parse_labels,
    reject_option_like,
)
from dockmaster.services.translator import JSON_FORMAT, CliTranslator

logger = logging.getLogger(__name__)


def to_network_record(line: NetworkLine) -> NetworkRecord:
    return NetworkRecord(
        id=line.id,
        name=line.name,
        driver=line.driver,
        scope=line.scope,
        created=parse_docker_time(line.created_at),
        enable_ipv6=line.ipv6.strip().lower() == "true",
        internal=line.internal.strip().lower() == "true",
        labels=parse_labels(line.labels),
    )


def build_create_args(req: CreateNetworkRequest) -> list[str]:
    args = ["network", "create"]
    if req.driver:
        args += ["--driver", reject_option_like(req.driver, "driver")]
    for key, value in req.options.items():
        args += ["--opt", f"{reject_option_like(key, 'option')}={value}"]
    for key, value in req.labels.items():
        args += ["--label", f"{reject_option_like(key, 'label')}={value}"]
    if req.internal:
        args.append("--internal")
    if req.enable_ipv6:
        args.append("--ipv6")
    if req.ipam:
        if req.ipam.driver:
            args += ["--ipam-driver", reject_option_like(req.ipam.driver, "ipam driver")]
        for subnet in req.ipam.config:
            args += ["--subnet", reject_option_like(subnet.subnet, "subnet")]
            if subnet.gateway:
                args += ["--gateway", reject_option_like(subnet.gateway, "gateway")]
        for key, value in req.ipam.options.items():
            args += ["--ipam-opt", f"{reject_option_like(key, 'ipam option')}={value}"]
    args.append(reject_option_like(req.name, "name"))
    return args


class NetworkService(CliTranslator):
    kind = "network"

    def list_networks(self) -> list[NetworkRecord]:
        output = self._output(["network", "ls", "--format", JSON_FORMAT, "--no-trunc"])
        return [to_network_record(line) for line in parse_json_lines(output, NetworkLine, self.kind)]

    def create(self, req: CreateNetworkRequest) -> str:
        """Create a network; returns its id."""
        network_id = self._output(build_create_args(req)).strip()
        logger.info("Network created", extra={"network": req.name, "network_id": network_id})
        return network_id

    def inspect(self, network_id: str) -> dict[str, Any]:
        reject_option_like(network_id, "network id")
        output = self._output(["network", "inspect", network_id], network_id)
        return parse_json_document(output, self.kind, network_id)

    def remove(self, network_id: str) -> None:
        self._output(["network", "rm", reject_option_like(network_id, "network id")], network_id)
