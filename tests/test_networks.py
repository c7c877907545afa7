"""Tests for NetworkService."""

import json
import unittest

from dockmaster.schemas.networks import CreateNetworkRequest, IPAMConfig, IPAMSubnet
from dockmaster.services.networks import NetworkService, build_create_args
from tests.fakes import FakeExecutor


class TestListNetworks(unittest.TestCase):
    def test_flags_become_booleans(self) -> None:
        executor = FakeExecutor()
        line = {
            "ID": "9f2e",
            "Name": "backend",
            "Driver": "bridge",
            "Scope": "local",
            "CreatedAt": "2024-01-15 10:30:00.123456789 +0000 UTC",
            "IPv6": "true",
            "Internal": "false",
            "Labels": "",
        }
        executor.on("network", "ls", stdout=json.dumps(line) + "\n")
        network = NetworkService(executor).list_networks()[0]
        self.assertTrue(network.enable_ipv6)
        self.assertFalse(network.internal)
        self.assertEqual(network.created, 1705314600)
        dumped = network.model_dump(by_alias=True)
        self.assertEqual(dumped["Id"], "9f2e")
        self.assertTrue(dumped["EnableIPv6"])


class TestCreateNetwork(unittest.TestCase):
    def test_argv_with_ipam(self) -> None:
        req = CreateNetworkRequest(
            name="backend",
            driver="bridge",
            options={"com.docker.network.bridge.enable_icc": "false"},
            labels={"team": "api"},
            internal=True,
            enable_ipv6=False,
            ipam=IPAMConfig(config=[IPAMSubnet(subnet="172.28.0.0/16", gateway="172.28.0.1")]),
        )
        self.assertEqual(
            build_create_args(req),
            [
                "network", "create", "--driver", "bridge",
                "--opt", "com.docker.network.bridge.enable_icc=false",
                "--label", "team=api", "--internal",
                "--subnet", "172.28.0.0/16", "--gateway", "172.28.0.1",
                "backend",
            ],
        )

    def test_create_returns_id_and_remove(self) -> None:
        executor = FakeExecutor()
        executor.on("network", "create", stdout="9f2e\n")
        service = NetworkService(executor)
        self.assertEqual(service.create(CreateNetworkRequest(name="backend")), "9f2e")
        service.remove("9f2e")
        self.assertEqual(executor.calls[-1], ["network", "rm", "9f2e"])
