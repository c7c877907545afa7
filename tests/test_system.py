"""Tests for SystemService.info."""

import json
import unittest

from dockmaster.core.errors import InternalError
from dockmaster.services.executor import CommandError
from dockmaster.services.system import SystemService
from tests.fakes import FakeExecutor

INFO = {
    "Containers": 5,
    "ContainersRunning": 2,
    "ContainersPaused": 1,
    "ContainersStopped": 2,
    "Images": 7,
    "MemTotal": 8_000_000_000,
    "NCPU": 4,
    "OSType": "linux",
    "Architecture": "x86_64",
}
VERSION = {"Client": {"Version": "24.0.7"}, "Server": {"Version": "24.0.7", "ApiVersion": "1.43", "GoVersion": "go1.20.10"}}


class TestSystemInfo(unittest.TestCase):
    """Counts and host summary from `system info`; version is best effort."""

    def test_full_info(self) -> None:
        executor = FakeExecutor()
        executor.on("system", "info", stdout=json.dumps(INFO))
        executor.on("version", stdout=json.dumps(VERSION))
        info = SystemService(executor).info()
        self.assertEqual(info.containers.model_dump(), {"total": 5, "running": 2, "paused": 1, "stopped": 2})
        self.assertEqual(info.images, 7)
        self.assertEqual(info.version.api_version, "1.43")
        dumped = info.model_dump(by_alias=True)
        self.assertEqual(dumped["system"], {"totalMemory": 8_000_000_000, "cpus": 4, "osType": "linux", "architecture": "x86_64"})
        self.assertEqual(dumped["version"]["goVersion"], "go1.20.10")

    def test_version_failure_gives_null_version(self) -> None:
        executor = FakeExecutor()
        executor.on("system", "info", stdout=json.dumps(INFO))
        executor.on("version", error=CommandError(["docker", "version"], "exit status 1", "Cannot connect"))
        self.assertIsNone(SystemService(executor).info().version)

    def test_unparseable_info(self) -> None:
        executor = FakeExecutor()
        executor.on("system", "info", stdout="not json")
        with self.assertRaises(InternalError):
            SystemService(executor).info()
