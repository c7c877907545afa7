"""Tests for ContainerService using a scripted executor."""

import json
import unittest

from dockmaster.core.errors import BadRequestError, NotFoundError
from dockmaster.services.executor import CommandError
from dockmaster.schemas.containers import PortMapping, RunContainerRequest, VolumeMapping
from dockmaster.services.containers import ContainerService, build_run_args
from tests.fakes import FakeExecutor, no_such

PS_LINE = {
    "ID": "f3a1c2",
    "Names": "web,web-alias",
    "Image": "nginx:latest",
    "Command": '"/docker-entrypoint.sh nginx"',
    "CreatedAt": "2024-01-15 10:30:00 +0000 UTC",
    "Ports": "0.0.0.0:8080->80/tcp",
    "Labels": "com.example.team=web",
    "State": "running",
    "Status": "Up 2 hours",
    "Mounts": "data",
    "Size": "0B",
}


class TestListContainers(unittest.TestCase):
    """`docker ps` lines become Docker-API style records."""

    def setUp(self) -> None:
        self.executor = FakeExecutor()
        self.service = ContainerService(self.executor)

    def test_running_only_by_default(self) -> None:
        self.executor.on("ps", stdout=json.dumps(PS_LINE) + "\n")
        records = self.service.list_containers()
        self.assertEqual(self.executor.calls, [["ps", "--format", "{{json .}}", "--no-trunc"]])
        record = records[0]
        self.assertEqual(record.names, ["web", "web-alias"])
        self.assertEqual(record.created, 1705314600)
        self.assertEqual(record.ports[0].public_port, 8080)
        self.assertEqual(record.labels, {"com.example.team": "web"})
        self.assertEqual(record.command, "/docker-entrypoint.sh nginx")

    def test_all_adds_flag_and_keys_are_docker_style(self) -> None:
        self.executor.on("ps", stdout=json.dumps(PS_LINE) + "\nnot json\n")
        records = self.service.list_containers(all=True)
        self.assertIn("-a", self.executor.calls[0])
        dumped = records[0].model_dump(by_alias=True)
        for key in ("Id", "Names", "Image", "State", "Status", "Ports", "Created"):
            self.assertIn(key, dumped)
        self.assertEqual(dumped["Ports"][0]["PrivatePort"], 80)
        self.assertEqual(len(records), 1)


class TestBuildRunArgs(unittest.TestCase):
    """`run -d` argv from both request shapes the dashboard sends."""

    def test_map_and_list_forms(self) -> None:
        req = RunContainerRequest(
            image="nginx:latest",
            name="web",
            ports={"8888": "80"},
            environment=["MODE=prod"],
            volumes=["data:/var/lib/data:ro"],
            working_dir="/srv",
            restart_policy="unless-stopped",
            command=["nginx", "-g", "daemon off;"],
        )
        self.assertEqual(
            build_run_args(req),
            [
                "run", "-d", "--name", "web", "-p", "8888:80", "-e", "MODE=prod",
                "-v", "data:/var/lib/data:ro", "-w", "/srv", "--restart", "unless-stopped",
                "nginx:latest", "nginx", "-g", "daemon off;",
            ],
        )

    def test_structured_form(self) -> None:
        req = RunContainerRequest(
            image="redis",
            ports=[PortMapping(host_port="5353", container_port="53", protocol="udp")],
            environment={"A": "1"},
            volumes=[VolumeMapping(host_path="/host", container_path="/data", read_only=True)],
        )
        self.assertEqual(
            build_run_args(req),
            ["run", "-d", "-p", "5353:53/udp", "-e", "A=1", "-v", "/host:/data:ro", "redis"],
        )

    def test_string_command_keeps_quoted_arguments(self) -> None:
        req = RunContainerRequest(image="busybox", command='sh -c "echo hi && sleep 5"')
        self.assertEqual(
            build_run_args(req),
            ["run", "-d", "busybox", "sh", "-c", "echo hi && sleep 5"],
        )

    def test_unbalanced_quotes_are_rejected(self) -> None:
        with self.assertRaises(BadRequestError):
            build_run_args(RunContainerRequest(image="busybox", command='sh -c "echo hi'))

    def test_option_like_values_are_rejected(self) -> None:
        for req in (
            RunContainerRequest(image="--privileged"),
            RunContainerRequest(image="nginx", name="--rm"),
            RunContainerRequest(image="nginx", ports={"8080": "80;rm"}),
            RunContainerRequest(image="nginx", environment=["-bad=1"]),
        ):
            with self.assertRaises(BadRequestError):
                build_run_args(req)


class TestContainerLifecycle(unittest.TestCase):
    def setUp(self) -> None:
        self.executor = FakeExecutor()
        self.service = ContainerService(self.executor)

    def test_run_returns_id(self) -> None:
        self.executor.on("run", stdout="abc123\n")
        self.assertEqual(self.service.run_container(RunContainerRequest(image="nginx")), "abc123")

    def test_remove_with_and_without_force(self) -> None:
        self.service.remove("abc")
        self.service.remove("abc", force=True)
        self.assertEqual(self.executor.calls, [["rm", "abc"], ["rm", "-f", "abc"]])

    def test_missing_container_is_not_found(self) -> None:
        self.executor.on("stop", error=no_such("container", "ghost", ["stop", "ghost"]))
        with self.assertRaises(NotFoundError) as ctx:
            self.service.stop("ghost")
        self.assertIn("No such container", ctx.exception.message)

    def test_start_failure_of_existing_container_keeps_stderr(self) -> None:
        stderr = (
            "Error response from daemon: failed to create task for container: OCI runtime create failed: "
            'unable to start container process: exec: "nginxx": executable file not found in $PATH: unknown'
        )
        self.executor.on("start", error=CommandError(["docker", "start", "web"], "exit status 1", stderr))
        with self.assertRaises(CommandError) as ctx:
            self.service.start("web")
        self.assertNotIsInstance(ctx.exception, NotFoundError)
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.message, stderr)

    def test_option_like_id_never_reaches_cli(self) -> None:
        with self.assertRaises(BadRequestError):
            self.service.start("--help")
        self.assertEqual(self.executor.calls, [])


class TestStatsAndLogs(unittest.TestCase):
    def setUp(self) -> None:
        self.executor = FakeExecutor()
        self.service = ContainerService(self.executor)

    def test_stats_are_converted_to_bytes(self) -> None:
        line = {
            "ID": "abc",
            "Name": "web",
            "CPUPerc": "1.50%",
            "MemUsage": "10MiB / 1GiB",
            "MemPerc": "0.98%",
            "NetIO": "1.2kB / 648B",
            "BlockIO": "0B / 4.1MB",
            "PIDs": "5",
        }
        self.executor.on("stats", stdout=json.dumps(line) + "\n")
        stats = self.service.stats("abc")
        self.assertEqual(stats.cpu_perc, 1.5)
        self.assertEqual(stats.mem_usage, 10 * 1024 * 1024)
        self.assertEqual(stats.mem_limit, 1024**3)
        self.assertEqual((stats.net_rx, stats.net_tx), (1200, 648))
        self.assertEqual((stats.block_read, stats.block_write), (0, 4_100_000))
        self.assertEqual(stats.pids, 5)
        dumped = stats.model_dump(by_alias=True)
        self.assertIn("cpuPerc", dumped)
        self.assertIn("memLimit", dumped)

    def test_logs_tag_streams_and_merge_by_time(self) -> None:
        self.executor.on(
            "logs",
            stdout="2024-01-15T10:30:00.000000001Z started\n2024-01-15T10:30:02.000000000Z ready\n",
            stderr="2024-01-15T10:30:01.000000000Z warning: slow disk\n",
        )
        lines = self.service.logs("abc", "50")
        self.assertEqual(self.executor.calls[0], ["logs", "--timestamps", "--tail", "50", "abc"])
        self.assertEqual([(l.stream, l.log) for l in lines], [
            ("stdout", "started"),
            ("stderr", "warning: slow disk"),
            ("stdout", "ready"),
        ])

    def test_tail_defaults_and_validation(self) -> None:
        self.service.logs("abc")
        self.service.logs("abc", "all")
        self.assertEqual(self.executor.calls[0][3], "100")
        self.assertEqual(self.executor.calls[1][3], "all")
        for bad in ("-5", "ten", "1.5"):
            with self.assertRaises(BadRequestError):
                self.service.logs("abc", bad)
