from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from dockwrap.command import (
    AnsiMode,
    BuildCommand,
    ComposeConfig,
    ComposeDownCommand,
    ComposePsCommand,
    ComposeUpCommand,
    ExecCommand,
    GenericCommand,
    PortMapping,
    ProgressType,
    Protocol,
    PsCommand,
    PullCommand,
    RmCommand,
    RunCommand,
    StopCommand,
    VersionCommand,
)
from dockwrap.command.build import extract_image_id
from dockwrap.command.compose import parse_compose_ps_json
from dockwrap.command.ps import parse_ps_json_lines
from dockwrap.command.run import extract_container_id
from dockwrap.command.version import parse_version_json, parse_version_table
from dockwrap.core.environment import InvocationEnvironment
from dockwrap.core.output import CommandOutput
from dockwrap.errors import InvalidConfiguration

ENV = InvocationEnvironment(run_id="test-run")


def _out(stdout: str = "", stderr: str = "", exit_code: int = 0) -> CommandOutput:
    return CommandOutput(stdout=stdout, stderr=stderr, exit_code=exit_code)


@pytest.mark.unit
def test_bare_version_command_is_just_the_subcommand() -> None:
    assert VersionCommand(environment=ENV).build_argument_list() == ["version"]


@pytest.mark.unit
def test_build_with_tag_option_places_context_last() -> None:
    cmd = BuildCommand(context=".", environment=ENV).add_option("tag", "app:latest")
    assert cmd.build_argument_list() == ["build", "--tag", "app:latest", "."]


@pytest.mark.unit
def test_build_argument_list_is_repeatable() -> None:
    cmd = BuildCommand(context="ctx", tags=["a:1"], no_cache=True, environment=ENV).add_flag("pull")
    assert cmd.build_argument_list() == cmd.build_argument_list()
    assert cmd.build_argument_list() == ["build", "--tag", "a:1", "--no-cache", "--pull", "ctx"]


@pytest.mark.unit
def test_build_modeled_options_in_order() -> None:
    cmd = BuildCommand(
        context="ctx",
        tags=["a:1", "a:2"],
        file="Dockerfile.dev",
        build_args={"VERSION": "1.2"},
        target="runtime",
        labels={"team": "core"},
        quiet=True,
        environment=ENV,
    )
    assert cmd.build_argument_list() == [
        "build",
        "--tag",
        "a:1",
        "--tag",
        "a:2",
        "--file",
        "Dockerfile.dev",
        "--build-arg",
        "VERSION=1.2",
        "--target",
        "runtime",
        "--label",
        "team=core",
        "--quiet",
        "ctx",
    ]


@pytest.mark.unit
def test_raw_args_sit_between_modeled_options_and_operands() -> None:
    cmd = RunCommand(image="alpine", command=["echo", "hi"], rm=True, environment=ENV)
    cmd.add_flag("init").add_option("memory", "64m")
    assert cmd.build_argument_list() == ["run", "--rm", "--init", "--memory", "64m", "alpine", "echo", "hi"]


@pytest.mark.unit
def test_commands_own_their_raw_args() -> None:
    first = PsCommand(environment=ENV).add_flag("all")
    second = PsCommand(environment=ENV)
    assert second.build_argument_list() == ["ps"]
    assert first.build_argument_list() == ["ps", "--all"]


@pytest.mark.unit
def test_with_timeout_does_not_touch_shared_environment() -> None:
    cmd = VersionCommand(environment=ENV).with_timeout(5)
    assert cmd.environment.timeout_seconds == 5
    assert ENV.timeout_seconds is None


@pytest.mark.unit
def test_with_timeout_rejects_non_positive() -> None:
    with pytest.raises(InvalidConfiguration):
        VersionCommand(environment=ENV).with_timeout(0)


@pytest.mark.unit
def test_run_ports_env_and_detach() -> None:
    cmd = RunCommand(
        image="nginx",
        name="web",
        detach=True,
        env={"A": "1"},
        ports=[PortMapping(80, 8080), PortMapping(53, 5353, Protocol.UDP, "127.0.0.1"), PortMapping(9000)],
        environment=ENV,
    )
    assert cmd.build_argument_list() == [
        "run",
        "--name",
        "web",
        "--detach",
        "--env",
        "A=1",
        "--publish",
        "8080:80",
        "--publish",
        "127.0.0.1:5353:53/udp",
        "--publish",
        "9000",
        "nginx",
    ]


@pytest.mark.unit
def test_validation_rejects_missing_required_fields() -> None:
    with pytest.raises(InvalidConfiguration):
        RunCommand(image="", environment=ENV).validate()
    with pytest.raises(InvalidConfiguration):
        ExecCommand(container="c1", environment=ENV).validate()
    with pytest.raises(InvalidConfiguration):
        StopCommand(environment=ENV).validate()
    with pytest.raises(InvalidConfiguration):
        PullCommand(image="", environment=ENV).validate()
    with pytest.raises(InvalidConfiguration):
        GenericCommand("", environment=ENV).validate()


@pytest.mark.unit
def test_exec_stop_rm_pull_arguments() -> None:
    assert ExecCommand(container="c1", command=["ls", "-la"], tty=True, user="root", environment=ENV).build_argument_list() == [
        "exec",
        "--tty",
        "--user",
        "root",
        "c1",
        "ls",
        "-la",
    ]
    assert StopCommand(containers=["a", "b"], time=3, environment=ENV).build_argument_list() == ["stop", "--time", "3", "a", "b"]
    assert RmCommand(containers=["a"], force=True, volumes=True, environment=ENV).build_argument_list() == [
        "rm",
        "--force",
        "--volumes",
        "a",
    ]
    assert PullCommand(image="alpine:3", platform="linux/arm64", environment=ENV).build_argument_list() == [
        "pull",
        "--platform",
        "linux/arm64",
        "alpine:3",
    ]


@pytest.mark.unit
def test_generic_command_supports_plugin_subcommands() -> None:
    cmd = GenericCommand("scout", ["cves", "alpine"], environment=ENV).add_option("format", "sarif")
    assert cmd.build_argument_list() == ["scout", "--format", "sarif", "cves", "alpine"]


@pytest.mark.unit
def test_compose_global_options_precede_compose_subcommand() -> None:
    config = ComposeConfig(
        files=["a.yml", "b.yml"],
        project_name="demo",
        progress=ProgressType.PLAIN,
        ansi=AnsiMode.NEVER,
    )
    up = ComposeUpCommand(services=["web"], detach=True, scale={"web": 2}, config=config, environment=ENV)
    assert up.build_argument_list() == [
        "compose",
        "--file",
        "a.yml",
        "--file",
        "b.yml",
        "--project-name",
        "demo",
        "--progress",
        "plain",
        "--ansi",
        "never",
        "up",
        "--detach",
        "--scale",
        "web=2",
        "web",
    ]
    down = ComposeDownCommand(volumes=True, environment=ENV)
    assert down.build_argument_list() == ["compose", "down", "--volumes"]


@pytest.mark.unit
def test_extract_image_id_variants() -> None:
    assert extract_image_id("Step 1/2\nSuccessfully built abc123def456\n") == "abc123def456"
    assert extract_image_id("sha256:" + "a" * 64) == "sha256:" + "a" * 64
    assert extract_image_id("#8 writing image sha256:" + "b" * 64 + " done") == "sha256:" + "b" * 64
    assert extract_image_id("no id here") is None


@pytest.mark.unit
def test_build_parse_degrades_to_none() -> None:
    cmd = BuildCommand(environment=ENV)
    parsed = cmd.parse_output(_out("nothing useful"))
    assert parsed.image_id is None
    assert parsed.stdout == "nothing useful"
    assert parsed.success


@pytest.mark.unit
def test_quiet_build_reads_id_from_stdout() -> None:
    parsed = BuildCommand(quiet=True, environment=ENV).parse_output(_out("sha256:feed\n"))
    assert parsed.image_id == "sha256:feed"


@pytest.mark.unit
def test_container_id_only_for_detached_runs() -> None:
    cid = "0123456789ab" * 2
    assert extract_container_id(f"Pulling...\n{cid}\n") == cid
    assert extract_container_id("hello world") is None
    assert RunCommand(image="x", detach=True, environment=ENV).parse_output(_out(cid)).container_id == cid
    assert RunCommand(image="x", environment=ENV).parse_output(_out(cid)).container_id is None


@pytest.mark.unit
def test_pull_digest() -> None:
    stdout = "latest: Pulling from library/alpine\nDigest: sha256:abc\nStatus: Downloaded\n"
    assert PullCommand(image="alpine", environment=ENV).parse_output(_out(stdout)).digest == "sha256:abc"
    assert PullCommand(image="alpine", environment=ENV).parse_output(_out("")).digest is None


@pytest.mark.unit
def test_ps_json_lines_skip_garbage() -> None:
    stdout = '{"ID": "c1", "Image": "alpine", "Names": "one", "State": "running"}\nnot json\n{"Image": "no-id"}\n'
    rows = parse_ps_json_lines(stdout)
    assert [(r.id, r.image, r.names, r.state) for r in rows] == [("c1", "alpine", "one", "running")]
    parsed = PsCommand(format="json", environment=ENV).parse_output(_out(stdout))
    assert len(parsed.containers) == 1
    quiet = PsCommand(quiet=True, environment=ENV).parse_output(_out("c1\nc2\n"))
    assert [c.id for c in quiet.containers] == ["c1", "c2"]
    assert PsCommand(environment=ENV).parse_output(_out("CONTAINER ID ...")).containers == []


@pytest.mark.unit
def test_compose_ps_accepts_array_and_lines() -> None:
    as_array = '[{"ID": "a", "Name": "web-1", "State": "running"}]'
    as_lines = '{"ID": "a", "Name": "web-1"}\n{"ID": "b", "Name": "db-1"}'
    assert [c.names for c in parse_compose_ps_json(as_array)] == ["web-1"]
    assert [c.id for c in parse_compose_ps_json(as_lines)] == ["a", "b"]
    assert parse_compose_ps_json("") == []
    parsed = ComposePsCommand(format="json", environment=ENV).parse_output(_out(as_array))
    assert parsed.containers[0].state == "running"


@pytest.mark.unit
def test_version_json_and_table_parsing() -> None:
    payload = '{"Client": {"Version": "24.0.7", "ApiVersion": "1.43", "Os": "linux"}, "Server": {"Version": "24.0.7"}}'
    info = parse_version_json(payload)
    assert info is not None
    assert info.client.version == "24.0.7"
    assert info.client.api_version == "1.43"
    assert info.server is not None and info.server.version == "24.0.7"
    table = (
        "Client: Docker Engine - Community\n"
        " Version:           24.0.7\n"
        " API version:       1.43\n"
        "\n"
        "Server: Docker Engine - Community\n"
        " Engine:\n"
        "  Version:          24.0.6\n"
        " containerd:\n"
        "  Version:          1.6.24\n"
    )
    parsed = parse_version_table(table)
    assert parsed is not None
    assert parsed.client.version == "24.0.7"
    assert parsed.server is not None and parsed.server.version == "24.0.6"
    assert parse_version_json("not json") is None
    assert parse_version_table("") is None


@pytest.mark.unit
def test_version_custom_template_yields_no_info() -> None:
    parsed = VersionCommand(format="{{.Client.Version}}", environment=ENV).parse_output(_out("24.0.7\n"))
    assert parsed.version_info is None
    assert parsed.stdout == "24.0.7\n"


@pytest.mark.unit
@given(st.lists(st.from_regex(r"[a-z0-9._:/-]{1,20}", fullmatch=True), min_size=1, max_size=5))
def test_build_tags_are_emitted_in_order(tags: list[str]) -> None:
    args = BuildCommand(context=".", tags=tags, environment=ENV).build_argument_list()
    assert args[0] == "build"
    assert args[-1] == "."
    assert args[1:-1] == [item for tag in tags for item in ("--tag", tag)]
