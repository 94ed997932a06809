from __future__ import annotations

import argparse
import asyncio
import shlex
import sys

from . import __version__
from .command.generic import GenericCommand
from .contracts.validate import validate
from .core.context import RunContext
from .core.executor import Executor, LineHandler
from .core.output import OutputLine
from .core.platform import PlatformInfo
from .core.serialize import dumps_json
from .doctor import MINIMUM_VERSION, check_prerequisites
from .errors import CommandFailed, DockwrapError, InvalidConfiguration
from .exit_codes import ERR_INTERNAL, ERR_PREREQ, ERR_USAGE, OK
from .logging import log_event


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="dockwrap")
    p.add_argument("--version", action="version", version=f"dockwrap {__version__}")
    p.add_argument("--json", action="store_true", help="emit JSON output")
    p.add_argument("--format", choices=["text", "json"], default=None, help="output format")
    p.add_argument("--config", help="YAML config file (defaults to $DOCKWRAP_CONFIG)")
    p.add_argument("--binary", help="program to invoke instead of the configured one")
    p.add_argument("--timeout", help="seconds before the child process is killed")
    p.add_argument("--run-id", help="identifier attached to log events")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="log executor events to stderr")
    vg.add_argument("--quiet", action="store_true", help="drop the child's stderr unless it fails")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version", help="print the dockwrap version")

    invoke_p = sub.add_parser("invoke", help="run one subcommand of the configured binary")
    invoke_p.add_argument("--env", action="append", default=[], metavar="KEY=VALUE", help="environment override for the child")
    invoke_p.add_argument("--flag", action="append", default=[], help="escape-hatch flag, prefixed with - or -- when bare")
    invoke_p.add_argument("--option", action="append", nargs=2, default=[], metavar=("NAME", "VALUE"), help="escape-hatch option")
    invoke_p.add_argument("--dry-run", action="store_true", help="print the assembled argv and exit")
    invoke_p.add_argument("--stream", action="store_true", help="print output lines as they arrive (text output only)")
    invoke_p.add_argument("subcommand")
    invoke_p.add_argument("args", nargs=argparse.REMAINDER)

    doctor_p = sub.add_parser("doctor", help="check the runtime binary, daemon and version")
    doctor_p.add_argument("--minimum-version", default=MINIMUM_VERSION)
    doctor_p.add_argument("--detect-runtime", action="store_true", help="probe docker/podman instead of using --binary")

    config_p = sub.add_parser("config", help="configuration commands")
    config_sub = config_p.add_subparsers(dest="config_cmd", required=True)
    config_sub.add_parser("dump", help="print the resolved configuration")
    return p


def _emit(payload: dict[str, object], as_json: bool) -> None:
    print(dumps_json(payload, pretty=not as_json))


def _error_payload(exc: DockwrapError) -> dict[str, object]:
    return validate(
        "dockwrap.error.v1",
        {
            "schema_name": "dockwrap.error.v1",
            "schema_version": 1,
            "tool": "dockwrap",
            "status": "error",
            "error": exc.to_payload(),
        },
    )


def _parse_env_pairs(pairs: list[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise InvalidConfiguration(f"--env expects KEY=VALUE, got `{pair}`")
        out[key] = value
    return out


def _echo_line(quiet: bool) -> LineHandler:
    def _echo(line: OutputLine) -> None:
        if line.is_stderr:
            if not quiet:
                print(line.text, file=sys.stderr, flush=True)
            return
        print(line.text, flush=True)

    return _echo


def _failure_status(exc: CommandFailed) -> int:
    # mirror the wrapped program's own status when it fits in an exit code
    return exc.exit_code if 0 < exc.exit_code < 256 else exc.code


def _run_invoke(ctx: RunContext, ns: argparse.Namespace) -> int:
    cmd = GenericCommand(ns.subcommand, list(ns.args), environment=ctx.environment)
    for key, value in _parse_env_pairs(ns.env).items():
        cmd.with_env(key, value)
    for name in ns.flag:
        cmd.add_flag(name)
    for name, value in ns.option:
        cmd.add_option(name, value)
    if ns.dry_run:
        cmd.validate()
        args = cmd.build_argument_list()
        argv = Executor(cmd.environment).build_argv(args[0], args[1:])
        if ctx.as_json:
            payload = {
                "schema_name": "dockwrap.output.v1",
                "schema_version": 1,
                "tool": "dockwrap",
                "status": "dry-run",
                "run_id": ctx.run_id,
                "argv": argv,
            }
            _emit(validate("dockwrap.output.v1", payload), True)
        else:
            print(shlex.join(argv))
        return OK
    if ns.stream and not ctx.as_json:
        try:
            cmd.execute_streaming_sync(_echo_line(ctx.quiet))
        except CommandFailed as exc:
            # stdout was already echoed line by line; stderr too unless quiet held it back
            if ctx.quiet:
                sys.stderr.write(exc.stderr)
            print(str(exc), file=sys.stderr)
            return _failure_status(exc)
        return OK
    output = cmd.execute_sync()
    if ctx.as_json:
        payload = {
            "schema_name": "dockwrap.output.v1",
            "schema_version": 1,
            "tool": "dockwrap",
            "status": "ok",
            "run_id": ctx.run_id,
            **output.to_payload(),
        }
        _emit(validate("dockwrap.output.v1", payload), True)
    else:
        sys.stdout.write(output.stdout)
        if not ctx.quiet:
            sys.stderr.write(output.stderr)
    return OK


def _run_doctor(ctx: RunContext, ns: argparse.Namespace) -> int:
    environment = ctx.environment
    runtime: str | None = None
    if ns.detect_runtime:
        info = PlatformInfo.detect()
        environment = info.to_environment(environment)
        runtime = info.runtime.value
    report = asyncio.run(check_prerequisites(environment, ns.minimum_version))
    payload = {
        "schema_name": "dockwrap.doctor.v1",
        "schema_version": 1,
        "tool": "dockwrap",
        "status": "ok" if report.ok else "error",
        "runtime": runtime,
        **report.to_payload(),
    }
    _emit(validate("dockwrap.doctor.v1", payload), ctx.as_json)
    return OK if report.ok else ERR_PREREQ


def _report_error(exc: DockwrapError, as_json: bool) -> None:
    if isinstance(exc, CommandFailed) and not as_json:
        sys.stdout.write(exc.stdout)
        sys.stderr.write(exc.stderr)
    if as_json:
        print(dumps_json(_error_payload(exc)), file=sys.stderr)
    else:
        print(str(exc), file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    ns = p.parse_args(argv)
    as_json = ns.json or ns.format == "json"
    try:
        ctx = RunContext.from_args(
            ns.run_id,
            ns.config,
            ns.binary,
            ns.timeout,
            "json" if as_json else "text",
            ns.verbose,
            ns.quiet,
        )
        if ctx.verbose:
            log_event("info", "cli", "start", ctx.run_id, json_output=ctx.config.log_json, cmd=ns.cmd, fmt=ctx.output_format)
        if ns.cmd == "version":
            _emit({"schema_version": 1, "tool": "dockwrap", "version": __version__, "run_id": ctx.run_id}, as_json)
            return OK
        if ns.cmd == "invoke":
            return _run_invoke(ctx, ns)
        if ns.cmd == "doctor":
            return _run_doctor(ctx, ns)
        if ns.cmd == "config" and ns.config_cmd == "dump":
            _emit({**ctx.config.to_payload(), "source": ctx.config.source}, as_json)
            return OK
        return ERR_USAGE
    except CommandFailed as exc:
        _report_error(exc, as_json)
        return _failure_status(exc)
    except DockwrapError as exc:
        _report_error(exc, as_json)
        return exc.code
    except Exception as exc:  # pragma: no cover
        if as_json:
            print(
                dumps_json(
                    {
                        "schema_version": 1,
                        "tool": "dockwrap",
                        "status": "error",
                        "error": {"message": f"internal error: {exc}", "code": ERR_INTERNAL},
                    }
                ),
                file=sys.stderr,
            )
        else:
            print(f"internal error: {exc}", file=sys.stderr)
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
