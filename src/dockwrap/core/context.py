from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Literal

from ..config.loader import DockwrapConfig, load_config, parse_timeout
from ..run_id import make_run_id
from .environment import InvocationEnvironment

OutputFormat = Literal["text", "json"]


@dataclass(frozen=True)
class RunContext:
    run_id: str
    output_format: OutputFormat
    verbose: bool
    quiet: bool
    config: DockwrapConfig
    environment: InvocationEnvironment

    @property
    def as_json(self) -> bool:
        return self.output_format == "json"

    @classmethod
    def from_args(
        cls,
        run_id: str | None,
        config_path: str | None,
        binary: str | None = None,
        timeout: str | None = None,
        output_format: OutputFormat = "text",
        verbose: bool = False,
        quiet: bool = False,
    ) -> RunContext:
        config = load_config(config_path)
        if binary:
            config = replace(config, binary=binary)
        if timeout is not None:
            config = replace(config, timeout_seconds=parse_timeout("--timeout", timeout))
        if verbose:
            config = replace(config, log_events=True)
        resolved_run_id = run_id or os.environ.get("DOCKWRAP_RUN_ID") or make_run_id()
        environment = replace(config.to_environment(), run_id=resolved_run_id)
        return cls(
            run_id=resolved_run_id,
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            config=config,
            environment=environment,
        )
