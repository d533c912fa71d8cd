from __future__ import annotations

import os
from dataclasses import dataclass

import typer

from chartpub.core.config import ConfigOverrides, ReleaseConfig, load_release_config
from chartpub.core.errors import ErrorCode
from chartpub.core.result import Err
from chartpub.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: ReleaseConfig
    console: ConsoleProtocol


def build_context(overrides: ConfigOverrides) -> CLIContext:
    config_result = load_release_config(os.environ, overrides)
    if isinstance(config_result, Err):
        console = RichConsole()
        console.error(config_result.error.message)
        if config_result.error.hint:
            console.print(f"hint: {config_result.error.hint}")
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    config = config_result.value
    return CLIContext(config=config, console=RichConsole(verbose=config.verbose))
