"""
Shared command templates and command execution

CommandCell is the handle contexts share: `pre`/`suf` directives update the
cell in place so every context holding it sees the change, while `clean`
gives a context a brand-new cell and leaves the old one to whoever still
holds it. Lines never hold a cell, only the immutable CommandTemplate the
cell contained when the line was emitted.

CommandExecutor is the process-spawning collaborator. The interpreter never
calls it; the presentation layer (here, the CLI) does when a line is chosen.
"""

import os
import subprocess
from typing import Dict, Optional

from ..models.line import CommandTemplate, EMPTY_TEMPLATE, ResolvedCommand
from .log import LOG


class CommandCell:
    """
    Mutable, shareable holder of a CommandTemplate

    Attributes:
        template: Current template value
    """

    def __init__(self, template: CommandTemplate = EMPTY_TEMPLATE) -> None:
        self.template = template

    def prefix_append(self, arg: str) -> None:
        self.template = self.template.prefix_append(arg)

    def suffix_append(self, arg: str) -> None:
        self.template = self.template.suffix_append(arg)

    def snapshot(self) -> CommandTemplate:
        """Template value to store on an emitted line"""
        return self.template

    def __repr__(self) -> str:
        return f"CommandCell(prefix={list(self.template.prefix)}, suffix={list(self.template.suffix)})"


class CommandExecutor:
    """
    Spawns the process for a resolved line command

    The child gets two extra environment variables telling it which line
    was selected and where it came from. The executor does not wait for the
    child to finish.
    """

    def __init__(self, env: Optional[Dict[str, str]] = None) -> None:
        """
        Args:
            env: Base environment for children (defaults to os.environ)
        """
        self.env = env

    def environment_build(self, resolved: ResolvedCommand) -> Dict[str, str]:
        """Child environment: base environment plus the line metadata"""
        from ..config import appsettings

        env = dict(os.environ if self.env is None else self.env)
        env[appsettings.line_nr_env] = str(resolved.line_number)
        env[appsettings.line_src_env] = str(resolved.source)
        return env

    def execute(self, resolved: Optional[ResolvedCommand]) -> Optional[subprocess.Popen]:
        """
        Spawn the command

        Args:
            resolved: Command built by Line.command_resolve(); None is a no-op

        Returns:
            The spawned process, or None when there was nothing to run

        Raises:
            RuntimeError: If the program could not be started
        """
        if resolved is None or not resolved.args:
            return None

        LOG(f"Spawning {' '.join(resolved.args)}", level=2)
        try:
            return subprocess.Popen(list(resolved.args), env=self.environment_build(resolved))
        except OSError as exc:
            raise RuntimeError(
                f"could not spawn {resolved.program} with args {list(resolved.args[1:])}: {exc}"
            ) from exc
