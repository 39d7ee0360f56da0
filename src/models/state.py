"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable, TYPE_CHECKING
from dataclasses import dataclass, field

# Forward reference for type hint - avoid circular import
if TYPE_CHECKING:
    from ..lib.interpreter import LineView


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the CLI pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, execute, watch
        - env_check: inputSourceFile, linesOutputFile, envOK
        - document_read: lineView
        - lines_render: renderedOutput
        - command_execute: executeResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the menu document
        outputdir: Directory where the rendered listing is written
        verbosity: Logging verbosity level (1-3)
        inputFile: Menu document filename (relative to inputdir)
        execute: Optional index of a line whose command should be run
        watch: Keep re-rendering whenever a document file changes
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the menu document
        linesOutputFile: Path of the rendered listing
        lineView: Interpreted document
        renderedOutput: Plain-text rendering of lineView
        executeResult: Summary of the executed command, if any
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    execute: Optional[int] = field(default=None)
    watch: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    linesOutputFile: Path = field(default=Path("/"))
    lineView: Optional[Any] = field(default=None)  # LineView at runtime
    renderedOutput: str = field(default="")
    executeResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Merges CLI options with explicitly provided directories to create
        the initial program state for the pipeline.

        Args:
            options: Parsed CLI arguments (inputFile, execute, etc.)
            inputdir: Directory containing the document
            outputdir: Directory for the rendered output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Only keep options that exist in ProgramState
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}

        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            document_read,
            lines_render,
            results_report
        )
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
