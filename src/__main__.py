#!/usr/bin/env python3
"""
lineview - Menu document interpreter

Reads a plain-text menu document, follows its import/source/lines includes,
and renders the resulting list of selectable lines. A line can carry a
command template; selecting it runs prefix + line text + suffix.

Document format:
    plain line          selectable text
    ## text             text starting with a single '#'
    # comment           dropped
    #-keyword payload   directive (pre, suf, clean, title, subtitle, import,
                        source, lines, warning, text, empty, comment, close,
                        end, ignore-warnings, ignore-text, watch, then, else,
                        display-warnings, debug)

Usage:
    lineview inputdir/ outputdir/ --inputFile menu.txt

    The rendered listing is printed and written to outputdir/lines.txt.

Examples:
    # Render once
    lineview . out/ --inputFile menu.txt

    # Run the command attached to line 3
    lineview . out/ --inputFile menu.txt --execute 3

    # Re-render whenever one of the document files changes
    lineview . out/ --inputFile menu.txt --watch -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .lib import LineView, CommandExecutor, SourceWatcher, view_render, __version__, LOG, state_connectToLogger
from .config import appsettings
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
  _ _
 | (_)_ __   _____   _(_) _____      __
 | | | '_ \ / _ \ \ / / |/ _ \ \ /\ / /
 | | | | | |  __/\ V /| |  __/\ V  V /
 |_|_|_| |_|\___| \_/ |_|\___| \_/\_/

  Menu document interpreter
"""

# Define CLI arguments
parser = ArgumentParser(
    description="lineview - render menu documents into selectable command lines",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Menu document (relative to inputdir)"
)

parser.add_argument(
    "--execute",
    default=None,
    type=int,
    help="Index of a rendered line whose command should be run",
)

parser.add_argument(
    "--watch",
    action="store_true",
    default=False,
    help="Keep running and re-render whenever a document file changes",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the menu document
            - linesOutputFile: Path of the rendered listing
            - envOK: True if environment is valid

    Exits:
        1 if the menu document is not found
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    state.linesOutputFile = state.outputdir / appsettings.output_file
    LOG(f"Output file: {state.linesOutputFile}", level=2)

    state.envOK = True
    return state


def document_read(inputstate: ProgramState) -> ProgramState:
    """
    Interpret the menu document.

    Args:
        inputstate: Program state with inputSourceFile set

    Returns:
        ProgramState with added field:
            - lineView: LineView of the document

    Exits:
        1 if the root document cannot be read
    """
    state = inputstate.copy()

    LOG("Reading menu document...", level=1)
    try:
        state.lineView = LineView.read(state.inputSourceFile)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Read {len(state.lineView)} lines from {len(state.lineView.all_sources())} files", level=2)
    return state


def lines_render(inputstate: ProgramState) -> ProgramState:
    """
    Render the interpreted document to stdout and to the output directory.

    Returns:
        ProgramState with added field:
            - renderedOutput: Numbered plain-text listing
    """
    state = inputstate.copy()

    if state.lineView is None:
        print("Error: No document available", file=sys.stderr)
        sys.exit(1)

    state.renderedOutput = view_render(state.lineView, numbered=True)
    print(state.renderedOutput, end="")

    state.linesOutputFile.write_text(state.renderedOutput, encoding="utf-8")
    LOG(f"Wrote {state.linesOutputFile}", level=2)
    return state


def command_execute(inputstate: ProgramState) -> ProgramState:
    """
    Run the command of the line selected with --execute, if any.

    Returns:
        ProgramState with added field:
            - executeResult: Dict containing:
                - index: int (selected line)
                - args: List[str] (spawned command, empty if none)
                - pid: Optional[int]

    Exits:
        1 if the index is out of range or the command cannot be spawned
    """
    state = inputstate.copy()
    if state.execute is None:
        return state

    line = state.lineView.get(state.execute)
    if line is None:
        print(f"Error: No line with index {state.execute}", file=sys.stderr)
        sys.exit(1)

    resolved = line.command_resolve()
    if resolved is None:
        LOG(f"Line {state.execute} has no command", level=1)
        state.executeResult = {"index": state.execute, "args": [], "pid": None}
        return state

    try:
        process = CommandExecutor().execute(resolved)
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    state.executeResult = {
        "index": state.execute,
        "args": list(resolved.args),
        "pid": process.pid if process else None,
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display a summary of the run.

    Returns:
        ProgramState unchanged (terminal pipeline stage)
    """
    state: ProgramState = inputstate.copy()
    if state.lineView is None:
        print("Error: Interpretation failed", file=sys.stderr)
        sys.exit(1)

    LOG(f"✓ {state.lineView.title}", level=1)
    LOG(f"  Lines: {len(state.lineView)}", level=1)
    LOG(f"  Output: {state.linesOutputFile}", level=1)
    if state.executeResult and state.executeResult["args"]:
        LOG(f"  Executed: {' '.join(state.executeResult['args'])}", level=1)
    return state


def watch_loop(inputstate: ProgramState) -> ProgramState:
    """
    Re-read and re-render each time one of the document files changes.

    Runs until interrupted. A failed rebuild keeps the previous output and
    the previous set of watched files.
    """
    state = inputstate.copy()
    watcher = SourceWatcher(state.lineView.all_sources())
    LOG("Watching for changes (Ctrl-C to stop)...", level=1)

    try:
        while True:
            watcher.wait()
            try:
                state.lineView = state.lineView.reload()
            except OSError as e:
                print(f"Error reading input file: {e}", file=sys.stderr)
                watcher.rearm(list(watcher.stamps))
                continue
            state = lines_render(state)
            watcher.rearm(state.lineView.all_sources())
    except KeyboardInterrupt:
        LOG("Stopped watching", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="lineview - Menu document interpreter",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - interpret a menu document and render its lines.

    Orchestrates the pipeline:
        1. env_check: Validate paths and environment
        2. document_read: Interpret the document into a LineView
        3. lines_render: Print and write the numbered listing
        4. command_execute: Run the selected line's command (--execute)
        5. results_report: Display a summary
        6. watch_loop: Keep re-rendering on change (--watch)

    Args:
        options: CLI arguments from argparse
            - inputFile: str - Menu document filename
            - execute: Optional[int] - Line index to run
            - watch: bool - Re-render on change
            - verbosity: int - Logging verbosity level (1-3)
        inputdir: Directory containing the menu document
        outputdir: Directory where the rendered listing will be written
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    stages = [env_check, document_read, lines_render, command_execute, results_report]
    if state.watch:
        stages.append(watch_loop)
    pipeline(state, *stages)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
