"""
Plugin Verifier process execution.

Runs the verifier CLI in a child JVM and captures its combined output.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from verifierkit.core.exceptions import VerifierProcessError

logger = logging.getLogger(__name__)

VERIFIER_MAIN_CLASS = "com.jetbrains.pluginverifier.PluginVerifierMain"


@dataclass
class ProcessResult:
    """Exit status and combined stdout/stderr of a finished process."""

    exit_code: int
    output: str


def find_java_executable(java_home: Optional[Path] = None) -> str:
    """
    Locate the ``java`` launcher.

    Prefers ``<java_home>/bin/java``; falls back to ``java`` on PATH.

    Raises:
        VerifierProcessError: If no launcher can be found
    """
    executable = "java.exe" if os.name == "nt" else "java"

    if java_home is not None:
        candidate = Path(java_home) / "bin" / executable
        if candidate.is_file():
            return str(candidate)
        logger.debug(f"No java launcher in {java_home}, falling back to PATH")

    found = shutil.which("java")
    if found:
        return found

    raise VerifierProcessError("Cannot find a java executable to run the Plugin Verifier")


def build_command(
    java: str,
    classpath: Sequence[Path],
    args: Sequence[str],
    main_class: str = VERIFIER_MAIN_CLASS,
) -> List[str]:
    """Build the JVM command line for the verifier."""
    return [
        java,
        "-cp",
        os.pathsep.join(str(entry) for entry in classpath),
        main_class,
        *args,
    ]


def invoke_verifier(
    java: str,
    classpath: Sequence[Path],
    args: Sequence[str],
    main_class: str = VERIFIER_MAIN_CLASS,
) -> ProcessResult:
    """
    Run the verifier and wait for it to finish.

    Standard error is merged into standard output and the whole output is
    buffered, not streamed.

    Args:
        java: Path to the java launcher
        classpath: Classpath entries (the verifier-cli jar)
        args: Verifier CLI arguments
        main_class: Entry point class

    Returns:
        ProcessResult with exit code and combined output

    Raises:
        VerifierProcessError: If the process cannot be started
    """
    command = build_command(java, classpath, args, main_class)
    logger.debug(f"Running: {' '.join(command)}")

    try:
        completed = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as e:
        raise VerifierProcessError(f"Failed to start Plugin Verifier: {e}") from e

    return ProcessResult(exit_code=completed.returncode, output=completed.stdout or "")


__all__ = [
    "VERIFIER_MAIN_CLASS",
    "ProcessResult",
    "find_java_executable",
    "build_command",
    "invoke_verifier",
]
