"""Subprocess helpers for :mod:`pdfpipe.tools.compressor`."""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Sequence

from ...core.exceptions import ExternalToolError

_LOGGER = logging.getLogger("pdfpipe.compress")

# qpdf exits with 3 when the output was written but warnings were issued.
QPDF_WARNING_EXIT_CODE = 3


def which(executables: Sequence[str]) -> str | None:
    """Return the first executable from *executables* found on ``PATH``."""

    for candidate in executables:
        found = shutil.which(candidate)
        if found:
            _LOGGER.debug("Detected external tool: %s -> %s", candidate, found)
            return found
    return None


def run_subprocess(
    command: Sequence[str],
    *,
    timeout: float | None = None,
    accepted_codes: Sequence[int] = (0,),
) -> subprocess.CompletedProcess[str]:
    """Run *command* capturing output.

    Parameters
    ----------
    command:
        Command and arguments to execute.
    timeout:
        Seconds to wait before giving up, or ``None`` to wait indefinitely.
    accepted_codes:
        Exit codes treated as success.

    Raises
    ------
    ExternalToolError
        If the executable cannot be started, times out or exits with a code
        outside *accepted_codes*.
    """

    _LOGGER.debug("Executing command: %s", " ".join(command))
    try:
        completed = subprocess.run(
            list(command),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        _LOGGER.error("Command timed out after %ss: %s", timeout, command[0])
        raise ExternalToolError(
            f"{command[0]} did not finish within {timeout} seconds", command=command
        ) from exc
    except OSError as exc:
        _LOGGER.error("Failed to execute %s: %s", command[0], exc)
        raise ExternalToolError(f"Failed to execute {command[0]}: {exc}", command=command) from exc

    _LOGGER.debug(
        "Command finished with exit code %s\nstdout: %s\nstderr: %s",
        completed.returncode,
        completed.stdout,
        completed.stderr,
    )
    if completed.returncode not in accepted_codes:
        stderr = (completed.stderr or "").strip()
        _LOGGER.error("%s failed with code %s: %s", command[0], completed.returncode, stderr)
        raise ExternalToolError(
            f"{command[0]} failed with exit code {completed.returncode}: {stderr or 'no output'}",
            command=command,
            returncode=completed.returncode,
            stderr=stderr,
        )
    return completed


__all__ = ["QPDF_WARNING_EXIT_CODE", "which", "run_subprocess"]
