"""Send pipe messages to running sidebar instances through the multiplexer CLI."""

import logging
import shutil
import subprocess
from typing import Dict, List

from ..config.constants import MULTIPLEXER_BINARY
from ..exceptions import PipeSendError

logger = logging.getLogger(__name__)


def build_pipe_command(name: str, args: Dict[str, str]) -> List[str]:
    """Command line for ``zellij pipe --name <name> --args k=v,...``."""
    cmd = [MULTIPLEXER_BINARY, "pipe", "--name", name]
    if args:
        cmd += ["--args", ",".join(f"{key}={value}" for key, value in args.items())]
    return cmd


def send_pipe(name: str, args: Dict[str, str], timeout: float = 5.0) -> None:
    """Deliver a pipe message to every listening sidebar instance.

    Raises:
        PipeSendError: if the multiplexer is missing or rejects the message
    """
    if shutil.which(MULTIPLEXER_BINARY) is None:
        raise PipeSendError("Multiplexer CLI not found on PATH", binary=MULTIPLEXER_BINARY)

    cmd = build_pipe_command(name, args)
    logger.debug("Running %s", cmd)
    try:
        subprocess.run(cmd, capture_output=True, text=True, check=True, timeout=timeout)
    except subprocess.CalledProcessError as e:
        raise PipeSendError("Pipe message rejected", name=name, stderr=(e.stderr or "").strip()) from e
    except (subprocess.TimeoutExpired, OSError) as e:
        raise PipeSendError("Pipe message not delivered", name=name) from e
