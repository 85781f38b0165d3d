from asyncio import create_subprocess_exec

import logging
import shutil
from functools import cache
from pathlib import Path
from subprocess import DEVNULL, PIPE

from storyverify.exceptions import GitError

logger = logging.getLogger(__name__)


@cache
def get_bin(name: str) -> str:
    abspath = shutil.which(name)
    if abspath is None:
        raise GitError(f'{name} executable not found')
    return abspath


def pluralize(word: str, count: int, plural: str | None = None) -> str:
    if count == 1:
        return f'{count} {word}'
    return f'{count} {plural or word + "s"}'


async def async_check_output(*args: str | Path, cwd: Path | str | None = None) -> str:
    logger.debug(f'Running {args}')
    p = await create_subprocess_exec(
        *args, cwd=cwd, stdin=DEVNULL, stdout=PIPE, stderr=PIPE
    )
    stdout, stderr = await p.communicate()
    if p.returncode:
        logger.error(f'Process exited with code {p.returncode}')
        raise GitError(
            stderr.decode().strip() or f'{args[0]} exited with code {p.returncode}'
        )
    return stdout.decode()
