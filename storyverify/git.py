import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path

from storyverify.exceptions import GitError
from storyverify.schemas import CommitInfo
from storyverify.utils import async_check_output, get_bin

logger = logging.getLogger(__name__)

SEPARATOR = ' ## '

CI_SERVICES = {
    'GITHUB_ACTIONS': 'github',
    'TRAVIS': 'travis',
    'GITLAB_CI': 'gitlab',
    'CIRCLECI': 'circleci',
    'GERRIT_PROJECT': 'gerrit',
}

# Checked in order when the working copy is on a detached HEAD
BRANCH_VARIABLES = ('GITHUB_HEAD_REF', 'GITHUB_REF_NAME', 'TRAVIS_BRANCH', 'GERRIT_BRANCH')


async def git(*args: str, cwd: Path | str | None = None) -> str:
    return (await async_check_output(get_bin('git'), *args, cwd=cwd)).strip()


async def get_version() -> str:
    output = await git('--version')
    match = re.search(r'\d+(\.\d+)+', output)
    if not match:
        raise GitError(f'Unexpected git version string: {output}')
    return match.group(0)


def detect_ci_service(environ: Mapping[str, str]) -> str | None:
    for variable, service in CI_SERVICES.items():
        if environ.get(variable):
            return service
    return None


async def get_commit_info(
    cwd: Path | str | None = None, environ: Mapping[str, str] | None = None
) -> CommitInfo:
    if environ is None:
        environ = os.environ

    log_line = await git(
        'log', '-n', '1', f'--format=%H{SEPARATOR}%ct{SEPARATOR}%ce{SEPARATOR}%cn', cwd=cwd
    )
    try:
        commit, committed_at, committer_email, committer_name = log_line.split(
            SEPARATOR, 3
        )
    except ValueError:
        raise GitError(f'Unexpected git log output: {log_line}')

    branch = await git('rev-parse', '--abbrev-ref', 'HEAD', cwd=cwd)
    if branch == 'HEAD':
        branch = next(
            (environ[var] for var in BRANCH_VARIABLES if environ.get(var)), branch
        )

    parents_line = await git('rev-list', '--parents', '-n', '1', 'HEAD', cwd=cwd)
    parent_commits = parents_line.split()[1:]

    ci_service = detect_ci_service(environ)
    info = CommitInfo(
        commit=commit,
        committed_at=int(committed_at) * 1000,
        committer_email=committer_email or None,
        committer_name=committer_name or None,
        branch=branch,
        parent_commits=parent_commits,
        from_ci=bool(environ.get('CI')) or ci_service is not None,
        ci_service=ci_service,
        slug=environ.get('GITHUB_REPOSITORY'),
        version=await get_version(),
    )
    logger.debug(f'Got commit info {info}')
    return info
