import asyncio
import logging
import os
import sys

import httpx

from storyverify.client import ApiClient
from storyverify.config import Config, config
from storyverify.const import EXIT_API_ERROR, EXIT_GIT_ERROR, EXIT_OK, EXIT_VERIFY_FAILED
from storyverify.context import Context
from storyverify.discovery import StoryIndexSpecProvider
from storyverify.exceptions import (
    ApiError,
    ConfigurationError,
    DiscoveryError,
    GitError,
    VerifyError,
)
from storyverify.git import get_commit_info
from storyverify.package import get_package_info, get_storybook_info, load_package_json
from storyverify.tasks import VerifyTask

logger = logging.getLogger(__name__)


async def build_context(config: Config) -> Context:
    if not config.storybook_url:
        raise ConfigurationError('storybook_url must be set')
    package_json = load_package_json(config.package_json)
    return Context(
        options=config.options,
        git=await get_commit_info(),
        pkg=get_package_info(package_json),
        storybook=get_storybook_info(package_json),
        isolator_url=config.storybook_url,
        cached_url=config.cached_url,
        environment_whitelist=config.environment_whitelist,
    )


def log_runtime_output(ctx: Context):
    for line in ctx.runtime_errors:
        logger.error(f'Runtime error: {line}')
    for line in ctx.runtime_warnings:
        logger.warning(f'Runtime warning: {line}')


async def verify(config: Config) -> int:
    try:
        ctx = await build_context(config)
    except ConfigurationError as e:
        logger.error(f'Invalid configuration: {e}')
        return EXIT_VERIFY_FAILED
    except GitError as e:
        logger.error(f'Failed to read commit info: {e}')
        return EXIT_GIT_ERROR

    async with ApiClient(config.index_url, config.project_token) as client:
        task = VerifyTask(client, StoryIndexSpecProvider(config.storybook_url), os.environ)
        logger.info(task.title)
        try:
            ctx = await task.run(ctx)
        except VerifyError as e:
            if e.ctx is not None:
                log_runtime_output(e.ctx)
            logger.error(f'{task.title}: {e}')
            return EXIT_VERIFY_FAILED
        except DiscoveryError as e:
            logger.error(f'Failed to discover stories: {e}')
            return EXIT_VERIFY_FAILED
        except (ApiError, httpx.HTTPError) as e:
            logger.error(f'Failed to create build: {e}')
            return EXIT_API_ERROR

    log_runtime_output(ctx)
    logger.info(f'{task.title}: {task.output}')
    if ctx.skip_snapshots:
        logger.info('Build uploaded, not waiting for snapshots')
    return EXIT_OK if ctx.exit_code is None else ctx.exit_code


def run():
    sys.exit(asyncio.run(verify(config)))
