"""Decisions derived from the build returned by the index."""

import enum
import logging
from collections.abc import Callable

from storyverify import messages
from storyverify.const import (
    EXIT_BUILD_LIMITED,
    EXIT_OK,
    EXIT_PAYMENT_REQUIRED,
    EXIT_SNAPSHOT_QUOTA_REACHED,
)
from storyverify.context import Context
from storyverify.matching import matches_branch
from storyverify.schemas.build import Account, Build

logger = logging.getLogger(__name__)


class LimitReason(enum.Enum):
    quota = EXIT_SNAPSHOT_QUOTA_REACHED
    payment = EXIT_PAYMENT_REQUIRED
    # Reasons the index may add later
    unknown = EXIT_BUILD_LIMITED

    @property
    def exit_code(self) -> int:
        return self.value

    @property
    def message(self) -> Callable[[Account], str]:
        return LIMIT_MESSAGES[self]


LIMIT_MESSAGES = {
    LimitReason.quota: messages.snapshot_quota_reached,
    LimitReason.payment: messages.payment_required,
    LimitReason.unknown: messages.build_limited,
}


def classify_limit(build: Build) -> LimitReason | None:
    if not build.was_limited:
        return None
    account = build.app.account
    if account.exceeded_threshold:
        return LimitReason.quota
    if account.payment_required:
        return LimitReason.payment
    return LimitReason.unknown


def is_publish_only(build: Build) -> bool:
    return not build.features.ui_review and not build.features.ui_tests


def is_onboarding(build: Build, auto_accept_changes: bool) -> bool:
    return build.number == 1 or (build.auto_accept_changes and not auto_accept_changes)


def apply_build_response(ctx: Context, build: Build, auto_accept_changes: bool) -> Context:
    """Records the limiting exit code and the build mode flags.

    Limiting never fails the run, the build was created regardless.
    """
    exit_code = ctx.exit_code
    if reason := classify_limit(build):
        logger.warning(reason.message(build.app.account))
        exit_code = reason.exit_code

    return ctx.evolve(
        build=build,
        exit_code=exit_code,
        is_publish_only=is_publish_only(build),
        is_onboarding=is_onboarding(build, auto_accept_changes),
    )


def should_exit_early(ctx: Context) -> bool:
    return ctx.is_publish_only or matches_branch(
        ctx.options.exit_once_uploaded, ctx.git.branch
    )


def apply_early_exit(ctx: Context) -> Context:
    if not should_exit_early(ctx):
        return ctx
    logger.debug('Nothing left to wait for after upload, skipping snapshots')
    return ctx.evolve(exit_code=EXIT_OK, skip_snapshots=True)
