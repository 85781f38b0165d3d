import enum

from pydantic import BaseModel

from storyverify.context import Context
from storyverify.schemas import Spec


class TaskStatus(enum.Enum):
    initial = enum.auto()
    pending = enum.auto()
    listing = enum.auto()
    run_only = enum.auto()
    success = enum.auto()
    failed = enum.auto()
    invalid_only = enum.auto()


TERMINAL_STATUSES = frozenset(
    (TaskStatus.success, TaskStatus.failed, TaskStatus.invalid_only)
)

ALLOWED_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.initial: frozenset((TaskStatus.pending,)),
    TaskStatus.pending: frozenset(
        (
            TaskStatus.listing,
            TaskStatus.run_only,
            TaskStatus.success,
            TaskStatus.failed,
            TaskStatus.invalid_only,
        )
    ),
    TaskStatus.listing: frozenset(
        (TaskStatus.run_only, TaskStatus.success, TaskStatus.failed)
    ),
    TaskStatus.run_only: frozenset((TaskStatus.success, TaskStatus.failed)),
}


class TaskState(BaseModel):
    status: TaskStatus
    title: str
    output: str | None = None


def initial() -> TaskState:
    return TaskState(status=TaskStatus.initial, title='Verify your Storybook')


def pending(ctx: Context) -> TaskState:
    return TaskState(
        status=TaskStatus.pending,
        title='Verifying your Storybook',
        output='This may take a few minutes',
    )


def listing(ctx: Context) -> TaskState:
    return TaskState(
        status=TaskStatus.listing,
        title='Listing available stories',
        output=f'{len(ctx.runtime_specs)} found',
    )


def listing_entry(spec: Spec) -> str:
    return f'{spec.component.name}: {spec.name}'


def run_only(component_name: str, story_name: str) -> TaskState:
    return TaskState(
        status=TaskStatus.run_only,
        title='Verifying your Storybook',
        output=f"Running only story '{story_name}' of component '{component_name}'",
    )


def success(ctx: Context) -> TaskState:
    build = ctx.build
    if ctx.is_publish_only:
        title = f'Published your Storybook as build {build.number}'
    else:
        title = f'Started build {build.number}'
    if ctx.is_onboarding and build.app.setup_url:
        output = f'Continue setup at {build.app.setup_url}'
    else:
        output = f'View build details at {build.web_url}'
    return TaskState(status=TaskStatus.success, title=title, output=output)


def failed(ctx: Context) -> TaskState:
    if ctx.options.only:
        output = f"No stories matched '{ctx.options.only}'"
    else:
        output = 'Cannot run a build with no stories'
    return TaskState(
        status=TaskStatus.failed, title='Verifying your Storybook', output=output
    )


def invalid_only(ctx: Context, reason: str | None = None) -> TaskState:
    output = f"Invalid value '{ctx.options.only}' for --only"
    if reason:
        output += f': {reason}'
    return TaskState(
        status=TaskStatus.invalid_only, title='Verifying your Storybook', output=output
    )
