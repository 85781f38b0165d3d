from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from storyverify.context import Context
    from storyverify.tasks.states import TaskState


class ConfigurationError(Exception):
    pass


class GitError(Exception):
    pass


class ApiError(Exception):
    errors: list[dict]

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []


class DiscoveryError(Exception):
    pass


class VerifyError(Exception):
    """Terminal pipeline failure, carrying the task state to end in.

    ``ctx`` is the context as it stood when the run failed, so runtime errors
    collected before the failure stay reachable.
    """

    state: 'TaskState | None'
    ctx: 'Context | None'

    def __init__(
        self,
        state: 'TaskState | None' = None,
        message: str | None = None,
        *,
        ctx: 'Context | None' = None,
    ):
        if message is None and state is not None:
            message = state.output
        super().__init__(message)
        self.state = state
        self.ctx = ctx


class InvalidOnlyError(VerifyError):
    pass


class NoMatchingSpecsError(VerifyError):
    pass


class InvalidTransitionError(ValueError):
    pass
