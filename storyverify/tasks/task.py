import logging
from collections.abc import Awaitable, Callable, Sequence

from storyverify.context import Context
from storyverify.exceptions import InvalidTransitionError, VerifyError
from storyverify.tasks.states import ALLOWED_TRANSITIONS, TaskState

logger = logging.getLogger(__name__)

Step = Callable[[Context], Awaitable[Context]]


class Task:
    """A named sequence of steps with a visible, forward-only state."""

    title: str
    output: str | None
    state: TaskState
    history: list[TaskState]

    def __init__(self, initial_state: TaskState):
        self.title = initial_state.title
        self.output = None
        self.state = initial_state
        self.history = [initial_state]

    def transition_to(self, state: TaskState, last: bool = False):
        allowed = ALLOWED_TRANSITIONS.get(self.state.status, frozenset())
        if state.status not in allowed:
            raise InvalidTransitionError(
                f'Cannot transition from {self.state.status.name} to {state.status.name}'
            )
        self.state = state
        self.history.append(state)
        self.title = state.title
        if state.output is None:
            self.output = None
        else:
            self.output = state.output if last else f'→ {state.output}'
        logger.debug(f'Task is now {state.status.name}: {self.title}')

    async def run_steps(self, ctx: Context, steps: Sequence[Step]) -> Context:
        for step in steps:
            try:
                ctx = await step(ctx)
            except VerifyError as e:
                if e.ctx is None:
                    e.ctx = ctx
                if e.state is not None:
                    self.transition_to(e.state, last=True)
                raise
        return ctx
