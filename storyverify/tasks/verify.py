import logging
import os
from collections.abc import Mapping
from typing import Protocol

from storyverify.context import Context
from storyverify.discovery import RuntimeConsole, SpecProvider
from storyverify.environment import filter_environment
from storyverify.exceptions import InvalidOnlyError, NoMatchingSpecsError
from storyverify.matching import matches, matches_branch
from storyverify.only_filter import OnlyFilterError, parse_only
from storyverify.policy import apply_build_response, apply_early_exit
from storyverify.schemas.build import Build
from storyverify.tasks import states
from storyverify.tasks.task import Step, Task
from storyverify.utils import pluralize

logger = logging.getLogger(__name__)

CREATE_BUILD_MUTATION = '''
  mutation CreateBuildMutation($input: CreateBuildInput!, $isolatorUrl: String!) {
    createBuild(input: $input, isolatorUrl: $isolatorUrl) {
      id
      number
      specCount
      snapshotCount
      componentCount
      webUrl
      features {
        uiTests
        uiReview
      }
      wasLimited
      autoAcceptChanges
      app {
        account {
          exceededThreshold
          paymentRequired
          billingUrl
        }
        repository {
          provider
        }
        setupUrl
      }
    }
  }
'''


class QueryClient(Protocol):
    async def run_query(self, query: str, variables: dict | None = None) -> dict: ...


class VerifyTask(Task):
    client: QueryClient
    spec_provider: SpecProvider
    environ: Mapping[str, str]

    def __init__(
        self,
        client: QueryClient,
        spec_provider: SpecProvider,
        environ: Mapping[str, str] | None = None,
    ):
        super().__init__(states.initial())
        self.client = client
        self.spec_provider = spec_provider
        self.environ = os.environ if environ is None else environ

    @property
    def steps(self) -> list[Step]:
        return [
            self.set_pending,
            self.set_environment,
            self.set_runtime_specs,
            self.create_build,
        ]

    async def run(self, ctx: Context) -> Context:
        return await self.run_steps(ctx, self.steps)

    async def set_pending(self, ctx: Context) -> Context:
        self.transition_to(states.pending(ctx))
        return ctx

    async def set_environment(self, ctx: Context) -> Context:
        return ctx.evolve(
            environment=filter_environment(self.environ, ctx.environment_whitelist)
        )

    async def set_runtime_specs(self, ctx: Context) -> Context:
        options = ctx.options

        only_filter = None
        if options.only:
            only_filter = parse_only(options.only)
            if isinstance(only_filter, OnlyFilterError):
                raise InvalidOnlyError(states.invalid_only(ctx, only_filter.reason))

        console = RuntimeConsole()
        if options.verbose:
            console.send_to(logger)

        # The full list is fetched even when filtering, listing shows all of it
        specs = await self.spec_provider.get_runtime_specs(console)
        ctx = ctx.evolve(
            runtime_errors=console.errors,
            runtime_warnings=console.warnings,
            runtime_specs=specs,
        )

        if options.list_specs:
            state = states.listing(ctx)
            self.transition_to(state)
            logger.info(state.title)
            for spec in specs:
                logger.info(states.listing_entry(spec))

        if only_filter:
            self.transition_to(
                states.run_only(only_filter.component_name, only_filter.story_name)
            )
            specs = [
                spec
                for spec in specs
                if matches(spec.component.name, only_filter.component_name)
                and matches(spec.name, only_filter.story_name)
            ]

        if not specs:
            raise NoMatchingSpecsError(states.failed(ctx), ctx=ctx)

        logger.debug(f'Found {pluralize("story", len(specs), "stories")}')
        return ctx.evolve(runtime_specs=specs)

    def build_input(self, ctx: Context, auto_accept_changes: bool) -> dict:
        options = ctx.options
        return {
            **ctx.git.model_dump(by_alias=True, exclude={'version'}),
            'autoAcceptChanges': auto_accept_changes,
            'cachedUrl': ctx.cached_url,
            'environment': ctx.environment,
            'patchBaseRef': options.patch_base_ref,
            'patchHeadRef': options.patch_head_ref,
            'preserveMissingSpecs': options.preserve_missing_specs,
            'runtimeSpecs': [spec.model_dump(by_alias=True) for spec in ctx.runtime_specs],
            'packageVersion': ctx.pkg.version,
            'storybookVersion': ctx.storybook.version,
            'viewLayer': ctx.storybook.view_layer,
            'addons': [addon.model_dump(by_alias=True) for addon in ctx.storybook.addons],
        }

    async def create_build(self, ctx: Context) -> Context:
        auto_accept_changes = matches_branch(
            ctx.options.auto_accept_changes, ctx.git.branch
        )
        data = await self.client.run_query(
            CREATE_BUILD_MUTATION,
            {
                'input': self.build_input(ctx, auto_accept_changes),
                'isolatorUrl': ctx.isolator_url,
            },
        )
        build = Build.model_validate(data['createBuild'])
        logger.debug(f'Created build {build.id} (#{build.number})')

        ctx = apply_build_response(ctx, build, auto_accept_changes)
        self.transition_to(states.success(ctx), last=True)
        return apply_early_exit(ctx)
