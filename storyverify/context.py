from pydantic import BaseModel, Field

from storyverify.schemas import CommitInfo, PackageInfo, Spec, StorybookInfo
from storyverify.schemas.build import Build
from storyverify.schemas.options import Options


class Context(BaseModel):
    """State of a single verify run.

    Stages never mutate a context they were given, they return an updated
    copy instead (see ``Context.evolve``).
    """

    options: Options = Field(default_factory=Options)
    git: CommitInfo
    pkg: PackageInfo = Field(default_factory=PackageInfo)
    storybook: StorybookInfo = Field(default_factory=StorybookInfo)
    isolator_url: str
    cached_url: str | None = None
    environment_whitelist: list[str] = Field(default_factory=list)

    environment: str | None = None
    runtime_errors: list[str] = Field(default_factory=list)
    runtime_warnings: list[str] = Field(default_factory=list)
    runtime_specs: list[Spec] = Field(default_factory=list)
    build: Build | None = None
    exit_code: int | None = None
    skip_snapshots: bool = False
    is_publish_only: bool = False
    is_onboarding: bool = False

    def evolve(self, **changes) -> 'Context':
        return self.model_copy(update=changes)
