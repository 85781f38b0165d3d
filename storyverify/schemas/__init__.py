from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Component(CamelModel):
    name: str


class Spec(CamelModel):
    name: str
    component: Component
    parameters: dict = Field(default_factory=dict)


class CommitInfo(CamelModel):
    commit: str
    committed_at: int
    committer_email: str | None = None
    committer_name: str | None = None
    branch: str
    parent_commits: list[str] = Field(default_factory=list)
    from_ci: bool = Field(False, alias='fromCI')
    ci_service: str | None = None
    slug: str | None = None
    version: str | None = None


class PackageInfo(CamelModel):
    name: str | None = None
    version: str | None = None


class Addon(CamelModel):
    name: str
    package_name: str


class StorybookInfo(CamelModel):
    version: str | None = None
    view_layer: str | None = None
    addons: list[Addon] = Field(default_factory=list)
