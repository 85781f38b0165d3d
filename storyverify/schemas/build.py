from pydantic import ConfigDict

from storyverify.schemas import CamelModel


class FrozenModel(CamelModel):
    model_config = ConfigDict(frozen=True)


class Features(FrozenModel):
    ui_tests: bool = False
    ui_review: bool = False


class Account(FrozenModel):
    exceeded_threshold: bool = False
    payment_required: bool = False
    billing_url: str | None = None


class Repository(FrozenModel):
    provider: str | None = None


class App(FrozenModel):
    account: Account
    repository: Repository | None = None
    setup_url: str | None = None


class Build(FrozenModel):
    id: str
    number: int
    spec_count: int = 0
    snapshot_count: int = 0
    component_count: int = 0
    web_url: str
    features: Features
    was_limited: bool = False
    app: App
    auto_accept_changes: bool = False
