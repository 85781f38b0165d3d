import pytest

from storyverify.context import Context
from storyverify.discovery import RuntimeConsole
from storyverify.schemas import CommitInfo, Component, PackageInfo, Spec, StorybookInfo
from storyverify.schemas.options import Options


class FakeSpecProvider:
    def __init__(self, specs, errors=(), warnings=()):
        self.specs = specs
        self.errors = errors
        self.warnings = warnings
        self.calls = 0

    async def get_runtime_specs(self, console: RuntimeConsole):
        self.calls += 1
        for line in self.errors:
            console.error(line)
        for line in self.warnings:
            console.warn(line)
        return list(self.specs)


class FakeClient:
    def __init__(self, build_payload=None, error=None):
        self.build_payload = build_payload
        self.error = error
        self.calls = []

    async def run_query(self, query, variables=None):
        self.calls.append((query, variables))
        if self.error is not None:
            raise self.error
        return {'createBuild': self.build_payload}


def make_spec(component: str, name: str) -> Spec:
    return Spec(name=name, component=Component(name=component))


def make_build_payload(**overrides) -> dict:
    account = {
        'exceededThreshold': False,
        'paymentRequired': False,
        'billingUrl': None,
        **overrides.pop('account', {}),
    }
    features = {'uiTests': True, 'uiReview': True, **overrides.pop('features', {})}
    payload = {
        'id': 'build-1',
        'number': 42,
        'specCount': 2,
        'snapshotCount': 2,
        'componentCount': 2,
        'webUrl': 'https://index.example/build/42',
        'features': features,
        'wasLimited': False,
        'autoAcceptChanges': False,
        'app': {
            'account': account,
            'repository': {'provider': 'github'},
            'setupUrl': 'https://index.example/setup',
        },
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def commit_info():
    return CommitInfo(
        commit='a' * 40,
        committed_at=1700000000000,
        committer_email='dev@example.com',
        committer_name='Dev',
        branch='feature/button',
        parent_commits=['b' * 40],
        version='2.43.0',
    )


@pytest.fixture
def make_ctx(commit_info):
    def make(**options) -> Context:
        return Context(
            options=Options.model_validate(options),
            git=commit_info,
            pkg=PackageInfo(name='web', version='1.2.3'),
            storybook=StorybookInfo(version='7.6.0', view_layer='react'),
            isolator_url='http://localhost:6006/iframe.html',
            environment_whitelist=[r'^CI_'],
        )

    return make


@pytest.fixture
def specs():
    return [make_spec('Button', 'primary'), make_spec('Input', 'primary')]
