import logging
from typing import Protocol

import httpx

from storyverify.exceptions import DiscoveryError
from storyverify.schemas import Component, Spec

logger = logging.getLogger(__name__)


class RuntimeConsole:
    """Collects error and warning lines emitted while specs are discovered."""

    errors: list[str]
    warnings: list[str]
    _sink: logging.Logger | None

    def __init__(self):
        self.errors = []
        self.warnings = []
        self._sink = None

    def send_to(self, sink: logging.Logger):
        self._sink = sink

    def error(self, line: str):
        self.errors.append(line)
        if self._sink:
            self._sink.error(line)

    def warn(self, line: str):
        self.warnings.append(line)
        if self._sink:
            self._sink.warning(line)


class SpecProvider(Protocol):
    async def get_runtime_specs(self, console: RuntimeConsole) -> list[Spec]: ...


class StoryIndexSpecProvider:
    """Discovers specs from the story index of a built or running Storybook."""

    INDEX_FILES = ('index.json', 'stories.json')

    storybook_url: str
    transport: httpx.AsyncBaseTransport | None

    def __init__(
        self, storybook_url: str, *, transport: httpx.AsyncBaseTransport | None = None
    ):
        self.storybook_url = storybook_url.rstrip('/')
        self.transport = transport

    async def fetch_index(self) -> dict:
        async with httpx.AsyncClient(transport=self.transport) as client:
            for filename in self.INDEX_FILES:
                url = f'{self.storybook_url}/{filename}'
                try:
                    resp = await client.get(url)
                except httpx.HTTPError as e:
                    raise DiscoveryError(f'Failed to fetch {url}: {e}')
                if resp.status_code == 404:
                    logger.debug(f'{url} not found')
                    continue
                if resp.is_error:
                    raise DiscoveryError(
                        f'Failed to fetch {url}: HTTP {resp.status_code}'
                    )
                try:
                    return resp.json()
                except ValueError:
                    raise DiscoveryError(f'{url} is not valid JSON')
        raise DiscoveryError(f'No story index found at {self.storybook_url}')

    async def get_runtime_specs(self, console: RuntimeConsole) -> list[Spec]:
        index = await self.fetch_index()
        # Storybook 7+ uses "entries", 6.x "stories"
        entries = index.get('entries') or index.get('stories') or {}

        specs = []
        for entry_id, entry in entries.items():
            if not isinstance(entry, dict):
                console.warn(f'Skipping malformed story index entry {entry_id}')
                continue
            parameters = entry.get('parameters') or {}
            if entry.get('type', 'story') != 'story' or parameters.get('docsOnly'):
                continue
            title = entry.get('title') or entry.get('kind')
            name = entry.get('name') or entry.get('story')
            if not title or not name:
                console.warn(f'Story {entry_id} has no component title or name')
                continue
            specs.append(
                Spec(name=name, component=Component(name=title), parameters=parameters)
            )
        return specs
