import logging

import httpx
import pytest
import respx

from storyverify.discovery import RuntimeConsole, StoryIndexSpecProvider
from storyverify.exceptions import DiscoveryError

STORYBOOK_URL = 'http://localhost:6006'


@pytest.mark.asyncio
@respx.mock
async def test_reads_index_json():
    respx.get(f'{STORYBOOK_URL}/index.json').mock(
        return_value=httpx.Response(
            200,
            json={
                'v': 4,
                'entries': {
                    'button--primary': {
                        'id': 'button--primary',
                        'type': 'story',
                        'title': 'Button',
                        'name': 'Primary',
                    },
                    'button--docs': {
                        'id': 'button--docs',
                        'type': 'docs',
                        'title': 'Button',
                        'name': 'Docs',
                    },
                },
            },
        )
    )
    console = RuntimeConsole()

    specs = await StoryIndexSpecProvider(STORYBOOK_URL + '/').get_runtime_specs(console)

    assert [(spec.component.name, spec.name) for spec in specs] == [('Button', 'Primary')]
    assert console.warnings == []


@pytest.mark.asyncio
@respx.mock
async def test_falls_back_to_stories_json():
    respx.get(f'{STORYBOOK_URL}/index.json').mock(return_value=httpx.Response(404))
    respx.get(f'{STORYBOOK_URL}/stories.json').mock(
        return_value=httpx.Response(
            200,
            json={
                'v': 3,
                'stories': {
                    'input--empty': {'kind': 'Forms/Input', 'story': 'Empty'},
                    'intro': {
                        'kind': 'Intro',
                        'story': 'Page',
                        'parameters': {'docsOnly': True},
                    },
                    'broken': {'id': 'broken'},
                },
            },
        )
    )
    console = RuntimeConsole()

    specs = await StoryIndexSpecProvider(STORYBOOK_URL).get_runtime_specs(console)

    assert [(spec.component.name, spec.name) for spec in specs] == [
        ('Forms/Input', 'Empty')
    ]
    assert console.warnings == ['Story broken has no component title or name']


@pytest.mark.asyncio
@respx.mock
async def test_missing_index_raises():
    respx.get(f'{STORYBOOK_URL}/index.json').mock(return_value=httpx.Response(404))
    respx.get(f'{STORYBOOK_URL}/stories.json').mock(return_value=httpx.Response(404))

    with pytest.raises(DiscoveryError, match='No story index found'):
        await StoryIndexSpecProvider(STORYBOOK_URL).get_runtime_specs(RuntimeConsole())


@pytest.mark.asyncio
@respx.mock
async def test_transport_error_raises():
    respx.get(f'{STORYBOOK_URL}/index.json').mock(
        side_effect=httpx.ConnectError('connection refused')
    )

    with pytest.raises(DiscoveryError, match='connection refused'):
        await StoryIndexSpecProvider(STORYBOOK_URL).get_runtime_specs(RuntimeConsole())


def test_console_forwards_to_logger_when_attached(caplog):
    console = RuntimeConsole()
    console.error('not forwarded')
    console.send_to(logging.getLogger('storyverify.test'))
    with caplog.at_level(logging.WARNING, logger='storyverify.test'):
        console.warn('careful')
        console.error('boom')

    assert console.errors == ['not forwarded', 'boom']
    assert console.warnings == ['careful']
    assert caplog.messages == ['careful', 'boom']
