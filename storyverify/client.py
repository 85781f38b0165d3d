import logging

import httpx

from storyverify.exceptions import ApiError

logger = logging.getLogger(__name__)


class ApiClient:
    """GraphQL client for the build index."""

    index_url: str
    _client: httpx.AsyncClient

    def __init__(
        self,
        index_url: str,
        project_token: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30,
    ):
        headers = {}
        if project_token:
            headers['Authorization'] = f'Bearer {project_token}'
        self.index_url = index_url
        self._client = httpx.AsyncClient(
            headers=headers, transport=transport, timeout=timeout
        )

    async def run_query(self, query: str, variables: dict | None = None) -> dict:
        logger.debug(f'Running query with variables {variables}')
        resp = await self._client.post(
            self.index_url, json={'query': query, 'variables': variables or {}}
        )
        resp.raise_for_status()
        payload = resp.json()
        if errors := payload.get('errors'):
            message = '\n'.join(error.get('message', str(error)) for error in errors)
            raise ApiError(message, errors)
        return payload['data']

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self) -> 'ApiClient':
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
