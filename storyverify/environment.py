import json
import logging
import re
from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)


def filter_environment(environ: Mapping[str, str], whitelist: Iterable[str]) -> str:
    # Only variables set by known CI systems are sent, the rest of the
    # environment may contain secrets
    patterns = [re.compile(pattern) for pattern in whitelist]
    filtered = {
        key: value
        for key, value in environ.items()
        if any(pattern.search(key) for pattern in patterns)
    }
    environment = json.dumps(filtered)
    logger.debug(f'Got environment {environment}')
    return environment
