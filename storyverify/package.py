import json
import logging
from pathlib import Path

from storyverify.exceptions import ConfigurationError
from storyverify.schemas import Addon, PackageInfo, StorybookInfo

logger = logging.getLogger(__name__)

VIEW_LAYERS = {
    '@storybook/react': 'react',
    '@storybook/vue': 'vue',
    '@storybook/vue3': 'vue3',
    '@storybook/angular': 'angular',
    '@storybook/svelte': 'svelte',
    '@storybook/web-components': 'web-components',
    '@storybook/html': 'html',
    '@storybook/preact': 'preact',
    '@storybook/ember': 'ember',
}

ADDON_PREFIX = '@storybook/addon-'


def load_package_json(path: Path) -> dict:
    if not path.is_file():
        raise ConfigurationError(f'{path} not found')
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigurationError(f'{path} is not valid JSON: {e}')
    if not isinstance(data, dict):
        raise ConfigurationError(f'{path} must contain an object')
    return data


def get_package_info(package_json: dict) -> PackageInfo:
    return PackageInfo(
        name=package_json.get('name'), version=package_json.get('version')
    )


def _clean_version(spec: str) -> str:
    return spec.lstrip('^~=v ')


def get_storybook_info(package_json: dict) -> StorybookInfo:
    dependencies = {
        **package_json.get('devDependencies', {}),
        **package_json.get('dependencies', {}),
    }

    view_layer = None
    version = None
    for package_name, layer in VIEW_LAYERS.items():
        if package_name in dependencies:
            view_layer = layer
            version = _clean_version(dependencies[package_name])
            break

    addons = [
        Addon(name=package_name.removeprefix(ADDON_PREFIX), package_name=package_name)
        for package_name in dependencies
        if package_name.startswith(ADDON_PREFIX)
    ]

    if view_layer is None:
        logger.warning('Could not detect the Storybook view layer from package.json')
    return StorybookInfo(version=version, view_layer=view_layer, addons=addons)
