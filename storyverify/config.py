import os
import yaml
from pathlib import Path
from pydantic import AfterValidator, Field, field_validator
from pydantic_core.core_schema import ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Annotated
from yaml import YAMLError

from storyverify.const import DEFAULT_ENVIRONMENT_WHITELIST, DEFAULT_INDEX_URL
from storyverify.exceptions import ConfigurationError
from storyverify.schemas.options import Options


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix='STORYVERIFY_',
        env_file='.env',
        env_nested_delimiter='__',
        extra='ignore',
    )

    debug: bool = False

    index_url: str = DEFAULT_INDEX_URL
    project_token: str | None = None
    storybook_url: str | None = None
    cached_url: str | None = None

    environment_whitelist: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ENVIRONMENT_WHITELIST)
    )
    package_json: Annotated[Path, AfterValidator(lambda path: path.absolute())] = (
        Path('package.json')
    )

    options: Options = Field(default_factory=Options)

    # noinspection PyNestedDecorators
    @field_validator('cached_url', mode='before')
    @classmethod
    def default_cached_url(cls, v: str | None, info: ValidationInfo):
        if v is not None:
            return v
        if storybook_url := info.data.get('storybook_url'):
            return storybook_url.rstrip('/') + '/iframe.html'
        return None


def load_config_values(config_file: Path) -> dict:
    if not config_file.is_file():
        return {}
    try:
        values = yaml.safe_load(config_file.read_text())
    except YAMLError as e:
        raise ConfigurationError(str(e))
    if values is None:
        return {}
    if not isinstance(values, dict):
        raise ConfigurationError(f'{config_file} must contain a mapping')
    return values


config_home = Path(os.getenv('XDG_CONFIG_HOME') or os.path.expanduser('~/.config'))
config_file = config_home / 'storyverify' / 'config.yml'
config = Config(**load_config_values(config_file))

__all__ = ['Config', 'config', 'load_config_values']
