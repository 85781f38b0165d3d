import re

from pydantic import BaseModel

from storyverify.const import ONLY_PATTERN


class OnlyFilter(BaseModel):
    component_name: str
    story_name: str


class OnlyFilterError(BaseModel):
    value: str
    reason: str


def parse_only(value: str) -> OnlyFilter | OnlyFilterError:
    match = re.match(ONLY_PATTERN, value)
    if not match:
        return OnlyFilterError(
            value=value,
            reason='expected a value of the form "ComponentName:StoryName"',
        )
    component_name, story_name = match.groups()
    return OnlyFilter(component_name=component_name, story_name=story_name)
