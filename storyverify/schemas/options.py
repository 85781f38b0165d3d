from pydantic import BeforeValidator, Field
from typing import Annotated

from storyverify.schemas import CamelModel


def parse_branch_pattern(v):
    # Env and .env values arrive as strings, YAML already yields booleans
    if isinstance(v, str) and v.strip().lower() in ('true', 'false'):
        return v.strip().lower() == 'true'
    return v


# Either True (any branch) or a branch glob
BranchPattern = Annotated[bool | str | None, BeforeValidator(parse_branch_pattern)]


class Options(CamelModel):
    only: str | None = None
    list_specs: bool = Field(False, alias='list')
    verbose: bool = False
    patch_base_ref: str | None = None
    patch_head_ref: str | None = None
    preserve_missing_specs: bool = False
    auto_accept_changes: BranchPattern = None
    exit_once_uploaded: BranchPattern = None
