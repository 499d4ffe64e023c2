"""
Hook report models.

Summaries of which hooks are active for a project, used by ``hookfile inspect``.
"""

from typing import Optional

from pydantic import BaseModel, Field

from hookfile.core.hooks.categories import GLOBAL_ONLY_CATEGORIES, HookCategory
from hookfile.core.hooks.models import HookDeclarationSet


class HookEntry(BaseModel):
    """One active hook and the hookfile it came from."""

    hook: HookCategory
    origin: str = Field(alias="from", serialization_alias="from")
    scope: str = Field(description="global | project")

    model_config = {"populate_by_name": True}


class HookReport(BaseModel):
    """Active hooks for a project, in invocation order."""

    project_root: str = Field(alias="projectRoot", serialization_alias="projectRoot")
    global_hookfile: Optional[str] = Field(
        default=None, alias="globalHookfile", serialization_alias="globalHookfile"
    )
    hookfile: Optional[str] = None
    active: list[HookEntry] = Field(default_factory=list)
    ignored: list[HookEntry] = Field(
        default_factory=list,
        description="Project declarations of global-only hooks",
    )
    checksum: Optional[str] = None

    model_config = {"populate_by_name": True}

    @classmethod
    def from_declarations(
        cls,
        project_root: str,
        global_hooks: Optional[HookDeclarationSet],
        project_hooks: Optional[HookDeclarationSet],
        checksum: Optional[str] = None,
    ) -> "HookReport":
        active: list[HookEntry] = []
        ignored: list[HookEntry] = []
        for category in HookCategory:
            for scope, decl in (("global", global_hooks), ("project", project_hooks)):
                if decl is None or decl.get(category) is None:
                    continue
                entry = HookEntry(hook=category, origin=str(decl.filename), scope=scope)
                if scope == "project" and category in GLOBAL_ONLY_CATEGORIES:
                    ignored.append(entry)
                else:
                    active.append(entry)
        return cls(
            project_root=project_root,
            global_hookfile=str(global_hooks.filename) if global_hooks else None,
            hookfile=str(project_hooks.filename) if project_hooks else None,
            active=active,
            ignored=ignored,
            checksum=checksum,
        )
