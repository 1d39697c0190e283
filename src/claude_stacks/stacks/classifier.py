"""Split commands and agents into global and local scope.

The scope is inferred from the ``filePath`` written at export time: items
exported from a project's ``./.claude`` tree are local, everything else is
global. Callers depend only on ``classify()`` so a typed scope field can
replace the prefix check later.
"""

from __future__ import annotations

from claude_stacks.models import ClassifiedComponents, Scope, StackComponent

LOCAL_PREFIX = "./.claude"


def scope_of(item: StackComponent) -> Scope:
    return Scope.LOCAL if item.file_path.startswith(LOCAL_PREFIX) else Scope.GLOBAL


class PathPrefixClassifier:
    """Classify components by their origin path prefix."""

    def classify(self, items: list[StackComponent]) -> ClassifiedComponents:
        global_items: list[StackComponent] = []
        local_items: list[StackComponent] = []
        for item in items:
            if scope_of(item) is Scope.LOCAL:
                local_items.append(item)
            else:
                global_items.append(item)
        return ClassifiedComponents(global_items=global_items, local_items=local_items)
