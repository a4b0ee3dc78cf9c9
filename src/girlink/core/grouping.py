"""
Group loaded modules by namespace to spot version conflicts.
"""

from collections.abc import Iterable

from .ir import ModuleGroup, ResolvedModule


def group_modules(modules: Iterable[ResolvedModule]) -> dict[str, ModuleGroup]:
    """
    Group modules by lower-cased namespace.

    E.g. Gtk-3.0 and Gtk-4.0 end up in the ``gtk`` group, which then has a
    conflict. Discovery order is preserved.
    """
    grouped: dict[str, ModuleGroup] = {}
    for module in modules:
        group_id = module.namespace.lower()
        if group_id not in grouped:
            grouped[group_id] = ModuleGroup(namespace=module.namespace, modules=[module])
        else:
            grouped[group_id].modules.append(module)
    return grouped
