"""Merge Swift-extracted declarations into an Objective-C-extracted framework.

When a framework has both Objective-C headers and a Swift module, the two
extractions are combined into one :class:`Framework`.  Swift extensions on
Objective-C classes add members whose source is the Swift interface to the
existing class.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

from apianyware.ir import Class, Framework

_T = TypeVar("_T")


def _extend_if_absent(
    existing: list[_T], new_items: Iterable[_T], key: Callable[[_T], str]
) -> None:
    """Append the new items whose key was not present before the merge began."""
    present = {key(item) for item in existing}
    existing.extend(item for item in new_items if key(item) not in present)


def merge_swift_into_objc(objc: Framework, swift: Framework) -> None:
    """Merge ``swift`` into ``objc`` in place.

    Swift classes that match an Objective-C class by name contribute their
    new methods, properties and conformances to it; Swift-only classes are
    appended.  Protocols, enums, structs, functions, constants and
    dependencies are added only when no declaration of the same name exists,
    so the Objective-C version always wins.  The Objective-C framework keeps
    its own timestamp and SDK version.
    """
    by_name = {cls.name: cls for cls in objc.classes}

    to_add: list[Class] = []
    for swift_class in swift.classes:
        target = by_name.get(swift_class.name)
        if target is None:
            to_add.append(swift_class)
        else:
            _merge_class_members(target, swift_class)
    objc.classes.extend(to_add)

    _extend_if_absent(objc.protocols, swift.protocols, lambda p: p.name)
    _extend_if_absent(objc.enums, swift.enums, lambda e: e.name)
    _extend_if_absent(objc.structs, swift.structs, lambda s: s.name)
    _extend_if_absent(objc.functions, swift.functions, lambda f: f.name)
    _extend_if_absent(objc.constants, swift.constants, lambda c: c.name)
    _extend_if_absent(objc.depends_on, swift.depends_on, lambda d: d)


def _merge_class_members(objc_class: Class, swift_class: Class) -> None:
    _extend_if_absent(objc_class.methods, swift_class.methods, lambda m: m.selector)
    _extend_if_absent(objc_class.properties, swift_class.properties, lambda p: p.name)
    _extend_if_absent(objc_class.protocols, swift_class.protocols, lambda p: p)