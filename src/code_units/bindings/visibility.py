"""
Access rules.

Decides whether a binding is accessible from a type under Java's modifier
rules (private, package, protected, public) and the relations between
the declaring type and the accessing type.
"""

from typing import Optional

from .model import Binding, BindingKind, TypeBinding, declaration_of


def declaring_type_of(binding: Binding) -> Optional[TypeBinding]:
    """
    Type whose members include the binding.

    A member type is declared by its enclosing type; a top-level type
    stands for itself.
    """
    if binding.kind is BindingKind.TYPE:
        return binding.declaring_class if binding.declaring_class is not None else binding
    return binding.declaring_class


def is_in_super_type_hierarchy(possible_super_type: TypeBinding, type_binding: Optional[TypeBinding]) -> bool:
    """True if ``possible_super_type`` is ``type_binding`` or one of its supertypes."""
    if type_binding is None:
        return False
    if type_binding is possible_super_type:
        return True

    superclass = type_binding.superclass
    if superclass is not None:
        if is_in_super_type_hierarchy(possible_super_type, superclass.type_declaration):
            return True

    if possible_super_type.is_interface:
        for each in type_binding.interfaces:
            if is_in_super_type_hierarchy(possible_super_type, each.type_declaration):
                return True

    return False


def is_type_in_scope(declaring: TypeBinding, context: TypeBinding, include_hierarchy: bool) -> bool:
    """
    True if ``context`` is ``declaring`` or nested in it, or, with
    ``include_hierarchy``, if ``context`` or one of its enclosing types is a
    subtype of ``declaring``.
    """
    current = context.type_declaration
    while current is not None and current is not declaring:
        if include_hierarchy and is_in_super_type_hierarchy(declaring, current):
            return True
        current = current.declaring_class

    return current is declaring


def is_visible(binding: Binding, context: Optional[TypeBinding]) -> bool:
    """
    Evaluate whether a declaration is visible from a type.

    Args:
        binding: The binding of the declaration to examine
        context: The type the declaration is accessed from

    Returns:
        True if the declaration is accessible from ``context``
    """
    binding = declaration_of(binding)
    if binding.kind is BindingKind.VARIABLE and not binding.is_field:
        return True

    declaring = declaring_type_of(binding)
    if declaring is None:
        return False
    declaring = declaring.type_declaration

    if binding.is_public or declaring.is_interface:
        return True
    if context is None:
        return False

    if binding.is_protected or not binding.is_private:
        same_package = declaring.package == context.type_declaration.package
        return same_package or is_type_in_scope(declaring, context, binding.is_protected)

    return is_type_in_scope(declaring, context, False)
