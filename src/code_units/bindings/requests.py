"""
Binding requests.

A request is offered candidate bindings one at a time, in the order a
scope traversal finds them, and answers whether the traversal can stop.

- BindingRequestBySignature collects every distinct binding (by
  signature), optionally keeping only the visible ones.
- BindingRequestByValue looks for one particular binding and records
  whether it was found and whether it is visible, or hidden by a nearer
  declaration.

Request state lives in an accumulator object so the request logic can be
exercised on its own, with hand-built bindings.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from .model import Binding, TypeBinding, declaration_of, signature_of
from .scopes import ScopeFlags
from .visibility import is_visible

logger = logging.getLogger(__name__)


class BindingRequest(ABC):
    """Strategy receiving candidate bindings during a scope traversal."""

    @abstractmethod
    def accept(self, binding: Optional[Binding]) -> bool:
        """
        Offer a candidate binding.

        Args:
            binding: The candidate; may be None for unresolved references

        Returns:
            True if the traversal should stop
        """

    @staticmethod
    def signature(binding: Optional[Binding]) -> Optional[str]:
        return signature_of(binding)

    @staticmethod
    def is_visible(binding: Binding, context: Optional[TypeBinding]) -> bool:
        return is_visible(binding, context)


@dataclass
class SignatureAccumulator:
    """Distinct bindings collected so far, first seen first."""
    bindings: List[Binding] = field(default_factory=list)
    signatures: Set[str] = field(default_factory=set)


@dataclass
class ValueAccumulator:
    found: bool = False
    visible: bool = True


class BindingRequestBySignature(BindingRequest):
    """
    Collects bindings, one per signature.

    Args:
        parent_type: Type the bindings are accessed from
        flags: ScopeFlags; CHECK_VISIBILITY filters out inaccessible bindings
    """

    def __init__(self, parent_type: Optional[TypeBinding] = None, flags: int = 0):
        self.parent_type = parent_type
        self.flags = ScopeFlags(flags)
        self.state = SignatureAccumulator()

    def accept(self, binding: Optional[Binding]) -> bool:
        if binding is None:
            return False

        signature = self.signature(binding)
        if signature is not None and signature not in self.state.signatures:
            self.state.signatures.add(signature)
            self.state.bindings.append(binding)

        return False

    def requested_bindings(self) -> List[Binding]:
        """The collected bindings, in the order they were first seen."""
        if self.flags.check_visibility:
            bindings = self.state.bindings
            for index in range(len(bindings) - 1, -1, -1):
                if not self.is_visible(bindings[index], self.parent_type):
                    del bindings[index]

        return list(self.state.bindings)


class BindingRequestByValue(BindingRequest):
    """
    Searches for one binding among the candidates.

    A candidate with the target's name and signature that is not the
    target itself hides it: the search stops and, when visibility is
    checked, the target is reported as not visible.

    Args:
        target: The binding to search for
        parent_type: Type the binding is accessed from
        flags: ScopeFlags; CHECK_VISIBILITY enables the visibility check
    """

    def __init__(self, target: Binding, parent_type: Optional[TypeBinding] = None, flags: int = 0):
        self.target = target
        self.parent_type = parent_type
        self.flags = ScopeFlags(flags)
        self.state = ValueAccumulator()

    @property
    def found(self) -> bool:
        return self.state.found

    @property
    def visible(self) -> bool:
        return self.state.visible

    def accept(self, binding: Optional[Binding]) -> bool:
        if self.state.found:
            return True

        if binding is None or binding.kind is not self.target.kind:
            return False

        check_visibility = self.flags.check_visibility
        if binding is self.target:
            self.state.found = True
        else:
            declaration = declaration_of(binding)
            if declaration is self.target:
                self.state.found = True
            elif declaration.name == self.target.name:
                signature = self.signature(declaration)
                if signature is not None and signature == self.signature(self.target):
                    logger.debug(f"{binding!r} hides {self.target!r}")
                    if check_visibility:
                        self.state.visible = False
                    return True

        if self.state.found and check_visibility:
            self.state.visible = self.is_visible(binding, self.parent_type)

        return self.state.found


def feed(request: BindingRequest, candidates: Iterable[Optional[Binding]]) -> bool:
    """
    Offer candidates to a request until it asks to stop.

    Returns:
        True if the request stopped the traversal
    """
    for candidate in candidates:
        if request.accept(candidate):
            return True
    return False
