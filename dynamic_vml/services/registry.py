"""
List Registry

Holds the declarative configuration of view model properties that contain
dynamic lists, and the item view model type of each list. The resolution
engine consults it explicitly instead of reading attributes or inspecting
generic type arguments at render time.

Registration happens at import time with the class decorator:

    @dynamic_list("books", item_type=BookViewModel,
                  item_template="BookView", method=NewItemMethod.POST)
    class AuthorViewModel:
        ...

or directly through ``default_registry.register(...)``.

Item Type Lookup Order:
1. The item type registered for the (owner type, property) pair
2. The ``item_type`` of the DynamicList instance (or its class)
3. The item type registered for the list class
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from dynamic_vml.exceptions import NotADynamicListError
from dynamic_vml.models.entities import DynamicList
from dynamic_vml.models.schemas import DynamicListAttribute

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class ListRegistration:
    """What is known about one view model property holding a DynamicList."""
    attribute: Optional[DynamicListAttribute] = None
    item_type: Optional[type] = None


class ListRegistry:
    """Registry of dynamic list properties and list item types."""

    def __init__(self):
        self._properties: dict[tuple[type, str], ListRegistration] = {}
        self._list_types: dict[type, type] = {}

    def register(
        self,
        owner: type,
        property_name: str,
        attribute: Optional[DynamicListAttribute] = None,
        item_type: Optional[type] = None,
    ) -> ListRegistration:
        """Register (or replace) the configuration of ``owner.property_name``."""
        registration = ListRegistration(attribute=attribute, item_type=item_type)
        self._properties[(owner, property_name)] = registration
        return registration

    def register_list_type(self, list_type: type, item_type: type) -> None:
        """Declare the item view model type held by a DynamicList subclass."""
        self._list_types[list_type] = item_type

    def registration_for(self, owner: Optional[type], property_name: Optional[str]) -> Optional[ListRegistration]:
        """Find the registration of a property, searching the owner's base classes too."""
        if owner is None or property_name is None:
            return None
        for klass in owner.__mro__:
            registration = self._properties.get((klass, property_name))
            if registration is not None:
                return registration
        return None

    def attribute_for(self, owner: Optional[type], property_name: Optional[str]) -> Optional[DynamicListAttribute]:
        registration = self.registration_for(owner, property_name)
        return registration.attribute if registration else None

    def item_type_for(self, owner: Optional[type], property_name: Optional[str], value: Any) -> type:
        """
        Return the item view model type of the list being rendered.

        Raises:
            NotADynamicListError: the value is not a DynamicList, or no item
                type was declared for it anywhere
        """
        if not isinstance(value, DynamicList):
            raise NotADynamicListError(
                f"The value being rendered ({type(value).__name__}) is not a DynamicList. "
                "list_editor_for() and display_list_for() only accept DynamicList properties."
            )

        registration = self.registration_for(owner, property_name)
        if registration is not None and registration.item_type is not None:
            return registration.item_type

        if value.item_type is not None:
            return value.item_type

        for klass in type(value).__mro__:
            if klass in self._list_types:
                return self._list_types[klass]

        raise NotADynamicListError(
            f"Could not determine the view model type held by the DynamicList "
            f"'{value.container_id}'. Pass item_type= to the DynamicList, register it with "
            "@dynamic_list(..., item_type=...), or give an explicit item template.",
            container_id=value.container_id,
        )

    def item_type_name(self, owner: Optional[type], property_name: Optional[str], value: Any) -> str:
        name = self.item_type_for(owner, property_name, value).__name__
        logger.debug(f"Inferred view model type '{name}' for {owner.__name__ if owner else '?'}.{property_name}")
        return name


default_registry = ListRegistry()


def dynamic_list(
    property_name: str,
    item_type: Optional[type] = None,
    registry: Optional[ListRegistry] = None,
    **attribute_fields: Any,
) -> Callable[[T], T]:
    """
    Class decorator registering a view model property as a dynamic list.

    Keyword arguments other than ``item_type`` and ``registry`` are the
    fields of DynamicListAttribute (item_template, list_template, mode,
    method, ...). Without any of them only the item type is registered.
    """
    attribute = DynamicListAttribute(**attribute_fields) if attribute_fields else None

    def decorator(cls: T) -> T:
        (registry or default_registry).register(cls, property_name, attribute=attribute, item_type=item_type)
        return cls

    return decorator
