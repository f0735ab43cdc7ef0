"""
Component tree engine.

:class:`ComponentTree` owns one screen's root component list and keeps an
index of every component by id together with a parent pointer, so lookups do
not walk the tree and edits only splice the affected child list. The nested
lists stay the single source of truth; the index is rebuilt if it is found to
be stale (someone edited the lists directly).

Not-found ids and impossible placements are reported as no-op
:class:`~appflow.results.OpResult` values rather than exceptions: losing the
selection while the tree changes underneath is a normal editor state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple

import structlog

from appflow.ids import new_component_id
from appflow.model.components import ComponentType, UIComponent
from appflow.results import NoopReason, OpResult

logger = structlog.get_logger(__name__)


class Placement(str, Enum):
    """Where a component lands relative to the drop target."""
    BEFORE = "before"
    AFTER = "after"
    INSIDE = "inside"


@dataclass(frozen=True)
class Located:
    """A component together with the list that owns it."""
    component: UIComponent
    owner: List[UIComponent]
    index: int
    parent: Optional[UIComponent] = None


def iter_components(roots: List[UIComponent]) -> Iterator[UIComponent]:
    """Depth-first, pre-order walk over a component list."""
    for component in roots:
        yield component
        if component.children:
            yield from iter_components(component.children)


def subtree_ids(component: UIComponent) -> Set[str]:
    return {c.id for c in iter_components([component])}


def _index_of(owner: List[UIComponent], component: UIComponent) -> Optional[int]:
    for i, candidate in enumerate(owner):
        if candidate is component:
            return i
    return None


class ComponentTree:
    """Editing operations over a single screen's component forest."""

    def __init__(self, roots: Optional[List[UIComponent]] = None):
        self.roots: List[UIComponent] = roots if roots is not None else []
        self._index: Dict[str, UIComponent] = {}
        self._parent: Dict[str, Optional[str]] = {}
        self.reindex()

    # ------------------------------------------------------------------
    # Index maintenance
    # ------------------------------------------------------------------

    def reindex(self) -> None:
        """Rebuild the id index from the nested lists."""
        self._index.clear()
        self._parent.clear()
        for component in self.roots:
            self._add_to_index(component, None)

    def _add_to_index(self, component: UIComponent, parent_id: Optional[str]) -> None:
        # First occurrence wins so lookups match a depth-first search.
        if component.id not in self._index:
            self._index[component.id] = component
            self._parent[component.id] = parent_id
        for child in component.children or []:
            self._add_to_index(child, component.id)

    def _drop_from_index(self, component: UIComponent) -> None:
        for descendant in iter_components([component]):
            if self._index.get(descendant.id) is descendant:
                del self._index[descendant.id]
                del self._parent[descendant.id]

    def _owner(self, component_id: str) -> Tuple[Optional[List[UIComponent]], Optional[UIComponent]]:
        parent_id = self._parent.get(component_id)
        if parent_id is None:
            return self.roots, None
        parent = self._index.get(parent_id)
        if parent is None or parent.children is None:
            return None, None
        return parent.children, parent

    def _lookup(self, component_id: str) -> Optional[Located]:
        component = self._index.get(component_id)
        if component is None:
            return None
        owner, parent = self._owner(component_id)
        index = _index_of(owner, component) if owner is not None else None
        if index is None:
            return None
        return Located(component=component, owner=owner, index=index, parent=parent)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def locate(self, component_id: str) -> Optional[Located]:
        """Find a component by id, or ``None`` if it is not in the tree."""
        found = self._lookup(component_id)
        if found is None and component_id in self.ids():
            logger.debug("component_index_stale", component_id=component_id)
            self.reindex()
            found = self._lookup(component_id)
        return found

    def get(self, component_id: str) -> Optional[UIComponent]:
        found = self.locate(component_id)
        return found.component if found else None

    def __contains__(self, component_id: str) -> bool:
        return self.locate(component_id) is not None

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())

    def walk(self) -> Iterator[UIComponent]:
        return iter_components(self.roots)

    def find_all(self, predicate: Callable[[UIComponent], bool]) -> List[UIComponent]:
        return [component for component in self.walk() if predicate(component)]

    def ids(self) -> List[str]:
        return [component.id for component in self.walk()]

    def parent_of(self, component_id: str) -> Optional[UIComponent]:
        found = self.locate(component_id)
        return found.parent if found else None

    def to_list(self) -> List[UIComponent]:
        """Deep copy of the root list."""
        return [component.model_copy(deep=True) for component in self.roots]

    def snapshot(self) -> List[dict]:
        """Document form of the tree, handy for equality checks."""
        return [component.to_dict() for component in self.roots]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def update(
        self,
        component_id: str,
        mutator: Callable[[UIComponent], Optional[UIComponent]],
    ) -> OpResult:
        """Replace a component with ``mutator(component)``.

        The mutator works on a copy; one that edits in place and returns
        ``None`` commits the edited copy. Nothing changes unless the result
        keeps every id in the tree unique.
        """
        found = self.locate(component_id)
        if found is None:
            logger.debug("component_update_skipped", component_id=component_id)
            return OpResult.noop(NoopReason.NOT_FOUND)

        draft = found.component.model_copy(deep=True)
        replacement = mutator(draft)
        if replacement is None:
            replacement = draft

        taken = set(self.ids()) - subtree_ids(found.component)
        new_ids = [c.id for c in iter_components([replacement])]
        if len(new_ids) != len(set(new_ids)) or taken.intersection(new_ids):
            logger.debug("component_update_duplicate_id", component_id=component_id)
            return OpResult.noop(NoopReason.DUPLICATE_ID)

        self._drop_from_index(found.component)
        found.owner[found.index] = replacement
        self._add_to_index(replacement, found.parent.id if found.parent else None)
        return OpResult.ok(replacement)

    def delete(self, component_id: str) -> OpResult:
        """Remove a component (and everything nested in it)."""
        found = self.locate(component_id)
        if found is None:
            logger.debug("component_delete_skipped", component_id=component_id)
            return OpResult.noop(NoopReason.NOT_FOUND)

        del found.owner[found.index]
        self._drop_from_index(found.component)
        return OpResult.ok(found.component)

    def insert(
        self,
        target_id: Optional[str],
        component: UIComponent,
        placement: Placement = Placement.AFTER,
    ) -> OpResult:
        """Insert ``component`` before/after/inside ``target_id``.

        A ``None`` target appends to the root list.
        """
        placement = Placement(placement)
        incoming = subtree_ids(component)
        if incoming & set(self.ids()):
            return OpResult.noop(NoopReason.DUPLICATE_ID)
        # Ids not in the live tree may still be indexed from a direct list edit.
        for stale_id in incoming & set(self._index):
            del self._index[stale_id]
            del self._parent[stale_id]

        if target_id is None:
            self.roots.append(component)
            self._add_to_index(component, None)
            return OpResult.ok(component)

        target = self.locate(target_id)
        if target is None:
            logger.debug("component_insert_skipped", target_id=target_id)
            return OpResult.noop(NoopReason.NOT_FOUND)

        if placement == Placement.INSIDE:
            if not target.component.is_container:
                logger.debug(
                    "component_insert_invalid_placement",
                    target_id=target_id,
                    target_type=target.component.type.value,
                )
                return OpResult.noop(NoopReason.INVALID_PLACEMENT)
            if target.component.children is None:
                target.component.children = []
            target.component.children.append(component)
            self._add_to_index(component, target.component.id)
            return OpResult.ok(component)

        offset = 0 if placement == Placement.BEFORE else 1
        target.owner.insert(target.index + offset, component)
        self._add_to_index(component, target.parent.id if target.parent else None)
        return OpResult.ok(component)

    def prepend(self, component: UIComponent) -> OpResult:
        """Insert at the top of the root list."""
        if not self.roots:
            return self.insert(None, component)
        return self.insert(self.roots[0].id, component, Placement.BEFORE)

    def move(
        self,
        component_id: str,
        target_id: Optional[str],
        placement: Placement = Placement.AFTER,
    ) -> OpResult:
        """Move an existing component as one call.

        The destination is checked before the component is detached, so a
        rejected move leaves the tree exactly as it was.
        """
        placement = Placement(placement)
        source = self.locate(component_id)
        if source is None:
            return OpResult.noop(NoopReason.NOT_FOUND)

        if target_id is not None:
            if target_id in subtree_ids(source.component):
                return OpResult.noop(NoopReason.CYCLE)
            target = self.locate(target_id)
            if target is None:
                return OpResult.noop(NoopReason.NOT_FOUND)
            if placement == Placement.INSIDE and not target.component.is_container:
                return OpResult.noop(NoopReason.INVALID_PLACEMENT)

        component = source.component
        del source.owner[source.index]
        self._drop_from_index(component)
        result = self.insert(target_id, component, placement)

        logger.debug(
            "component_moved",
            component_id=component_id,
            target_id=target_id,
            placement=placement.value,
        )
        return result


def make_component(
    component_type: ComponentType,
    label: Optional[str] = None,
    screen_name: Optional[str] = None,
    **fields,
) -> UIComponent:
    """Create a fresh component the way the palette does."""
    component_type = ComponentType(component_type)
    if label is None:
        if component_type == ComponentType.HEADER and screen_name:
            label = screen_name
        elif component_type == ComponentType.FILE:
            label = "Download File"
        else:
            label = f"New {component_type.value}"

    data = {
        "id": new_component_id(component_type.value.lower()),
        "type": component_type,
        "label": label,
        "style": {"padding": 8, "margin": 4},
    }
    data.update(fields)
    return UIComponent.model_validate(data)
