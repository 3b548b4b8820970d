from typing import Dict, Iterable, Iterator, List, Set, Tuple

from initorder.core.errors import (
    AlreadyAdded,
    CircleDetected,
    EmptyDependencyIdentifier,
    EmptyIdentifier,
    MissingDependency,
)

_IN_PROGRESS = 1
_DONE = 2


class Graph:
    """Elements and the elements they depend on.

    The graph only grows: add_element appends, nothing removes. Dependencies
    may name elements that are added later; they are resolved by init_order.

    Not thread-safe. Callers adding elements from several threads must
    serialize those calls themselves. Concurrent init_order calls on a graph
    nobody is modifying are fine, since init_order never mutates it.
    """

    def __init__(self):
        self._elements: List[str] = []
        self._dependencies: Dict[str, Tuple[str, ...]] = {}  # element -> what it depends on
        self._added: Set[str] = set()

    def add_element(self, element_id: str, dependencies: Iterable[str] = ()) -> None:
        """Add an element that must be initialized after its dependencies.

        Raises:
            EmptyIdentifier: element_id is empty.
            EmptyDependencyIdentifier: one of the dependencies is empty.
            AlreadyAdded: element_id is already in the graph.
            TypeError: dependencies is a single string rather than a sequence of IDs.
        """
        if isinstance(dependencies, (str, bytes)):
            raise TypeError(
                f"dependencies of '{element_id}' must be a sequence of IDs, not {type(dependencies).__name__}")
        if not element_id:
            raise EmptyIdentifier()
        dependencies = tuple(dependencies)
        for position, dependency in enumerate(dependencies):
            if not dependency:
                raise EmptyDependencyIdentifier(element_id, position)
        if element_id in self._added:
            raise AlreadyAdded(element_id)

        self._elements.append(element_id)
        self._dependencies[element_id] = dependencies
        self._added.add(element_id)

    @property
    def elements(self) -> Tuple[str, ...]:
        """Element IDs in insertion order."""
        return tuple(self._elements)

    def dependencies_of(self, element_id: str) -> Tuple[str, ...]:
        return self._dependencies[element_id]

    def init_order(self) -> List[str]:
        """Return every element ID, each after all of its dependencies.

        Depth-first post-order walk: roots are taken in insertion order and
        each element's dependencies in the order they were declared, so an
        unchanged graph always yields the same order. An explicit stack is
        used instead of recursion so long dependency chains don't hit the
        interpreter's recursion limit.

        Raises:
            CircleDetected: an element was reached again while its own
                dependencies were still being resolved.
            MissingDependency: a dependency was never added to the graph.
        """
        state: Dict[str, int] = {}
        order: List[str] = []

        for root in self._elements:
            if state.get(root) == _DONE:
                continue
            state[root] = _IN_PROGRESS
            stack: List[Tuple[str, Iterator[str]]] = [(root, iter(self._dependencies[root]))]

            while stack:
                element, pending = stack[-1]
                for dependency in pending:
                    mark = state.get(dependency)
                    if mark == _DONE:
                        continue
                    if dependency not in self._added:
                        raise MissingDependency(dependency)
                    if mark == _IN_PROGRESS:
                        raise CircleDetected(dependency)
                    state[dependency] = _IN_PROGRESS
                    stack.append((dependency, iter(self._dependencies[dependency])))
                    break
                else:
                    # All dependencies placed.
                    stack.pop()
                    state[element] = _DONE
                    order.append(element)

        return order

    def __len__(self) -> int:
        return len(self._elements)

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._added


def new_graph() -> Graph:
    """Create an empty graph."""
    return Graph()
