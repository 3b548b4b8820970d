"""Typed errors raised by the dependency graph."""


class GraphError(Exception):
    """Base class for every error raised by a Graph."""


class AddElementError(GraphError):
    """An element was rejected by Graph.add_element. The graph is unchanged."""


class EmptyIdentifier(AddElementError):
    def __init__(self):
        super().__init__("The element ID is empty")


class EmptyDependencyIdentifier(AddElementError):
    def __init__(self, element_id: str, position: int):
        self.element_id = element_id
        self.position = position
        super().__init__(f"Dependency #{position} of element '{element_id}' is empty")


class AlreadyAdded(AddElementError):
    def __init__(self, element_id: str):
        self.element_id = element_id
        super().__init__("The element has already been added")


class OrderError(GraphError):
    """The graph's contents admit no initialization order."""


class CircleDetected(OrderError):
    """A dependency cycle was found.

    element_id is the element whose re-visit closed the cycle. It depends on
    insertion and declaration order: deterministic, but not necessarily the
    smallest or first member of the cycle.
    """

    def __init__(self, element_id: str):
        self.element_id = element_id
        super().__init__(f"Element '{element_id}' is part of the circle")


class MissingDependency(OrderError):
    def __init__(self, dependency_id: str):
        self.dependency_id = dependency_id
        super().__init__(f"Dependency '{dependency_id}' is missing")
