class SchedulingError(Exception):
    """Base class for errors raised by the scheduling core."""


class SchedulingValidationError(SchedulingError, ValueError):
    """Input is malformed (bad interval, missing worker, duplicate ids...)."""


class DependencyCycleError(SchedulingError):
    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__("Task dependencies form a cycle: " + " -> ".join(cycle))


class UnknownTaskError(SchedulingError):
    def __init__(self, task_id: str, dependency_id: str | None = None):
        self.task_id = task_id
        self.dependency_id = dependency_id
        where = f" (dependency {dependency_id})" if dependency_id else ""
        super().__init__(f"Dependency references unknown task {task_id}{where}")
