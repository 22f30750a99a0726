"""
Critical Path Method over project tasks.

Each task keeps its authored duration (end_date - start_date + 1 days) but its
position is re-laid-out from the dependency graph: forward pass for earliest
start/finish, backward pass for latest start/finish. All values are whole-day
offsets from the earliest authored start date; finish offsets are exclusive.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Optional

from fieldops.scheduling.errors import DependencyCycleError, SchedulingValidationError, UnknownTaskError
from fieldops.schemas.projects import (
    CriticalPathOut,
    DependencySnapshot,
    DependencyType,
    TaskSnapshot,
    TaskTiming,
)

logger = logging.getLogger(__name__)

_WHITE, _GRAY, _BLACK = 0, 1, 2


@dataclass
class CriticalPathResult:
    critical_task_ids: set[str] = field(default_factory=set)
    slack_by_task: dict[str, int] = field(default_factory=dict)
    project_duration: int = 0
    timings: dict[str, TaskTiming] = field(default_factory=dict)
    project_start: Optional[date] = None

    def to_out(self) -> CriticalPathOut:
        return CriticalPathOut(
            project_start=self.project_start,
            project_duration=self.project_duration,
            critical_task_ids=sorted(self.critical_task_ids),
            slack_by_task=dict(self.slack_by_task),
            timings=dict(self.timings),
        )


def _topological_order(task_ids: list[str], preds: dict[str, list[str]]) -> list[str]:
    """Predecessors before successors. Raises on the first back edge found."""
    color = {t: _WHITE for t in task_ids}
    order: list[str] = []

    for root in task_ids:
        if color[root] != _WHITE:
            continue

        color[root] = _GRAY
        path = [root]
        stack = [(root, iter(preds.get(root, ())))]

        while stack:
            node, it = stack[-1]
            nxt = next(it, None)

            if nxt is None:
                stack.pop()
                path.pop()
                color[node] = _BLACK
                order.append(node)
                continue

            if color[nxt] == _GRAY:
                # path runs successor -> predecessor; report it in scheduling order
                cycle = path[path.index(nxt):] + [nxt]
                raise DependencyCycleError(list(reversed(cycle)))

            if color[nxt] == _WHITE:
                color[nxt] = _GRAY
                path.append(nxt)
                stack.append((nxt, iter(preds.get(nxt, ()))))

    return order


def _forward_constraint(dep: DependencySnapshot, es: dict, ef: dict, succ_duration: int) -> int:
    p = dep.depends_on_task_id
    if dep.dependency_type == DependencyType.start_to_start:
        return es[p] + dep.lag_days
    if dep.dependency_type == DependencyType.finish_to_finish:
        return ef[p] + dep.lag_days - succ_duration
    if dep.dependency_type == DependencyType.start_to_finish:
        return es[p] + dep.lag_days - succ_duration
    return ef[p] + dep.lag_days


def _backward_constraint(dep: DependencySnapshot, ls: dict, lf: dict, pred_duration: int) -> int:
    s = dep.task_id
    if dep.dependency_type == DependencyType.start_to_start:
        return ls[s] - dep.lag_days + pred_duration
    if dep.dependency_type == DependencyType.finish_to_finish:
        return lf[s] - dep.lag_days
    if dep.dependency_type == DependencyType.start_to_finish:
        return lf[s] - dep.lag_days + pred_duration
    return ls[s] - dep.lag_days


def compute_critical_path(
    tasks: Iterable[TaskSnapshot],
    dependencies: Iterable[DependencySnapshot],
) -> CriticalPathResult:
    tasks = list(tasks)
    dependencies = list(dependencies)

    if not tasks:
        return CriticalPathResult()

    by_id: dict[str, TaskSnapshot] = {}
    for t in tasks:
        if t.task_id in by_id:
            raise SchedulingValidationError(f"duplicate task id {t.task_id}")
        by_id[t.task_id] = t

    incoming: dict[str, list[DependencySnapshot]] = defaultdict(list)
    outgoing: dict[str, list[DependencySnapshot]] = defaultdict(list)
    preds: dict[str, list[str]] = defaultdict(list)

    for dep in dependencies:
        for ref in (dep.task_id, dep.depends_on_task_id):
            if ref not in by_id:
                raise UnknownTaskError(ref, dep.dependency_id)
        incoming[dep.task_id].append(dep)
        outgoing[dep.depends_on_task_id].append(dep)
        preds[dep.task_id].append(dep.depends_on_task_id)

    order = _topological_order([t.task_id for t in tasks], preds)
    origin = min(t.start_date for t in tasks)

    # Forward pass
    es: dict[str, int] = {}
    ef: dict[str, int] = {}
    for tid in order:
        task = by_id[tid]
        duration = task.duration_days
        if incoming[tid]:
            es[tid] = max(_forward_constraint(d, es, ef, duration) for d in incoming[tid])
        else:
            es[tid] = (task.start_date - origin).days
        ef[tid] = es[tid] + duration

    project_finish = max(ef.values())

    # Backward pass
    ls: dict[str, int] = {}
    lf: dict[str, int] = {}
    for tid in reversed(order):
        duration = by_id[tid].duration_days
        if outgoing[tid]:
            lf[tid] = min(
                project_finish,
                min(_backward_constraint(d, ls, lf, duration) for d in outgoing[tid]),
            )
        else:
            lf[tid] = project_finish
        ls[tid] = lf[tid] - duration

    result = CriticalPathResult()
    for t in tasks:
        tid = t.task_id
        slack = ls[tid] - es[tid]
        result.slack_by_task[tid] = slack
        result.timings[tid] = TaskTiming(
            earliest_start=es[tid],
            earliest_finish=ef[tid],
            latest_start=ls[tid],
            latest_finish=lf[tid],
            slack=slack,
        )
        if slack <= 0:
            result.critical_task_ids.add(tid)

    earliest = min(es.values())
    result.project_duration = project_finish - earliest
    result.project_start = origin + timedelta(days=earliest)

    logger.debug(
        f"Critical path: {len(result.critical_task_ids)}/{len(tasks)} tasks critical, "
        f"duration {result.project_duration} days"
    )
    return result
