"""
Lightweight DAG runner for the admission import.

- Tasks run in dependency order (Kahn's algorithm)
- Each task receives the shared context merged with its upstream results
- A failing task is recorded, not raised; its dependents are skipped
- Per-task status and timing end up in the run summary
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)

StepFn = Callable[[dict[str, Any]], "dict[str, Any] | None"]


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class TaskNode:
    name: str
    execute_fn: StepFn
    depends_on: list[str] = field(default_factory=list)
    status: TaskStatus = TaskStatus.PENDING
    result: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    duration_ms: float = 0.0

    def summary(self) -> dict[str, Any]:
        if self.status == TaskStatus.SKIPPED:
            return {"status": self.status.value}
        return {
            "status": self.status.value,
            "duration_ms": round(self.duration_ms, 2),
            "error": self.error,
        }


class DAG:
    """
    A named set of tasks wired by their dependencies.

        dag = DAG("admission_import")
        dag.add_task("extract", extract)
        dag.add_task("validate", validate, depends_on=["extract"])
        summary = dag.run({"csv_path": "healthcare_dataset.csv"})
    """

    def __init__(self, name: str):
        self.name = name
        self.tasks: dict[str, TaskNode] = {}

    def add_task(
        self,
        name: str,
        execute_fn: StepFn,
        depends_on: list[str] | None = None,
    ) -> DAG:
        if name in self.tasks:
            raise ValueError(f"Duplicate task name: {name}")
        self.tasks[name] = TaskNode(name=name, execute_fn=execute_fn, depends_on=list(depends_on or []))
        return self

    def execution_order(self) -> list[str]:
        dependents: dict[str, list[str]] = {name: [] for name in self.tasks}
        waiting: dict[str, int] = {}
        for task in self.tasks.values():
            for dep in task.depends_on:
                if dep not in self.tasks:
                    raise ValueError(f"Task '{task.name}' depends on unknown task '{dep}'")
                dependents[dep].append(task.name)
            waiting[task.name] = len(task.depends_on)

        ready = deque(name for name, count in waiting.items() if count == 0)
        order: list[str] = []
        while ready:
            current = ready.popleft()
            order.append(current)
            for name in dependents[current]:
                waiting[name] -= 1
                if waiting[name] == 0:
                    ready.append(name)

        if len(order) != len(self.tasks):
            raise ValueError("Cycle detected in DAG")
        return order

    def _run_task(self, task: TaskNode, context: dict[str, Any]) -> None:
        task.status = TaskStatus.RUNNING
        logger.info("Running task '%s'", task.name)
        start = time.perf_counter()
        try:
            task.result = task.execute_fn(context) or {}
            task.status = TaskStatus.SUCCESS
        except Exception as exc:
            task.status = TaskStatus.FAILED
            task.error = str(exc)
            logger.error("Task '%s' failed: %s", task.name, exc)
        finally:
            task.duration_ms = (time.perf_counter() - start) * 1000

    def run(self, initial_context: dict[str, Any] | None = None) -> dict[str, Any]:
        order = self.execution_order()
        context = dict(initial_context or {})
        logger.info("Starting pipeline '%s' with %d tasks", self.name, len(order))

        for name in order:
            task = self.tasks[name]
            if any(self.tasks[dep].status != TaskStatus.SUCCESS for dep in task.depends_on):
                task.status = TaskStatus.SKIPPED
                logger.warning("Skipping '%s' – upstream dependency did not succeed", name)
                continue
            for dep in task.depends_on:
                context.update(self.tasks[dep].result)
            self._run_task(task, context)

        ok = all(t.status == TaskStatus.SUCCESS for t in self.tasks.values())
        status = "completed" if ok else "failed"
        logger.info("Pipeline '%s' finished – %s", self.name, status)
        return {
            "pipeline": self.name,
            "status": status,
            "tasks": {name: self.tasks[name].summary() for name in order},
        }

    def record_counts(self) -> dict[str, int]:
        """Every `*_count` value the tasks reported."""
        counts: dict[str, int] = {}
        for task in self.tasks.values():
            counts.update({k: v for k, v in task.result.items() if k.endswith("_count")})
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "tasks": {name: {"depends_on": task.depends_on} for name, task in self.tasks.items()},
        }
