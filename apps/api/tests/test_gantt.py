from datetime import date

import pytest

from fieldops.scheduling.errors import SchedulingValidationError
from fieldops.scheduling.gantt import chart_range, project_gantt_layout
from fieldops.schemas.projects import TaskSnapshot


def task(task_id, start, end):
    return TaskSnapshot(task_id=task_id, name=task_id.title(), start_date=start, end_date=end)


class TestGanttLayout:
    def test_bar_positions(self):
        tasks = [
            task("site", date(2025, 1, 1), date(2025, 1, 10)),
            task("fitout", date(2025, 1, 11), date(2025, 1, 20)),
        ]
        out = project_gantt_layout(date(2025, 1, 1), date(2025, 1, 20), tasks, {"fitout"})

        assert out.total_days == 20
        site, fitout = out.bars
        assert site.left_percent == pytest.approx(0.0)
        assert site.width_percent == pytest.approx(50.0)
        assert fitout.start_offset_days == 10
        assert fitout.left_percent == pytest.approx(50.0)
        assert fitout.is_critical is True
        assert site.is_critical is False

    def test_tasks_outside_range_are_not_clamped(self):
        out = project_gantt_layout(date(2025, 1, 5), date(2025, 1, 14), [task("early", date(2025, 1, 1), date(2025, 1, 2))])
        assert out.bars[0].left_percent == pytest.approx(-40.0)

    def test_inverted_range_rejected(self):
        with pytest.raises(SchedulingValidationError):
            project_gantt_layout(date(2025, 1, 10), date(2025, 1, 1), [])

    def test_chart_range_widens_to_tasks(self):
        tasks = [task("a", date(2025, 1, 3), date(2025, 2, 2))]
        assert chart_range(tasks, date(2025, 1, 5), date(2025, 1, 31)) == (date(2025, 1, 3), date(2025, 2, 2))

    def test_chart_range_needs_something(self):
        with pytest.raises(SchedulingValidationError):
            chart_range([])
