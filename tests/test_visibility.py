"""可见性过滤纯函数测试

覆盖 创建者 / 被指派人 / 同队成员 / 无关用户 x 三种可见范围。
"""

from datetime import UTC, datetime

import pytest
from taskforge.core.models import Priority, Task, Visibility
from taskforge.services.visibility import filter_visible_tasks, is_task_visible

CREATOR = "creator"
ASSIGNEE = "assignee"
TEAMMATE = "teammate"
STRANGER = "stranger"


def _task(visibility: Visibility, assignee_id: str | None = ASSIGNEE, task_id: str = "k1") -> Task:
    now = datetime.now(UTC)
    return Task(
        task_id=task_id,
        title="t",
        priority=Priority.LOW,
        visibility=visibility,
        assignee_id=assignee_id,
        creator_id=CREATOR,
        created_at=now,
        updated_at=now,
    )


# 查看者 -> 其与创建者共享团队时的 teammate 集合
_TEAMMATES = {
    CREATOR: {TEAMMATE},
    ASSIGNEE: set(),
    TEAMMATE: {CREATOR},
    STRANGER: set(),
}


class TestVisibilityMatrix:
    """可见性判定矩阵"""

    @pytest.mark.parametrize(
        "visibility,viewer,expected",
        [
            (Visibility.PUBLIC, CREATOR, True),
            (Visibility.PUBLIC, ASSIGNEE, True),
            (Visibility.PUBLIC, TEAMMATE, True),
            (Visibility.PUBLIC, STRANGER, True),
            (Visibility.RESTRICTED, CREATOR, True),
            (Visibility.RESTRICTED, ASSIGNEE, True),
            (Visibility.RESTRICTED, TEAMMATE, True),
            (Visibility.RESTRICTED, STRANGER, False),
            (Visibility.PRIVATE, CREATOR, True),
            (Visibility.PRIVATE, ASSIGNEE, True),
            (Visibility.PRIVATE, TEAMMATE, False),
            (Visibility.PRIVATE, STRANGER, False),
        ],
    )
    def test_matrix(self, visibility, viewer, expected):
        assert is_task_visible(_task(visibility), viewer, _TEAMMATES[viewer]) is expected

    def test_unassigned_private_only_creator(self):
        task = _task(Visibility.PRIVATE, assignee_id=None)
        assert is_task_visible(task, CREATOR, set()) is True
        assert is_task_visible(task, ASSIGNEE, set()) is False


class TestFilterVisibleTasks:
    """批量过滤"""

    def test_preserves_order(self):
        tasks = [
            _task(Visibility.PUBLIC, task_id="a"),
            _task(Visibility.PRIVATE, task_id="b"),
            _task(Visibility.RESTRICTED, task_id="c"),
        ]
        visible = filter_visible_tasks(tasks, TEAMMATE, _TEAMMATES[TEAMMATE])
        assert [t.task_id for t in visible] == ["a", "c"]

    def test_empty_input(self):
        assert filter_visible_tasks([], STRANGER, set()) == []
