"""任务可见性过滤 -- 纯函数，不访问存储

判定顺序：
1. 查看者是创建者 -> 可见
2. 查看者是被指派人 -> 可见
3. 按 visibility 分派：
   PUBLIC     -> 所有人可见
   RESTRICTED -> 查看者与创建者同属至少一个 ACCEPTED 团队时可见
   PRIVATE    -> 仅创建者（已由规则 1 覆盖）
"""

from collections.abc import Collection, Iterable
from typing import assert_never

from taskforge.core.models import Task, Visibility


def is_task_visible(task: Task, viewer_id: str, teammate_ids: Collection[str]) -> bool:
    """判断任务对查看者是否可见

    Args:
        task: 待判定任务
        viewer_id: 查看者用户 ID
        teammate_ids: 与查看者共享 ACCEPTED 团队的用户 ID 集合

    Returns:
        True 如果可见
    """
    if task.creator_id == viewer_id:
        return True
    if task.assignee_id is not None and task.assignee_id == viewer_id:
        return True

    match task.visibility:
        case Visibility.PUBLIC:
            return True
        case Visibility.RESTRICTED:
            return task.creator_id in teammate_ids
        case Visibility.PRIVATE:
            return False
        case _:
            assert_never(task.visibility)


def filter_visible_tasks(
    tasks: Iterable[Task],
    viewer_id: str,
    teammate_ids: Collection[str],
) -> list[Task]:
    """保留对查看者可见的任务，保持原有顺序"""
    return [task for task in tasks if is_task_visible(task, viewer_id, teammate_ids)]
