"""
XtreamEPG Background Task System

Provides:
- Interval task scheduling
- EPG refresh task
"""

from xtreamepg.tasks.epg_tasks import EPG_REFRESH_TASK, refresh_epg_task
from xtreamepg.tasks.scheduler import ScheduledTask, TaskScheduler

__all__ = [
    "EPG_REFRESH_TASK",
    "ScheduledTask",
    "TaskScheduler",
    "refresh_epg_task",
]
