from . import projects, stats, tasks

__all__ = ["projects", "stats", "tasks"]
