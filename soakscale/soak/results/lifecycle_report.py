from dataclasses import dataclass


@dataclass(slots=True)
class LifecycleReport:
    job_name: str
    cycles_completed: int = 0
    jobs_submitted: int = 0
    snapshots_exported: int = 0
    snapshots_destroyed: int = 0
    final_odds: bool = False
