"""
In-memory index of processes and jobs.

Two levels of lookup: processes by normalized name, and jobs by process
name then job name. Entries are never evicted. An index belongs to one
ProcessManager; share it between managers only when they are not used
concurrently.
"""
from typing import Dict, Optional

from process_cache.models.process import Process
from process_cache.models.process_job import ProcessJob


class ProcessIndex:
    """Process-local cache of already observed processes and jobs."""

    def __init__(self):
        self._processes: Dict[str, Process] = {}
        self._jobs: Dict[str, Dict[str, ProcessJob]] = {}

    def get_process(self, name: str) -> Optional[Process]:
        return self._processes.get(name)

    def add_process(self, process: Process) -> Process:
        """Index a process and reserve its job table."""
        self._processes[process.name] = process
        self._jobs.setdefault(process.name, {})
        return process

    def get_job(self, process: Process, job_name: str) -> Optional[ProcessJob]:
        return self._jobs.get(process.name, {}).get(job_name)

    def add_job(self, process: Process, job: ProcessJob) -> ProcessJob:
        """Index a job together with its owning process."""
        if process.name not in self._processes:
            self.add_process(process)
        self._jobs[process.name][job.name] = job
        return job
