"""Runs the git command that synchronizes one repository."""

import asyncio
import os
import signal
import time
from pathlib import Path

import structlog

from github_org_mirror.synchronize.models import SyncOperation, SyncTask
from github_org_mirror.synchronize.results import RepositorySyncResult, SyncOutcome

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

STDERR_TAIL_LENGTH = 500
TERMINATE_WAIT_TIMEOUT = 1.0

SUCCESS_OUTCOMES = {
    SyncOperation.UPDATE: SyncOutcome.UPDATED,
    SyncOperation.ACQUIRE: SyncOutcome.ACQUIRED,
}


class GitSyncExecutor:
    """Executes ``git pull`` for existing repositories and ``git clone`` for new ones.

    Every command is bounded by its task's deadline. Failures never raise;
    they are returned as FAILED results so one repository cannot affect
    another.
    """

    def __init__(self, repo_dir: Path, git_executable: str = "git") -> None:
        self.repo_dir = repo_dir
        self.git_executable = git_executable

    def build_command(self, task: SyncTask) -> list[str]:
        """Return the git command line for a task."""
        if task.operation is SyncOperation.UPDATE:
            return [self.git_executable, "-C", str(self.repo_dir / task.repository_name), "pull"]
        return [self.git_executable, "-C", str(self.repo_dir), "clone", task.repository.ssh_url]

    async def run(self, task: SyncTask) -> RepositorySyncResult:
        """Run the task's git command and report how it went."""
        command = self.build_command(task)
        logger.debug("Running git command", repository=task.repository_name, operation=task.operation.value, command=command)
        start_time = time.time()

        def result(outcome: SyncOutcome, reason: str | None = None, timed_out: bool = False) -> RepositorySyncResult:
            return RepositorySyncResult(
                repository_name=task.repository_name,
                operation=task.operation,
                outcome=outcome,
                reason=reason,
                timed_out=timed_out,
                duration=round(time.time() - start_time, 2),
            )

        if task.deadline.expired():
            logger.error("Deadline exceeded before git command started", repository=task.repository_name, operation=task.operation.value)
            return result(SyncOutcome.FAILED, "context deadline exceeded", timed_out=True)

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
                start_new_session=True,
            )
        except OSError as exc:
            logger.error("Could not start git", repository=task.repository_name, operation=task.operation.value, error=str(exc))
            return result(SyncOutcome.FAILED, f"could not start git: {exc}")

        try:
            async with asyncio.timeout_at(task.deadline.when):
                _, stderr = await process.communicate()
        except TimeoutError:
            await self._terminate(process)
            logger.error(
                "Deadline exceeded for git command",
                repository=task.repository_name,
                operation=task.operation.value,
            )
            return result(SyncOutcome.FAILED, "context deadline exceeded", timed_out=True)
        except asyncio.CancelledError:
            await self._terminate(process)
            raise

        if process.returncode != 0:
            stderr_text = stderr.decode(errors="replace").strip()[-STDERR_TAIL_LENGTH:] if stderr else ""
            reason = f"git {'pull' if task.operation is SyncOperation.UPDATE else 'clone'} exited with status {process.returncode}"
            if stderr_text:
                reason = f"{reason}: {stderr_text}"
            logger.error(
                "Git command failed",
                repository=task.repository_name,
                operation=task.operation.value,
                returncode=process.returncode,
                stderr=stderr_text,
            )
            return result(SyncOutcome.FAILED, reason)

        outcome = SUCCESS_OUTCOMES[task.operation]
        if outcome is SyncOutcome.UPDATED:
            logger.info(f"pull successful for {task.repository_name}", repository=task.repository_name)
        else:
            logger.info(f"clone successful for {task.repository_name}", repository=task.repository_name)
        return result(outcome)

    @staticmethod
    async def _terminate(process: asyncio.subprocess.Process) -> None:
        """Kill git and every process it started, then reap it.

        git runs in its own session, so its process group also holds ssh and
        the other helpers that share its output pipes. Reaping waits for those
        pipes to close and is bounded by TERMINATE_WAIT_TIMEOUT.
        """
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        try:
            async with asyncio.timeout(TERMINATE_WAIT_TIMEOUT):
                await process.wait()
        except TimeoutError:
            logger.warning("Killed git command did not exit in time", pid=process.pid)
