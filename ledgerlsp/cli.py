"""Running the hledger command-line program."""

from __future__ import annotations

import subprocess


class HledgerError(RuntimeError):
    """hledger could not be run, timed out, or reported failure."""

    def __init__(self, message: str, stdout: str = "") -> None:
        super().__init__(message)
        self.stdout = stdout


class HledgerClient:
    """Runs an hledger executable with a per-command timeout in seconds."""

    def __init__(self, path: str = "hledger", timeout: float = 5.0) -> None:
        self.path = path
        self.timeout = timeout
        self.available = self._check_available()

    def _check_available(self) -> bool:
        try:
            completed = subprocess.run(
                [self.path, "--version"],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError:
            return False
        return completed.returncode == 0

    def run(self, file: str, *args: str) -> str:
        """Run hledger (with ``-f file`` when given) and return its stdout."""
        if not self.available:
            raise HledgerError(f"hledger not available at path: {self.path}")

        command = [self.path]
        if file:
            command += ["-f", file]
        command += list(args)

        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise HledgerError(f"command timed out after {self.timeout:g}s") from exc
        except OSError as exc:
            raise HledgerError(f"hledger error: {exc}") from exc

        if completed.returncode != 0:
            raise HledgerError(
                f"hledger error: {completed.stderr}: exit status {completed.returncode}",
                stdout=completed.stdout,
            )
        return completed.stdout