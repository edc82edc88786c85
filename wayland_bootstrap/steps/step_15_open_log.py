from __future__ import annotations

from ..context import BootstrapContext
from ..logging_utils import open_log_file


class OpenLogStep:
    """First write to disk; runs only once preflight has passed."""

    step_id = "15_open_log"

    def __init__(self, log_path: str):
        self.log_path = log_path

    def run(self, ctx: BootstrapContext) -> None:
        open_log_file(self.log_path)
