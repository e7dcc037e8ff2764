"""Run summaries returned by the stripper and the extractor."""

from pydantic import BaseModel


class RunStats(BaseModel):
    """Counters collected over one pass of a source stream."""

    lines_read: int = 0
    lines_written: int = 0
    elements_dropped: int = 0
    wiggles_extracted: int = 0
    wiggles_already_clean: int = 0
    sidecar_collisions: int = 0
    sidecars_written: int = 0
    terminal_state: str = "idle"

    @property
    def clean_exit(self) -> bool:
        """True when the stream ended with no element left open."""
        return self.terminal_state == "idle"

    def to_message(self) -> str:
        """Render a one-line summary for the console."""
        parts = [
            f"{self.lines_read:,} lines read",
            f"{self.lines_written:,} written",
            f"{self.elements_dropped:,} elements dropped",
        ]
        if self.wiggles_extracted or self.wiggles_already_clean or self.sidecar_collisions:
            parts.append(
                f"wiggles: {self.wiggles_extracted} extracted, "
                f"{self.wiggles_already_clean} already clean, "
                f"{self.sidecar_collisions} skipped"
            )
        if not self.clean_exit:
            parts.append(f"ended inside open element ({self.terminal_state})")
        return "; ".join(parts)
