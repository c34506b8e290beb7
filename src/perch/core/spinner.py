# =============================================================================
# Spinner Model
# =============================================================================
# Frame counter for the loading indicator.
#
# Each time loading starts the spinner is restarted with a fresh tag. Tick
# events carry the tag they were scheduled with, and only ticks carrying the
# current tag advance the frame and reschedule. Restarting therefore retires
# any older tick chain instead of running two chains at double speed.
# =============================================================================

from rich.spinner import SPINNERS

# Braille "dots" spinner from rich's spinner table
DOT_FRAMES = tuple(SPINNERS["dots"]["frames"])

# Seconds between frames
FRAME_INTERVAL = 0.1


class Spinner:
    """Animated loading indicator state."""

    def __init__(self, frames: tuple[str, ...] = DOT_FRAMES) -> None:
        self.frames = frames
        self.frame = 0
        self.tag = 0

    def restart(self) -> int:
        """Start a new tick chain. Returns the tag to schedule ticks with."""
        self.tag += 1
        return self.tag

    def advance(self, tag: int) -> bool:
        """
        Advance one frame if `tag` is current.

        Returns:
            True if the tick was accepted (and the next one should be
            scheduled), False if it belonged to a retired chain.
        """
        if tag != self.tag:
            return False
        self.frame = (self.frame + 1) % len(self.frames)
        return True

    def view(self) -> str:
        return self.frames[self.frame]
