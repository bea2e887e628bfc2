"""Progress cadence and observer interface.

Progress reporting is advisory. Long-running operations accept an
optional observer and notify it only on cadence steps; passing None
must never change control flow or outcomes.
"""

from typing import Protocol


class ProgressObserver(Protocol):
    """Receiver for progress notifications."""

    def update(self, stage: str, current: int, total: int, message: str) -> None:
        """Handle a progress notification.

        Args:
            stage: Name of the operation reporting progress (e.g. "discover").
            current: 1-based index of the item just handled.
            total: Total number of items in the operation.
            message: Short description of the current item.
        """


def progress_step(total: int) -> int:
    """Return the update frequency for a total item count.

    The step is ``10 ** max(0, digits(total) - 2)``, minimum 1, so a run
    emits on the order of 10 to 100 updates regardless of size.

    Examples:
        >>> progress_step(99)
        1
        >>> progress_step(500)
        10
        >>> progress_step(12000)
        1000
    """
    if total <= 0:
        return 1
    digits = len(str(total))
    return 10 ** max(0, digits - 2)


def should_report(current: int, total: int) -> bool:
    """Check if an item index falls on a reporting step.

    True for the first item, the last item and every multiple of
    :func:`progress_step`.

    Args:
        current: 1-based index of the item.
        total: Total number of items.
    """
    if current <= 1 or current >= total:
        return True
    return current % progress_step(total) == 0


def notify_progress(
    observer: ProgressObserver | None,
    stage: str,
    current: int,
    total: int,
    message: str = "",
) -> None:
    """Notify the observer if one is set and the index is on a reporting step."""
    if observer is None or not should_report(current, total):
        return
    observer.update(stage, current, total, message)
