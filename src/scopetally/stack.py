"""Call stack capture and scrubbing of machinery frames."""

from __future__ import annotations

import os
import sys
import traceback
from pathlib import Path
from types import ModuleType, TracebackType
from typing import Callable, Iterable

from scopetally.outcomes import Frame

FramePredicate = Callable[[Frame], bool]

PACKAGE_DIR = Path(__file__).resolve().parent


def capture_stack() -> tuple[Frame, ...]:
    """Return the caller's stack as frames, innermost first."""
    summaries = traceback.extract_stack(sys._getframe(1))
    return tuple(
        Frame(s.name, s.filename, s.lineno or 0) for s in reversed(summaries)
    )


def frames_from_traceback(tb: TracebackType | None) -> tuple[Frame, ...]:
    """Convert a traceback (outermost first) to frames, innermost first."""
    if tb is None:
        return ()
    summaries = traceback.extract_tb(tb)
    return tuple(
        Frame(s.name, s.filename, s.lineno or 0) for s in reversed(summaries)
    )


def package_frame(directories: Iterable[str | Path]) -> FramePredicate:
    """Predicate matching frames whose file lives under one of *directories*."""
    roots = tuple(str(Path(d).resolve()) + os.sep for d in directories)

    def _matches(frame: Frame) -> bool:
        try:
            path = str(Path(frame.file).resolve())
        except (OSError, ValueError):
            return False
        return path.startswith(roots)

    return _matches


def module_frame(modules: Iterable[ModuleType]) -> FramePredicate:
    """Predicate matching frames that run code of one of *modules*.

    Frozen stdlib modules report their frames as ``<frozen name>``.
    """
    files = set()
    for module in modules:
        files.add(f"<frozen {module.__name__}>")
        if getattr(module, "__file__", None):
            files.add(str(Path(module.__file__).resolve()))

    def _matches(frame: Frame) -> bool:
        if frame.file in files:
            return True
        try:
            return str(Path(frame.file).resolve()) in files
        except (OSError, ValueError):
            return False

    return _matches


class StackScrubber:
    """Trims the frames of the recording machinery from a stack.

    Stacks are innermost first. The leading run of internal frames (the
    recording and assertion helpers) is dropped, then frames are kept up to
    the next internal frame going outward, which is the machinery that
    invoked the test body; it and everything beyond it are dropped.
    """

    def __init__(self, is_internal: FramePredicate) -> None:
        self.is_internal = is_internal

    @classmethod
    def default(
        cls,
        extra_paths: Iterable[str | Path] = (),
        modules: Iterable[ModuleType] = (),
    ) -> StackScrubber:
        in_package = package_frame([PACKAGE_DIR, *extra_paths])
        in_modules = module_frame(modules)
        return cls(lambda frame: in_package(frame) or in_modules(frame))

    def scrub(self, frames: tuple[Frame, ...]) -> tuple[Frame, ...]:
        start = 0
        while start < len(frames) and self.is_internal(frames[start]):
            start += 1
        end = start
        while end < len(frames) and not self.is_internal(frames[end]):
            end += 1
        if start == end:
            return frames
        return frames[start:end]
