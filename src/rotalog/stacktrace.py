"""
Typed call-stack capture.
"""

from __future__ import annotations

import sys
import traceback
from typing import Any, Optional

STACK_HEADER = "Stack (most recent call last):"


def capture_stack(skip: int = 0, limit: Optional[int] = None) -> traceback.StackSummary:
    """
    Capture the stack of the caller.

    ``skip=0`` ends the stack at the function calling ``capture_stack``;
    every increment drops one more innermost frame, so a wrapper passes
    ``skip=1`` to report its own caller.
    """
    frame = sys._getframe(skip + 1)
    return traceback.extract_stack(frame, limit=limit)


def format_stack(stack: Any) -> str:
    if isinstance(stack, traceback.StackSummary):
        return STACK_HEADER + "\n" + "".join(stack.format()).rstrip("\n")
    return str(stack).rstrip("\n")
