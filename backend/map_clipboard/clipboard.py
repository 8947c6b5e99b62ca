"""Copy the displayed map to the system clipboard.

Two tiers are tried in order:
  1. an async writer (pyperclip, run in a worker thread)
  2. a synchronous fallback that pipes the text into the platform copy command

The caller always gets exactly one outcome back: CopySucceeded or CopyFailed.
"""

import asyncio
import os
import shutil
import subprocess
import sys
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Union

import pyperclip
from dotenv import load_dotenv

load_dotenv()

# Notice timings (milliseconds)
COPY_NOTICE_DURATION_MS = int(os.getenv("COPY_NOTICE_DURATION_MS", "3000"))
COPY_NOTICE_FADE_MS = int(os.getenv("COPY_NOTICE_FADE_MS", "300"))
CLIPBOARD_COMMAND_TIMEOUT = float(os.getenv("CLIPBOARD_COMMAND_TIMEOUT", "10"))

COPIED_TO_CLIPBOARD = "Copied to clipboard!"
COPY_FAILED = "Copy failed. Please select the text and copy it manually."

AsyncWriter = Callable[[str], Awaitable[None]]
SyncCopier = Callable[[str], bool]


@dataclass(frozen=True)
class CopySucceeded:
    method: str  # "async" or "fallback"


@dataclass(frozen=True)
class CopyFailed:
    reason: str


CopyOutcome = Union[CopySucceeded, CopyFailed]


@dataclass(frozen=True)
class CopyNotice:
    """Transient message shown after a copy attempt."""

    type: str  # "success" or "error"
    message: str
    duration_ms: int = COPY_NOTICE_DURATION_MS
    fade_ms: int = COPY_NOTICE_FADE_MS


def notice_for(outcome: CopyOutcome) -> CopyNotice:
    if isinstance(outcome, CopySucceeded):
        return CopyNotice(type="success", message=COPIED_TO_CLIPBOARD)
    return CopyNotice(type="error", message=COPY_FAILED)


async def pyperclip_writer(text: str) -> None:
    """Async clipboard write; raises pyperclip.PyperclipException when no clipboard is reachable."""
    await asyncio.to_thread(pyperclip.copy, text)


def _copy_command() -> Optional[List[str]]:
    if sys.platform == "darwin":
        return ["pbcopy"] if shutil.which("pbcopy") else None
    if sys.platform.startswith("win"):
        return ["clip"]

    candidates = [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]
    for cmd in candidates:
        if shutil.which(cmd[0]):
            return cmd
    return None


def command_copy(text: str) -> bool:
    """Synchronous fallback: feed the text to the platform copy command."""
    cmd = _copy_command()
    if cmd is None:
        print("  No clipboard command found (pbcopy, clip, wl-copy, xclip, xsel)")
        return False

    result = subprocess.run(
        cmd,
        input=text.encode("utf-8"),
        capture_output=True,
        timeout=CLIPBOARD_COMMAND_TIMEOUT,
    )
    if result.returncode != 0:
        print(f"  {cmd[0]} exited with {result.returncode}: {result.stderr.decode(errors='replace').strip()}")
        return False
    return True


async def copy_to_clipboard(
    text: str,
    writer: Optional[AsyncWriter] = pyperclip_writer,
    fallback: SyncCopier = command_copy,
) -> CopyOutcome:
    """
    Place the displayed text on the clipboard.

    Args:
        text: The already-filtered text currently on display
        writer: Async clipboard writer, or None when that capability is unavailable
        fallback: Synchronous copier returning True on success

    Returns:
        CopySucceeded if either tier worked, CopyFailed otherwise. Never raises.
    """
    if writer is not None:
        try:
            await writer(text)
            return CopySucceeded(method="async")
        except Exception as e:
            print(f"Async clipboard write failed ({type(e).__name__}: {e}), trying fallback...")

    try:
        copied = fallback(text)
    except Exception as e:
        print(f"Fallback copy failed: {type(e).__name__}: {e}")
        return CopyFailed(reason=str(e) or type(e).__name__)

    if copied:
        return CopySucceeded(method="fallback")
    return CopyFailed(reason="Fallback copy reported failure")


def copy_to_clipboard_sync(text: str, **kwargs) -> CopyOutcome:
    """Blocking wrapper for callers outside an event loop (CLI)."""
    return asyncio.run(copy_to_clipboard(text, **kwargs))
