"""Clipboard export of the displayed map."""

from .clipboard import (
    COPY_NOTICE_DURATION_MS,
    COPY_NOTICE_FADE_MS,
    CopyFailed,
    CopyNotice,
    CopyOutcome,
    CopySucceeded,
    command_copy,
    copy_to_clipboard,
    copy_to_clipboard_sync,
    notice_for,
    pyperclip_writer,
)

__all__ = [
    'COPY_NOTICE_DURATION_MS',
    'COPY_NOTICE_FADE_MS',
    'CopyFailed',
    'CopyNotice',
    'CopyOutcome',
    'CopySucceeded',
    'command_copy',
    'copy_to_clipboard',
    'copy_to_clipboard_sync',
    'notice_for',
    'pyperclip_writer',
]
