"""Kernel-to-core message mapping adapter.

Kernels publish output on their IOPub channel as Jupyter-style messages:
a dict with a header (carrying msg_type) and a content payload. This keeps
those wire details out of the core router.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from core.router import ProducerMessage


def msg_type_of(raw: Mapping[str, Any]) -> str:
    """Return the message type, preferring the header over the top level."""

    header = raw.get("header")
    if isinstance(header, Mapping) and header.get("msg_type"):
        return str(header["msg_type"])
    msg_type = raw.get("msg_type")
    if msg_type:
        return str(msg_type)
    raise ValueError("kernel message has no msg_type")


def build_message(
    raw: Mapping[str, Any],
    source_key: str,
    render_context: Optional[Any] = None,
) -> ProducerMessage:
    """Build a core ProducerMessage from a raw kernel IOPub message.

    The source is the document path of the notebook whose session delivered
    the message; the content is passed through untouched.
    """

    if not isinstance(raw, Mapping):
        raise ValueError(f"kernel message must be a mapping, got {type(raw).__name__}")
    if not source_key:
        raise ValueError("source_key is required")

    content = raw.get("content")
    if content is None:
        content = {}
    return ProducerMessage(
        source_key=source_key,
        msg_type=msg_type_of(raw),
        content=content,
        render_context=render_context,
    )


def summarize_content(msg_type: str, content: Mapping[str, Any]) -> str:
    """One-line plain text summary of an output payload for log viewers."""

    if msg_type == "stream":
        return str(content.get("text", "")).rstrip("\n")
    if msg_type == "error":
        ename = content.get("ename", "Error")
        evalue = content.get("evalue", "")
        return f"{ename}: {evalue}" if evalue else str(ename)
    if msg_type == "display_data":
        data = content.get("data") or {}
        if "text/plain" in data:
            return str(data["text/plain"])
        if data:
            return f"<{', '.join(sorted(data))}>"
    return ""
