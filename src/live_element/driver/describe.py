"""Human-readable element descriptions for failure messages."""

from __future__ import annotations

from typing import Any

from live_element.constants import DESCRIBE_TEXT_LIMIT, DESCRIBED_ATTRIBUTES
from live_element.driver.capability import ElementDriver


def describe_element(driver: ElementDriver, handle: Any) -> str:
    """Render *handle* as ``<tag attr="..">text</tag>``.

    Reading the tag may raise a stale-element error; callers decide how to
    classify it. Individual attribute reads are best effort.
    """
    tag = driver.get_tag_name(handle)
    parts = [tag]
    for name in DESCRIBED_ATTRIBUTES:
        try:
            val = driver.get_attribute(handle, name)
        except Exception:
            continue
        if val:
            parts.append(f'{name}="{val}"')
    try:
        text = driver.get_text(handle) or ""
    except Exception:
        text = ""
    text = " ".join(text.split())
    if len(text) > DESCRIBE_TEXT_LIMIT:
        text = text[: DESCRIBE_TEXT_LIMIT - 3] + "..."
    return f"<{' '.join(parts)}>{text}</{tag}>"
