"""Display Name Formatting — composes a player's label from a template.

Invariants:
    - Placeholders: {label} (base label) and {tag} (tag display text)
    - {displayname} is accepted as an alias of {label} for older configs
    - Empty or blank configured template falls back to DEFAULT_DISPLAY_NAME_FORMAT
    - Substitution is a single pass over the template: placeholders inside the
      inserted label or tag text are kept verbatim

Design Decisions:
    - re.sub over str.format: stray braces in a template never raise
"""

import re

DEFAULT_DISPLAY_NAME_FORMAT = "{label} {tag}"

_PLACEHOLDER = re.compile(r"\{(label|displayname|tag)\}")


def resolve_display_name_format(configured: str | None) -> str:
    if configured is None or not configured.strip():
        return DEFAULT_DISPLAY_NAME_FORMAT
    return configured


def compose_label(template: str, label: str, tag_text: str) -> str:
    """Apply the name template to a base label and a tag's display text."""
    values = {"label": label, "displayname": label, "tag": tag_text}
    return _PLACEHOLDER.sub(
        lambda match: values[match.group(1)],
        resolve_display_name_format(template),
    )
