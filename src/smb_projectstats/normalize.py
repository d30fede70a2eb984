# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Name normalization for SMB ProjectStats.

Client and project names are typed by hand in several places of the
dashboard (project form, invoice form, expense form). This module builds
the canonical keys used to join those loosely linked records:

- ``normalize``: trim + lower-case,
- ``client_name_segment``: extract the plain client name from a composite
  ``"<name> - <company>"`` label,
- ``client_key_from_label``: both steps combined.

All helpers are deterministic and side-effect free.
"""

from typing import Optional

LABEL_SEPARATOR = " - "


def normalize(text: Optional[str]) -> str:
    """Return the canonical key for a human-entered name.

    ``None`` (missing value in an export) normalizes to an empty string.
    """
    if text is None:
        return ""
    return str(text).strip().lower()


def client_name_segment(label: Optional[str]) -> str:
    """Return the name part of a ``"<name> - <company>"`` label.

    Only the first separator is significant:
        "Jane Doe - Acme - Paris" → "Jane Doe"

    A label without separator is returned unchanged (treated as the name).
    """
    if label is None:
        return ""
    return str(label).split(LABEL_SEPARATOR, 1)[0]


def client_key_from_label(label: Optional[str]) -> str:
    """Canonical client key of a project's composite client label."""
    return normalize(client_name_segment(label))
