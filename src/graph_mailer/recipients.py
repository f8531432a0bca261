# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Recipient list normalization.

Addresses are compared case-insensitively. Each list is cleaned on its own
(blank entries dropped, whitespace trimmed, duplicates collapsed keeping the
first occurrence), then overlaps are removed with priority To > Cc > Bcc.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .errors import ValidationError


@dataclass(frozen=True)
class RecipientSet:
    """Cleaned, pairwise disjoint To/Cc/Bcc recipients.

    ``cc`` and ``bcc`` are always tuples; Graph rejects null collections.
    """

    to: tuple[str, ...]
    cc: tuple[str, ...] = ()
    bcc: tuple[str, ...] = ()


def address_key(address: str) -> str:
    """Comparison key for case-insensitive address equality."""
    return address.lower()


def clean_addresses(addresses: Iterable[str | None] | None) -> list[str]:
    """Drop blank entries, trim, and dedupe case-insensitively.

    Order of first appearance is preserved.

    Example:
        >>> clean_addresses([" a@x.com", "", "A@X.com", "b@x.com"])
        ['a@x.com', 'b@x.com']
    """
    if isinstance(addresses, str):
        addresses = [addresses]
    cleaned: list[str] = []
    seen: set[str] = set()
    for raw in addresses or ():
        if raw is None or not raw.strip():
            continue
        address = raw.strip()
        key = address_key(address)
        if key in seen:
            continue
        seen.add(key)
        cleaned.append(address)
    return cleaned


def exclude_addresses(addresses: Iterable[str], *others: Iterable[str]) -> list[str]:
    """Return ``addresses`` without any entry present in ``others``."""
    taken = {address_key(a) for other in others for a in other}
    return [a for a in addresses if address_key(a) not in taken]


def build_recipient_set(
    to_addresses: Iterable[str | None] | None,
    cc_addresses: Iterable[str | None] | None = None,
    bcc_addresses: Iterable[str | None] | None = None,
) -> RecipientSet:
    """Clean the three lists and make them disjoint.

    Raises:
        ValidationError: ``to_addresses`` is None or has no usable address.
    """
    if to_addresses is None:
        raise ValidationError("'to_addresses' is required.", field="to_addresses")

    to_list = clean_addresses(to_addresses)
    if not to_list:
        raise ValidationError("At least one 'To' address is required.", field="to_addresses")

    cc_list = exclude_addresses(clean_addresses(cc_addresses), to_list)
    bcc_list = exclude_addresses(clean_addresses(bcc_addresses), to_list, cc_list)

    return RecipientSet(to=tuple(to_list), cc=tuple(cc_list), bcc=tuple(bcc_list))
