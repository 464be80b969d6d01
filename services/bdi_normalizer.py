"""
BDI normalization.

Source corpora store a turn's cognitive-state items either as a list of
{"type", "text"} objects or as a {type: text} object. Both become the
same ordered list of BDIItem here, so nothing downstream has to care
which form the corpus used.
"""

from typing import Any, Dict, Iterable, List

from models.conversation import BDI_TYPES, BDIItem


def _item_text(text: Any, where: str) -> str:
    # Item text becomes a JSON object key in exported records
    if not isinstance(text, str):
        raise ValueError(f"BDI {where} text must be a string, got {type(text).__name__}")
    return text


def normalize_bdi(raw: Any) -> List[BDIItem]:
    """
    Convert a raw BDI field into canonical items.

    Args:
        raw: None, a list of {"type", "text"} mappings, or a {type: text} mapping

    Returns:
        List of BDIItem in source order. Unknown types are kept as-is.

    Raises:
        ValueError: If raw has neither supported shape, or an item's text
            is missing or not a string
    """
    if raw is None:
        return []

    if isinstance(raw, dict):
        return [
            BDIItem(type=str(bdi_type), text=_item_text(text, f"'{bdi_type}'"))
            for bdi_type, text in raw.items()
        ]

    if isinstance(raw, list):
        items = []
        for position, entry in enumerate(raw):
            if not isinstance(entry, dict):
                raise ValueError(
                    f"BDI entry {position} must be an object with 'type' and 'text', "
                    f"got {type(entry).__name__}"
                )
            text = _item_text(entry.get("text"), f"entry {position}")
            items.append(BDIItem(type=entry.get("type"), text=text))
        return items

    raise ValueError(
        f"Unsupported BDI representation: {type(raw).__name__}. "
        f"Expected a list of items or a type-to-text object"
    )


def group_bdi_items(items: Iterable[BDIItem]) -> Dict[str, List[BDIItem]]:
    """
    Group items by the known BDI types, in display order.

    Items with an unrecognized type belong to no group.
    """
    groups: Dict[str, List[BDIItem]] = {bdi_type: [] for bdi_type in BDI_TYPES}
    for item in items:
        if item.type in groups:
            groups[item.type].append(item)
    return groups
