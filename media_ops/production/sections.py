# media_ops/production/sections.py
"""Order and visibility of the content sections on a client delivery page."""
from dataclasses import dataclass, field
from typing import Dict, List

SECTION_KEYS = ('photos', 'floor_plans', 'video', 'virtual_tour', 'other_files')
DEFAULT_SECTION_ORDER = list(SECTION_KEYS)

SECTION_LABELS = {
    'photos': ('Photos', 'Property photography and image gallery'),
    'floor_plans': ('Floor Plans', 'Architectural drawings and layouts'),
    'video': ('Video', 'Video tours and promotional content'),
    'virtual_tour': ('Virtual Tour', '360° virtual property experience'),
    'other_files': ('Other Files', 'Additional documents and media'),
}

# Page flags a new delivery record starts with
DEFAULT_PAGE_FLAGS = {
    'enableComments': True,
    'enableDownloads': True,
    'isPublic': True,
    'passwordProtected': False,
}

UP = 'up'
DOWN = 'down'


def default_visibility() -> Dict[str, bool]:
    return {key: True for key in SECTION_KEYS}


def move_section(order: List[str], index: int, direction: str) -> List[str]:
    """
    Swaps the section at ``index`` with its neighbour. Returns the input list
    itself when the neighbour would fall outside the list.
    """
    if direction not in (UP, DOWN):
        raise ValueError(f"Unknown direction: {direction!r}")
    target = index - 1 if direction == UP else index + 1
    if not (0 <= index < len(order)) or not (0 <= target < len(order)):
        return order

    new_order = list(order)
    new_order[index], new_order[target] = new_order[target], new_order[index]
    return new_order


def toggle_visibility(visibility: Dict[str, bool], key: str) -> Dict[str, bool]:
    if key not in SECTION_KEYS:
        raise ValueError(f"Unknown section: {key!r}")
    updated = dict(visibility)
    updated[key] = not visibility.get(key, True)
    return updated


def visible_sections(order: List[str], visibility: Dict[str, bool]) -> List[str]:
    return [key for key in order if visibility.get(key, True)]


def validate_order(order) -> List[str]:
    """Checks that ``order`` is a permutation of SECTION_KEYS."""
    if not isinstance(order, (list, tuple)):
        raise ValueError("sectionOrder must be a list")
    order = list(order)
    if len(order) != len(set(order)):
        raise ValueError("sectionOrder contains duplicate sections")
    unknown = set(order) - set(SECTION_KEYS)
    if unknown:
        raise ValueError(f"Unknown sections: {', '.join(sorted(unknown))}")
    missing = [key for key in SECTION_KEYS if key not in order]
    if missing:
        raise ValueError(f"sectionOrder is missing: {', '.join(missing)}")
    return order


def normalize_visibility(visibility) -> Dict[str, bool]:
    """Makes the map total over SECTION_KEYS, absent keys being visible."""
    if visibility is None:
        return default_visibility()
    if not isinstance(visibility, dict):
        raise ValueError("sectionVisibility must be an object")
    unknown = set(visibility) - set(SECTION_KEYS)
    if unknown:
        raise ValueError(f"Unknown sections: {', '.join(sorted(unknown))}")
    not_bool = sorted(key for key, value in visibility.items() if not isinstance(value, bool))
    if not_bool:
        raise ValueError(f"Visibility must be true or false: {', '.join(not_bool)}")
    return {key: visibility.get(key, True) for key in SECTION_KEYS}


@dataclass
class SectionConfig:
    order: List[str] = field(default_factory=lambda: list(DEFAULT_SECTION_ORDER))
    visibility: Dict[str, bool] = field(default_factory=default_visibility)

    @classmethod
    def default(cls):
        return cls()

    @classmethod
    def from_json(cls, data):
        if not data:
            return cls.default()
        order = data.get('sectionOrder') or DEFAULT_SECTION_ORDER
        return cls(
            order=validate_order(order),
            visibility=normalize_visibility(data.get('sectionVisibility')),
        )

    def visible(self) -> List[str]:
        return visible_sections(self.order, self.visibility)

    def to_json(self):
        return {'sectionOrder': list(self.order), 'sectionVisibility': dict(self.visibility)}
