#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
紫微本命宫位归一化

- 按 index 排序，校验十二宫齐全
- 提取煞星、本命四化
- 空宫借对宫主星
- 三方四正（对宫 +6，三合 +4/+8）

纯函数，不修改输入。
"""

import logging
from typing import Dict, List, Sequence, Tuple

from core.data.constants import BORROW_RULE, TOUGH_STARS
from server.models.ziwei import (
    BorrowedStarsModel,
    DecadalModel,
    PalaceModel,
    PalaceMutagenModel,
    RawPalaceModel,
    StarModel,
    SurroundingPalacesModel,
)

logger = logging.getLogger(__name__)

PALACE_COUNT = 12


def opposite_index(index: int) -> int:
    return (index + 6) % PALACE_COUNT


def trine_indices(index: int) -> List[int]:
    return [(index + 4) % PALACE_COUNT, (index + 8) % PALACE_COUNT]


def four_rectification_indices(index: int) -> List[int]:
    """三方四正：本宫、对宫、两个三合宫"""
    return [index, opposite_index(index)] + trine_indices(index)


def _tiers(palace: RawPalaceModel) -> List[Tuple[str, List[StarModel]]]:
    return [
        ('major', palace.major_stars),
        ('minor', palace.minor_stars),
        ('adjective', palace.adjective_stars),
    ]


def extract_tough_stars(palace: RawPalaceModel) -> List[StarModel]:
    return [star for _, stars in _tiers(palace) for star in stars if star.name in TOUGH_STARS]


def extract_mutagens(palace: RawPalaceModel) -> List[PalaceMutagenModel]:
    return [
        PalaceMutagenModel(star=star.name, mutagen=star.mutagen, tier=tier)
        for tier, stars in _tiers(palace)
        for star in stars
        if star.mutagen
    ]


def _validate(raw_palaces: Sequence[RawPalaceModel]) -> Dict[int, RawPalaceModel]:
    if len(raw_palaces) != PALACE_COUNT:
        raise ValueError(f"宫位数量应为 {PALACE_COUNT}，实际为 {len(raw_palaces)}")
    by_index = {}
    for palace in raw_palaces:
        if not 0 <= palace.index < PALACE_COUNT:
            raise ValueError(f"宫位序号越界: {palace.index}")
        if palace.index in by_index:
            raise ValueError(f"宫位序号重复: {palace.index}")
        by_index[palace.index] = palace
    return by_index


def _build_surrounding(index: int, by_index: Dict[int, RawPalaceModel],
                       mutagens_by_index: Dict[int, List[PalaceMutagenModel]]) -> SurroundingPalacesModel:
    members = four_rectification_indices(index)

    major_names: List[str] = []
    mutagens: List[PalaceMutagenModel] = []
    seen_mutagens = set()
    for member in members:
        for star in by_index[member].major_stars:
            if star.name not in major_names:
                major_names.append(star.name)
        for item in mutagens_by_index[member]:
            key = (item.star, item.mutagen)
            if key not in seen_mutagens:
                seen_mutagens.add(key)
                mutagens.append(item)

    return SurroundingPalacesModel(
        target=index,
        opposite=opposite_index(index),
        trine=trine_indices(index),
        four_rectification=members,
        major_stars=major_names,
        mutagens=mutagens,
    )


def _decadal(palace: RawPalaceModel) -> DecadalModel:
    start_age, end_age = palace.decadal.range
    return DecadalModel(
        range=f"{start_age} - {end_age}",
        start_age=start_age,
        end_age=end_age,
        heavenly_stem=palace.decadal.heavenly_stem,
        earthly_branch=palace.decadal.earthly_branch,
    )


def normalize_palaces(raw_palaces: Sequence[RawPalaceModel]) -> List[PalaceModel]:
    """
    归一化十二宫

    Args:
        raw_palaces: 星盘引擎输出的十二宫（任意顺序）

    Returns:
        按 index 排序的 PalaceModel 列表

    Raises:
        ValueError: 宫位数量不为 12，或 index 越界、重复
    """
    by_index = _validate(raw_palaces)
    mutagens_by_index = {index: extract_mutagens(palace) for index, palace in by_index.items()}

    palaces = []
    for index in range(PALACE_COUNT):
        palace = by_index[index]
        is_empty = not palace.major_stars
        borrowed = None
        if is_empty:
            source = by_index[opposite_index(index)]
            borrowed = BorrowedStarsModel(
                from_index=source.index,
                from_name=source.name,
                rule=BORROW_RULE,
                stars=list(source.major_stars),
            )

        palaces.append(PalaceModel(
            index=index,
            name=palace.name,
            heavenly_stem=palace.heavenly_stem,
            earthly_branch=palace.earthly_branch,
            is_body_palace=palace.is_body_palace,
            is_original_palace=palace.is_original_palace,
            major_stars=list(palace.major_stars),
            minor_stars=list(palace.minor_stars),
            adjective_stars=list(palace.adjective_stars),
            tough_stars=extract_tough_stars(palace),
            mutagens=mutagens_by_index[index],
            decadal=_decadal(palace),
            ages=list(palace.ages),
            changsheng12=palace.changsheng12,
            boshi12=palace.boshi12,
            jiangqian12=palace.jiangqian12,
            suiqian12=palace.suiqian12,
            is_empty=is_empty,
            borrowed=borrowed,
            surrounding=_build_surrounding(index, by_index, mutagens_by_index),
        ))

    empty_count = sum(1 for p in palaces if p.is_empty)
    logger.debug(f"宫位归一化完成，空宫 {empty_count} 个")
    return palaces
