#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
四化（禄权科忌）服务

按天干查四化星，再在十二宫的全部星曜中定位落宫。
本命、每个大限、流年、流月各生成一张四化落宫表。
"""

import logging
from typing import List, Optional, Sequence, Tuple

from core.data.constants import SI_HUA_MAP, SI_HUA_SLOTS
from server.models.ziwei import MutagenMapModel, MutagenSlotModel, PalaceModel, SiHuaModel

logger = logging.getLogger(__name__)


def get_sihua(stem: str) -> Optional[SiHuaModel]:
    """天干 -> 四化星名；不在十干内返回 None"""
    stars = SI_HUA_MAP.get(stem)
    if stars is None:
        return None
    return SiHuaModel(stem=stem, **dict(zip(SI_HUA_SLOTS, stars)))


def _palace_star_names(palace: PalaceModel) -> set:
    stars = palace.major_stars + palace.minor_stars + palace.adjective_stars + palace.tough_stars
    return {star.name for star in stars}


def locate_star(star_name: str, palaces: Sequence[PalaceModel]) -> Tuple[List[int], List[str]]:
    """星曜所在的全部宫位（index 升序）"""
    indices, names = [], []
    for palace in palaces:
        if star_name in _palace_star_names(palace):
            indices.append(palace.index)
            names.append(palace.name)
    return indices, names


def build_mutagen_map(stem: str, palaces: Sequence[PalaceModel], scope: str, label: str = '',
                      start_age: Optional[int] = None, end_age: Optional[int] = None,
                      is_current: bool = False) -> Optional[MutagenMapModel]:
    """
    生成四化落宫表

    Args:
        stem: 天干
        palaces: 归一化后的十二宫
        scope: natal/decadal/yearly/monthly

    Returns:
        MutagenMapModel；天干不合法返回 None
    """
    sihua = get_sihua(stem)
    if sihua is None:
        logger.warning(f"无法生成四化：天干不合法 {stem!r} ({scope})")
        return None

    slots = {}
    for slot in SI_HUA_SLOTS:
        star_name = getattr(sihua, slot)
        indices, names = locate_star(star_name, palaces)
        slots[slot] = MutagenSlotModel(star=star_name, palace_indices=indices, palace_names=names)

    return MutagenMapModel(
        scope=scope,
        stem=stem,
        label=label,
        start_age=start_age,
        end_age=end_age,
        is_current=is_current,
        **slots,
    )


def nominal_age(birth_lunar_year: int, focus_year: int) -> int:
    """虚岁"""
    return focus_year - birth_lunar_year + 1


def build_decadal_mutagens(palaces: Sequence[PalaceModel], current_age: Optional[int] = None) -> List[MutagenMapModel]:
    """
    每个大限一张四化表，按起始年龄排序，以年龄区间为标签

    current_age 落入的大限标记 is_current。
    """
    result = []
    for palace in sorted(palaces, key=lambda p: p.decadal.start_age):
        decadal = palace.decadal
        if not decadal.heavenly_stem:
            continue
        is_current = current_age is not None and decadal.start_age <= current_age <= decadal.end_age
        mutagen_map = build_mutagen_map(
            decadal.heavenly_stem, palaces, 'decadal',
            label=decadal.range,
            start_age=decadal.start_age,
            end_age=decadal.end_age,
            is_current=is_current,
        )
        if mutagen_map is not None:
            result.append(mutagen_map)
    return result
