#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
运限投影服务（流年、流月）

星盘引擎给出的每一层运限可能缺少部分宫名，这里统一：
1. 找到该层命宫（宫名含"命"，否则用引擎给出的 index）
2. 从命宫起逆排十二宫名，只补引擎没给的位置
3. 收集每宫流曜，附上四化与流月节令区间
"""

import logging
from typing import Dict, List, Optional, Sequence

from core.calculators.LunarConverter import JIE_SEARCH_RETRIES, LunarConverter
from core.data.constants import PALACE_NAMES
from server.models.ziwei import (
    FlowLayerModel,
    HoroscopeModel,
    MonthRangeModel,
    PalaceModel,
    RawFlowLayerModel,
    RawHoroscopeModel,
    StarModel,
)
from server.services.sihua_service import build_mutagen_map, get_sihua

logger = logging.getLogger(__name__)

LIFE_PALACE_MARK = '命'


def locate_life_palace(layer: RawFlowLayerModel) -> int:
    """该层命宫所在宫位序号，未知返回 -1"""
    for index, name in enumerate(layer.palace_names[:12]):
        if name and LIFE_PALACE_MARK in name:
            return index
    if 0 <= layer.index < 12:
        return layer.index
    return -1


def relabel_palace_names(layer: RawFlowLayerModel, life_index: int) -> Dict[int, str]:
    """补全十二宫名；引擎已给出的名称保持不变"""
    names = {index: name for index, name in enumerate(layer.palace_names[:12]) if name}
    if life_index < 0:
        return names
    for seq, base_name in enumerate(PALACE_NAMES):
        target = (life_index - seq) % 12
        if target not in names:
            names[target] = base_name
    return dict(sorted(names.items()))


def collect_flow_stars(layer: RawFlowLayerModel) -> Dict[int, List[StarModel]]:
    return {index: list(stars) for index, stars in enumerate(layer.stars[:12]) if stars}


def project_layer(layer: Optional[RawFlowLayerModel]) -> Optional[FlowLayerModel]:
    if layer is None:
        return None
    life_index = locate_life_palace(layer)
    return FlowLayerModel(
        index=life_index,
        heavenly_stem=layer.heavenly_stem,
        earthly_branch=layer.earthly_branch,
        palace_names=relabel_palace_names(layer, life_index),
        palaces=collect_flow_stars(layer),
    )


def get_month_range(focus_date: str, max_retries: int = JIE_SEARCH_RETRIES) -> Optional[MonthRangeModel]:
    month_range = LunarConverter.get_jie_month_range(focus_date, max_retries)
    if month_range is None:
        return None
    return MonthRangeModel(**month_range)


def project_horoscope(raw: RawHoroscopeModel, focus_date: str,
                      palaces: Sequence[PalaceModel],
                      jie_retries: int = JIE_SEARCH_RETRIES) -> HoroscopeModel:
    """
    运限投影

    Args:
        raw: 星盘引擎运限原始数据
        focus_date: 'YYYY-MM-DD'
        palaces: 归一化后的本命十二宫（用于四化落宫）

    Raises:
        ValueError: 缺少流年层
    """
    if raw.yearly is None:
        raise ValueError(f"运限数据缺少流年层: {focus_date}")

    year = project_layer(raw.yearly)
    month = project_layer(raw.monthly)

    return HoroscopeModel(
        solar_date=raw.solar_date or focus_date,
        lunar_date=raw.lunar_date,
        year=year,
        month=month,
        year_sihua=get_sihua(year.heavenly_stem),
        month_sihua=get_sihua(month.heavenly_stem) if month else None,
        year_mutagen=build_mutagen_map(year.heavenly_stem, palaces, 'yearly',
                                       label=f"{year.heavenly_stem}{year.earthly_branch}年"),
        month_mutagen=(build_mutagen_map(month.heavenly_stem, palaces, 'monthly',
                                         label=f"{month.heavenly_stem}{month.earthly_branch}月")
                       if month else None),
        month_range=get_month_range(focus_date, jie_retries),
    )
