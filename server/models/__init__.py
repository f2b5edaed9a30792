#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
排盘数据模型 - 统一的数据结构定义
"""

from server.models.astrolabe import AstrolabeModel, ChartMetadataModel, RawDatesModel
from server.models.bazi import BaziChartModel, BaziPillarModel, DayMasterStrengthModel, FiveElementTallyModel
from server.models.birth_spec import BirthSpec
from server.models.dayun import DayunModel, GanItemModel, ZhiItemModel
from server.models.ziwei import (
    HoroscopeModel,
    MutagenMapModel,
    PalaceModel,
    SiHuaModel,
    StarModel,
)

__all__ = [
    'AstrolabeModel',
    'ChartMetadataModel',
    'RawDatesModel',
    'BaziChartModel',
    'BaziPillarModel',
    'DayMasterStrengthModel',
    'FiveElementTallyModel',
    'BirthSpec',
    'DayunModel',
    'GanItemModel',
    'ZhiItemModel',
    'HoroscopeModel',
    'MutagenMapModel',
    'PalaceModel',
    'SiHuaModel',
    'StarModel',
]
