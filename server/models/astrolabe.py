#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
命盘聚合模型 - 一次排盘的完整快照
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from server.models.bazi import BaziChartModel
from server.models.ziwei import HoroscopeModel, MutagenMapModel, PalaceModel


class RawDatesModel(BaseModel):
    """农历原始日期"""
    lunar_year: int
    lunar_month: int
    lunar_day: int
    is_leap_month: bool = False
    leap_month: int = Field(0, description="该年闰月，无闰月为 0")
    month_day_count: int = Field(..., description="该农历月天数")

    class Config:
        frozen = True


class ChartMetadataModel(BaseModel):
    """排盘元数据（不含任何时间戳，保证相同输入输出一致）"""
    rule_version: str
    calendar_provider: str = Field(..., description="precise/nominal")
    decade_luck_strategy: str
    calendar_rules: Dict[str, str] = Field(default_factory=dict)
    data_sources: Dict[str, str] = Field(default_factory=dict)

    class Config:
        frozen = True


class AstrolabeModel(BaseModel):
    """命盘"""
    palaces: List[PalaceModel] = Field(..., description="十二宫，按 index 排序")
    solar_date: str
    lunar_date: str
    chinese_date: str = Field(..., description="四柱干支，空格分隔")
    raw_dates: RawDatesModel
    four_pillars: Dict[str, str] = Field(..., description="year/month/day/hour -> 干支")
    bazi: BaziChartModel
    time: str = Field("", description="时辰名", examples=["午时"])
    time_range: str = ""
    sign: str = ""
    zodiac: str = ""
    soul: str = Field("", description="命主")
    body: str = Field("", description="身主")
    five_elements_class: str = Field("", description="五行局")
    gender: str = Field(..., description="Male/Female")
    original_gender: str = Field(..., description="乾造/坤造")
    natal_mutagen: Optional[MutagenMapModel] = None
    decadal_mutagens: List[MutagenMapModel] = Field(default_factory=list)
    horoscope: Optional[HoroscopeModel] = None
    focus_date: Optional[str] = None
    longitude: float
    latitude: Optional[float] = None
    birth_hour: int
    birth_minute: int
    time_index: int = Field(..., ge=0, le=11, description="真太阳时时辰序号")
    corrected_solar_time: str = Field(..., description="真太阳时 YYYY-MM-DD HH:MM")
    metadata: ChartMetadataModel

    class Config:
        frozen = True

    def get_palace(self, index: int) -> PalaceModel:
        return self.palaces[index % 12]

    @property
    def current_decadal_mutagen(self) -> Optional[MutagenMapModel]:
        for mutagen_map in self.decadal_mutagens:
            if mutagen_map.is_current:
                return mutagen_map
        return None
