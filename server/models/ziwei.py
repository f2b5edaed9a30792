#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
紫微斗数数据模型

Raw* 为星盘引擎原始输出（在适配器边界补默认值一次），其余为归一化后的结构。
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Tuple


class StarModel(BaseModel):
    """星曜"""
    name: str = Field(..., examples=["紫微"])
    type: str = Field("", description="major/soft/tough/adjective/flower/helper/lucun/tianma", examples=["major"])
    brightness: str = Field("", description="庙旺利平不陷", examples=["庙"])
    mutagen: str = Field("", description="本命四化：禄/权/科/忌", examples=["科"])
    scope: str = Field("", description="origin/decadal/yearly/monthly", examples=["origin"])

    class Config:
        frozen = True


# ==================== 原始输出 ====================

class RawDecadalModel(BaseModel):
    range: Tuple[int, int] = (0, 0)
    heavenly_stem: str = ""
    earthly_branch: str = ""


class RawPalaceModel(BaseModel):
    index: int
    name: str
    heavenly_stem: str = ""
    earthly_branch: str = ""
    is_body_palace: bool = False
    is_original_palace: bool = False
    major_stars: List[StarModel] = Field(default_factory=list)
    minor_stars: List[StarModel] = Field(default_factory=list)
    adjective_stars: List[StarModel] = Field(default_factory=list)
    changsheng12: str = ""
    boshi12: str = ""
    jiangqian12: str = ""
    suiqian12: str = ""
    decadal: RawDecadalModel = Field(default_factory=RawDecadalModel)
    ages: List[int] = Field(default_factory=list)


class RawAstrolabeModel(BaseModel):
    palaces: List[RawPalaceModel]
    solar_date: str = ""
    lunar_date: str = ""
    chinese_date: str = ""
    time: str = ""
    time_range: str = ""
    sign: str = ""
    zodiac: str = ""
    soul: str = ""
    body: str = ""
    five_elements_class: str = ""


class RawFlowLayerModel(BaseModel):
    index: int = -1
    name: str = ""
    heavenly_stem: str = ""
    earthly_branch: str = ""
    palace_names: List[str] = Field(default_factory=list)
    mutagen: List[str] = Field(default_factory=list)
    stars: List[List[StarModel]] = Field(default_factory=list)


class RawHoroscopeModel(BaseModel):
    solar_date: str = ""
    lunar_date: str = ""
    yearly: Optional[RawFlowLayerModel] = None
    monthly: Optional[RawFlowLayerModel] = None


# ==================== 归一化结构 ====================

class DecadalModel(BaseModel):
    """大限"""
    range: str = Field("", description="年龄区间标签 'a - b'", examples=["3 - 12"])
    start_age: int = 0
    end_age: int = 0
    heavenly_stem: str = ""
    earthly_branch: str = ""

    class Config:
        frozen = True


class PalaceMutagenModel(BaseModel):
    star: str
    mutagen: str
    tier: str = Field("", description="major/minor/adjective")

    class Config:
        frozen = True


class BorrowedStarsModel(BaseModel):
    """空宫借星"""
    from_index: int
    from_name: str = ""
    rule: str
    stars: List[StarModel] = Field(default_factory=list)

    class Config:
        frozen = True


class SurroundingPalacesModel(BaseModel):
    """三方四正"""
    target: int
    opposite: int
    trine: List[int]
    four_rectification: List[int]
    major_stars: List[str] = Field(default_factory=list)
    mutagens: List[PalaceMutagenModel] = Field(default_factory=list)

    class Config:
        frozen = True


class PalaceModel(BaseModel):
    """宫位（归一化）"""
    index: int = Field(..., ge=0, le=11)
    name: str
    heavenly_stem: str = ""
    earthly_branch: str = ""
    is_body_palace: bool = False
    is_original_palace: bool = False
    major_stars: List[StarModel] = Field(default_factory=list)
    minor_stars: List[StarModel] = Field(default_factory=list)
    adjective_stars: List[StarModel] = Field(default_factory=list)
    tough_stars: List[StarModel] = Field(default_factory=list)
    mutagens: List[PalaceMutagenModel] = Field(default_factory=list)
    decadal: DecadalModel = Field(default_factory=DecadalModel)
    ages: List[int] = Field(default_factory=list)
    changsheng12: str = ""
    boshi12: str = ""
    jiangqian12: str = ""
    suiqian12: str = ""
    is_empty: bool = False
    borrowed: Optional[BorrowedStarsModel] = None
    surrounding: SurroundingPalacesModel

    class Config:
        frozen = True


class SiHuaModel(BaseModel):
    """四化星名"""
    stem: str
    lu: str
    quan: str
    ke: str
    ji: str

    class Config:
        frozen = True


class MutagenSlotModel(BaseModel):
    star: str
    palace_indices: List[int] = Field(default_factory=list)
    palace_names: List[str] = Field(default_factory=list)

    class Config:
        frozen = True


class MutagenMapModel(BaseModel):
    """四化落宫"""
    scope: str = Field(..., description="natal/decadal/yearly/monthly")
    stem: str
    label: str = ""
    lu: MutagenSlotModel
    quan: MutagenSlotModel
    ke: MutagenSlotModel
    ji: MutagenSlotModel
    start_age: Optional[int] = None
    end_age: Optional[int] = None
    is_current: bool = False

    class Config:
        frozen = True


class FlowLayerModel(BaseModel):
    """流年/流月一层"""
    index: int = Field(-1, description="该层命宫所在宫位，未知为 -1")
    heavenly_stem: str = ""
    earthly_branch: str = ""
    palace_names: Dict[int, str] = Field(default_factory=dict)
    palaces: Dict[int, List[StarModel]] = Field(default_factory=dict)

    class Config:
        frozen = True


class MonthRangeModel(BaseModel):
    """流月节令区间"""
    start: str
    end: str
    start_name: str
    end_name: str

    class Config:
        frozen = True


class HoroscopeModel(BaseModel):
    """运限（流年 + 流月）"""
    solar_date: str
    lunar_date: str = ""
    year: FlowLayerModel
    month: Optional[FlowLayerModel] = None
    year_sihua: Optional[SiHuaModel] = None
    month_sihua: Optional[SiHuaModel] = None
    year_mutagen: Optional[MutagenMapModel] = None
    month_mutagen: Optional[MutagenMapModel] = None
    month_range: Optional[MonthRangeModel] = None

    class Config:
        frozen = True
