#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
八字排盘数据模型
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from server.models.dayun import DayunModel, GanItemModel, ZhiItemModel


class BaziPillarModel(BaseModel):
    """单柱"""
    name: str = Field(..., description="柱名", examples=["年柱"])
    pillar_type: str = Field(..., description="year/month/day/hour", examples=["year"])
    ganzhi: str = Field(..., description="干支", examples=["己巳"])
    gan: GanItemModel
    zhi: ZhiItemModel
    nayin: str = Field("", description="纳音", examples=["大林木"])
    xun: str = Field("", description="所在旬", examples=["甲子旬"])
    kongwang: str = Field("", description="旬空", examples=["戌亥"])
    changsheng: str = Field("", description="星运：日干在本柱地支的十二长生", examples=["长生"])
    self_sitting: str = Field("", description="自坐：本柱天干在本柱地支的十二长生", examples=["帝旺"])
    shensha: List[str] = Field(default_factory=list, description="神煞", examples=[["天乙贵人"]])

    class Config:
        frozen = True


class FiveElementTallyModel(BaseModel):
    """五行统计"""
    stems: Dict[str, int]
    branches: Dict[str, int]
    hidden_stems: Dict[str, int]
    total: Dict[str, int]

    class Config:
        frozen = True


class DayMasterStrengthModel(BaseModel):
    """日主强弱（简化平衡评分，临时结论）"""
    day_master: str
    element: str
    level: str = Field(..., description="strong/weak/balanced")
    supportive_score: int
    opposing_score: int
    score_diff: int
    favorable_elements: List[str] = Field(default_factory=list)
    unfavorable_elements: List[str] = Field(default_factory=list)
    useful_god: Optional[str] = Field(None, description="用神，简化评分不给出")
    pattern: Optional[str] = Field(None, description="格局，简化评分不给出")
    method: str
    is_provisional: bool = True
    note: str = ""

    class Config:
        frozen = True


class BaziChartModel(BaseModel):
    """八字命盘"""
    pillars: List[BaziPillarModel] = Field(..., description="年、月、日、时四柱")
    day_master: str = Field(..., description="日主", examples=["丙"])
    day_master_wuxing: str = Field(..., description="日主五行", examples=["火"])
    da_yun: List[DayunModel] = Field(default_factory=list, description="大运（最多十步）")
    start_yun_age: Optional[int] = Field(None, description="起运年龄（等于第一步大运起始年龄）")
    start_yun_date: Optional[str] = Field(None, description="起运日期 YYYY-MM-DD")
    da_yun_strategy: str = Field("", description="大运策略名")
    da_yun_is_fallback: bool = False
    five_elements: FiveElementTallyModel
    day_master_strength: DayMasterStrengthModel
    relations: Dict[str, Any] = Field(default_factory=dict, description="干支关系")

    class Config:
        frozen = True
