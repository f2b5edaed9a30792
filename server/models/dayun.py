#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
大运数据模型 - 统一的大运数据结构定义
"""

from pydantic import BaseModel, Field
from typing import List


class GanItemModel(BaseModel):
    """天干项（也用于藏干）"""
    char: str = Field(..., description="天干", examples=["甲"])
    wuxing: str = Field(..., description="五行", examples=["木"])
    shishen: str = Field(..., description="十神（日柱天干为 日主）", examples=["正官"])

    class Config:
        frozen = True


class ZhiItemModel(BaseModel):
    """地支项"""
    char: str = Field(..., description="地支", examples=["子"])
    wuxing: str = Field(..., description="五行", examples=["水"])
    hidden: List[GanItemModel] = Field(default_factory=list, description="藏干（本气在前）")

    class Config:
        frozen = True


class DayunModel(BaseModel):
    """大运数据模型"""
    step: int = Field(..., description="大运步骤（从1开始）", examples=[1])
    ganzhi: str = Field(..., description="干支", examples=["丁丑"])
    start_age: int = Field(..., description="起始年龄", examples=[9])
    end_age: int = Field(..., description="结束年龄", examples=[18])
    start_year: int = Field(..., description="起始年份", examples=[1998])
    end_year: int = Field(..., description="结束年份", examples=[2007])
    gan: GanItemModel
    zhi: ZhiItemModel
    nayin: str = Field("", description="纳音", examples=["涧下水"])

    @property
    def age_display(self) -> str:
        return f"{self.start_age}-{self.end_age}岁"

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "step": 1,
                "ganzhi": "丁丑",
                "start_age": 9,
                "end_age": 18,
                "start_year": 1998,
                "end_year": 2007,
                "gan": {"char": "丁", "wuxing": "火", "shishen": "伤官"},
                "zhi": {"char": "丑", "wuxing": "土", "hidden": [
                    {"char": "己", "wuxing": "土", "shishen": "正财"},
                ]},
                "nayin": "涧下水",
            }
        }
