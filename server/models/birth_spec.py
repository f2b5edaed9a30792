#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
出生信息模型 - 排盘的唯一输入
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class BirthSpec(BaseModel):
    """出生信息（阳历或农历）"""
    model_config = ConfigDict(frozen=True)

    calendar_type: str = Field("solar", description="历法类型：solar(阳历) 或 lunar(农历)", examples=["solar"])
    solar_date: Optional[str] = Field(None, description="阳历日期 YYYY-MM-DD（calendar_type=solar 时必填）", examples=["1990-01-01"])
    lunar_year: Optional[int] = Field(None, description="农历年（calendar_type=lunar 时必填）")
    lunar_month: Optional[int] = Field(None, ge=1, le=12, description="农历月 1-12")
    lunar_day: Optional[int] = Field(None, ge=1, le=30, description="农历日 1-30")
    is_leap_month: bool = Field(False, description="是否闰月")
    birth_hour: int = Field(..., ge=0, le=23, description="出生小时（钟表时间）", examples=[12])
    birth_minute: int = Field(0, ge=0, le=59, description="出生分钟", examples=[0])
    longitude: float = Field(120.0, ge=-180, le=180, description="出生地经度，用于真太阳时", examples=[116.40])
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="出生地纬度（仅记录）", examples=[39.90])
    gender: str = Field(..., description="性别：male(男) 或 female(女)", examples=["male"])

    @field_validator('gender')
    @classmethod
    def validate_gender(cls, v):
        if v not in ('male', 'female'):
            raise ValueError('性别必须为 male 或 female')
        return v

    @field_validator('calendar_type')
    @classmethod
    def validate_calendar_type(cls, v):
        if v not in ('solar', 'lunar'):
            raise ValueError('历法类型必须为 solar 或 lunar')
        return v

    @field_validator('solar_date')
    @classmethod
    def validate_solar_date(cls, v):
        if v is None:
            return v
        try:
            datetime.strptime(v, '%Y-%m-%d')
        except ValueError:
            raise ValueError('日期格式错误，应为 YYYY-MM-DD')
        return v

    @model_validator(mode='after')
    def check_calendar_fields(self):
        if self.calendar_type == 'solar' and not self.solar_date:
            raise ValueError('阳历输入需要 solar_date')
        if self.calendar_type == 'lunar' and None in (self.lunar_year, self.lunar_month, self.lunar_day):
            raise ValueError('农历输入需要 lunar_year、lunar_month、lunar_day')
        return self
