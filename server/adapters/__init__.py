#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
数据格式适配器 - 统一的数据格式转换

py_iztro 适配器不在此导出，由排盘服务按需导入。
"""

from server.adapters.bazi_chart_adapter import BaziChartAdapter
from server.adapters.dayun_adapter import DayunAdapter

__all__ = [
    'BaziChartAdapter',
    'DayunAdapter',
]
