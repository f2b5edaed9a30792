# -*- coding: utf-8 -*-
"""
接口抽象层
定义服务接口，实现依赖倒置原则
"""

from .ziwei_oracle_interface import IOracleChart, IZiweiOracle

__all__ = [
    'IOracleChart',
    'IZiweiOracle',
]
