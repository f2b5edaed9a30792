#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
八字核心计算模块

提供八字计算的核心功能：
- 五行关系计算
- 十神计算
"""

from .element_relations import (
    ELEMENT_RELATIONS,
    get_element_relation,
)
from .ten_gods import (
    DAY_MASTER_LABEL,
    TEN_GOD_MATRIX,
    get_hidden_stem_items,
    get_main_star,
    get_ten_god,
)

__all__ = [
    'ELEMENT_RELATIONS',
    'get_element_relation',
    'DAY_MASTER_LABEL',
    'TEN_GOD_MATRIX',
    'get_hidden_stem_items',
    'get_main_star',
    'get_ten_god',
]
