#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
大运数据适配器 - 核心计算字典与 DayunModel 之间的转换
"""

from typing import Dict, Any, List, Optional
from server.models.dayun import DayunModel, GanItemModel, ZhiItemModel


class DayunAdapter:
    """大运数据适配器"""

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> DayunModel:
        """
        从 dayun_calculator.enrich_decade 的输出构建模型

        Args:
            data: 大运字典

        Returns:
            DayunModel
        """
        return DayunModel(
            step=data['step'],
            ganzhi=data['ganzhi'],
            start_age=data['start_age'],
            end_age=data['end_age'],
            start_year=data['start_year'],
            end_year=data['end_year'],
            gan=GanItemModel(**data['gan']),
            zhi=ZhiItemModel(
                char=data['zhi']['char'],
                wuxing=data['zhi']['wuxing'],
                hidden=[GanItemModel(**item) for item in data['zhi'].get('hidden', [])],
            ),
            nayin=data.get('nayin', ''),
        )

    @staticmethod
    def from_dict_list(data_list: List[Dict[str, Any]]) -> List[DayunModel]:
        return [DayunAdapter.from_dict(data) for data in data_list]

    @staticmethod
    def find_by_age(dayun_list: List[DayunModel], age: int) -> Optional[DayunModel]:
        """按虚岁查找所在大运"""
        for dayun in dayun_list:
            if dayun.start_age <= age <= dayun.end_age:
                return dayun
        return None
