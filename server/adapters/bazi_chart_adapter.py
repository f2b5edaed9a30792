#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
八字排盘适配器 - BaziCoreCalculator / calculate_dayun 的字典结果 -> BaziChartModel
"""

from typing import Any, Dict

from server.adapters.dayun_adapter import DayunAdapter
from server.models.bazi import (
    BaziChartModel,
    BaziPillarModel,
    DayMasterStrengthModel,
    FiveElementTallyModel,
)
from server.models.dayun import GanItemModel, ZhiItemModel


class BaziChartAdapter:
    """八字命盘适配器"""

    @staticmethod
    def pillar_from_dict(data: Dict[str, Any]) -> BaziPillarModel:
        return BaziPillarModel(
            name=data['name'],
            pillar_type=data['pillar_type'],
            ganzhi=data['ganzhi'],
            gan=GanItemModel(**data['gan']),
            zhi=ZhiItemModel(
                char=data['zhi']['char'],
                wuxing=data['zhi']['wuxing'],
                hidden=[GanItemModel(**item) for item in data['zhi']['hidden']],
            ),
            nayin=data['nayin'],
            xun=data['xun'],
            kongwang=data['kongwang'],
            changsheng=data['changsheng'],
            self_sitting=data['self_sitting'],
            shensha=data['shensha'],
        )

    @staticmethod
    def to_chart_model(core_result: Dict[str, Any], dayun_result: Dict[str, Any]) -> BaziChartModel:
        """
        Args:
            core_result: BaziCoreCalculator.calculate() 的结果
            dayun_result: calculate_dayun() 的结果
        """
        return BaziChartModel(
            pillars=[BaziChartAdapter.pillar_from_dict(p) for p in core_result['pillars']],
            day_master=core_result['day_master'],
            day_master_wuxing=core_result['day_master_element'],
            da_yun=DayunAdapter.from_dict_list(dayun_result['da_yun']),
            start_yun_age=dayun_result['start_age'],
            start_yun_date=dayun_result.get('start_date'),
            da_yun_strategy=dayun_result['strategy'],
            da_yun_is_fallback=dayun_result['is_fallback'],
            five_elements=FiveElementTallyModel(**core_result['element_counts']),
            day_master_strength=DayMasterStrengthModel(**core_result['day_master_strength']),
            relations=core_result['relationships'],
        )
