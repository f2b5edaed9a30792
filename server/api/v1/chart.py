#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
排盘API接口（紫微斗数 + 八字）
"""

import asyncio
import json
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field, ValidationError

from server.config.app_config import get_config
from server.models.astrolabe import AstrolabeModel
from server.models.birth_spec import BirthSpec
from server.services.chart_analysis_llm_client import ChartAnalysisLLMClient
from server.services.chart_service import get_chart_service
from server.services.chart_text_formatter import format_as_plain_text

logger = logging.getLogger(__name__)

router = APIRouter()

# 线程池大小 = CPU核心数 * 2，但不超过100
cpu_count = os.cpu_count() or 4
executor = ThreadPoolExecutor(max_workers=min(cpu_count * 2, 100))

INPUT_ERROR_MESSAGE = '计算失败，请检查输入格式'


class ChartRequest(BaseModel):
    """排盘请求模型（字段校验在 BirthSpec 中统一完成，错误统一返回 400）"""
    calendar_type: str = Field("solar", description="历法类型 solar/lunar", examples=["solar"])
    solar_date: Optional[str] = Field(None, description="阳历日期 YYYY-MM-DD", examples=["1990-01-01"])
    lunar_year: Optional[int] = Field(None, description="农历年")
    lunar_month: Optional[int] = Field(None, description="农历月")
    lunar_day: Optional[int] = Field(None, description="农历日")
    is_leap_month: bool = Field(False, description="是否闰月")
    birth_hour: int = Field(..., description="出生小时 0-23", examples=[12])
    birth_minute: int = Field(0, description="出生分钟 0-59", examples=[0])
    longitude: Optional[float] = Field(None, description="经度，缺省使用 CHART_DEFAULT_LONGITUDE", examples=[120.0])
    latitude: Optional[float] = Field(None, description="纬度", examples=[30.0])
    gender: str = Field(..., description="性别 male/female", examples=["male"])
    focus_date: Optional[str] = Field(None, description="运限日期 YYYY-MM-DD，缺省为今天", examples=["2024-06-01"])

    def to_birth_spec(self) -> BirthSpec:
        fields = self.model_dump(exclude={'focus_date'})
        if fields['longitude'] is None:
            fields['longitude'] = get_config().chart.default_longitude
        return BirthSpec(**fields)

    def resolve_focus_date(self) -> str:
        return self.focus_date or date.today().isoformat()


class ChartResponse(BaseModel):
    """排盘响应模型"""
    success: bool
    data: Optional[dict] = None
    message: Optional[str] = None


def _calculate(request: ChartRequest) -> AstrolabeModel:
    return get_chart_service().compute_chart(request.to_birth_spec(), request.resolve_focus_date())


async def _calculate_in_executor(request: ChartRequest) -> AstrolabeModel:
    """在线程池中执行排盘；输入错误转为 400"""
    loop = asyncio.get_event_loop()
    try:
        return await loop.run_in_executor(executor, _calculate, request)
    except (ValueError, ValidationError) as e:
        logger.warning(f"排盘输入错误: {e}")
        raise HTTPException(status_code=400, detail=f"{INPUT_ERROR_MESSAGE}: {e}")
    except Exception as e:
        logger.error(f"排盘失败: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"计算失败: {e}")


@router.post("/chart/calculate", response_model=ChartResponse, summary="紫微斗数 + 八字排盘")
async def calculate_chart(request: ChartRequest):
    """
    排盘

    - **calendar_type**: solar/lunar
    - **solar_date** 或 **lunar_year/lunar_month/lunar_day/is_leap_month**
    - **birth_hour/birth_minute**: 钟表时间
    - **longitude/latitude**: 出生地，用于真太阳时
    - **gender**: male/female
    - **focus_date**: 运限日期
    """
    astrolabe = await _calculate_in_executor(request)
    return ChartResponse(success=True, data=astrolabe.model_dump(mode='json'))


@router.post("/chart/text", response_model=ChartResponse, summary="排盘纯文本报告")
async def chart_text(request: ChartRequest):
    astrolabe = await _calculate_in_executor(request)
    return ChartResponse(success=True, data={'text': format_as_plain_text(astrolabe)})


def analysis_stream_generator(astrolabe: AstrolabeModel):
    """SSE 生成器（同步，由 StreamingResponse 放入线程池迭代）"""
    client = ChartAnalysisLLMClient()
    for item in client.analyze_stream(astrolabe):
        yield f"data: {json.dumps(item, ensure_ascii=False)}\n\n"


@router.post("/chart/analysis/stream", summary="命盘AI分析（流式）")
async def chart_analysis_stream(request: ChartRequest):
    """
    命盘 AI 分析（流式版本）
    使用 Server-Sent Events (SSE) 返回 start/chunk/reasoning/end/error
    """
    astrolabe = await _calculate_in_executor(request)
    return StreamingResponse(
        analysis_stream_generator(astrolabe),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # 禁用 nginx 缓冲
        }
    )
