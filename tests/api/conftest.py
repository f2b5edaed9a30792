#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
tests/api/ 目录的 conftest ：替换排盘服务与 LLM 客户端

注意: 这些测试需要 fastapi 和 httpx (TestClient 依赖) 已安装
"""
import pytest

# 尝试导入 FastAPI, 本地开发环境可能没有
fastapi = pytest.importorskip("fastapi", reason="fastapi not installed")
pytest.importorskip("httpx", reason="httpx not installed (required for TestClient)")

from server.config.app_config import LLMConfig
from server.services.chart_analysis_llm_client import ChartAnalysisLLMClient
from server.services.chart_service import ChartService


@pytest.fixture(autouse=True)
def api_chart_service(monkeypatch, fake_oracle, chart_config):
    """接口测试使用替身星盘引擎，不依赖 py_iztro"""
    service = ChartService(oracle=fake_oracle, chart_config=chart_config)
    monkeypatch.setattr("server.api.v1.chart.get_chart_service", lambda: service)
    return service


@pytest.fixture
def llm_unconfigured(monkeypatch):
    monkeypatch.setattr(
        "server.api.v1.chart.ChartAnalysisLLMClient",
        lambda: ChartAnalysisLLMClient(config=LLMConfig(api_key=None)),
    )
