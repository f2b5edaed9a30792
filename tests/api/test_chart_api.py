#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
排盘 API 测试

测试 /api/v1/chart/* 接口。
"""

import json

import pytest

from server.services.chart_analysis_llm_client import ANALYSIS_FAILED_MESSAGE


def _sse_events(text):
    return [json.loads(line[len('data: '):]) for line in text.split('\n') if line.startswith('data: ')]


class TestChartCalculateAPI:
    """测试 /api/v1/chart/calculate 接口"""

    @pytest.mark.api
    def test_calculate_success(self, client, sample_chart_request):
        """正常计算应返回成功"""
        response = client.post("/api/v1/chart/calculate", json=sample_chart_request)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert len(data["data"]["palaces"]) == 12
        assert data["data"]["four_pillars"]["year"] == "己巳"
        assert data["data"]["focus_date"] == "1990-01-01"
        assert data["data"]["horoscope"] is not None

    @pytest.mark.api
    def test_focus_date_defaults_to_today(self, client, sample_chart_request):
        from datetime import date

        sample_chart_request.pop("focus_date")
        response = client.post("/api/v1/chart/calculate", json=sample_chart_request)

        assert response.status_code == 200
        assert response.json()["data"]["focus_date"] == date.today().isoformat()

    @pytest.mark.api
    def test_longitude_defaults(self, client, sample_chart_request):
        sample_chart_request.pop("longitude")
        response = client.post("/api/v1/chart/calculate", json=sample_chart_request)

        assert response.status_code == 200
        assert response.json()["data"]["longitude"] == 120.0

    @pytest.mark.api
    def test_lunar_request(self, client, fake_oracle):
        request = {
            "calendar_type": "lunar",
            "lunar_year": 1989,
            "lunar_month": 12,
            "lunar_day": 5,
            "birth_hour": 12,
            "gender": "female",
            "focus_date": "2024-06-15",
        }
        response = client.post("/api/v1/chart/calculate", json=request)

        assert response.status_code == 200
        assert response.json()["data"]["solar_date"] == "1990-01-01"
        assert fake_oracle.calls[-1]["method"] == "lunar"

    @pytest.mark.api
    @pytest.mark.parametrize("field,value", [
        ("solar_date", "1990-13-45"),
        ("gender", "unknown"),
        ("birth_hour", 24),
        ("longitude", 200),
        ("focus_date", "2024/06/15"),
    ])
    def test_invalid_input_returns_400(self, client, sample_chart_request, field, value):
        sample_chart_request[field] = value
        response = client.post("/api/v1/chart/calculate", json=sample_chart_request)

        assert response.status_code == 400
        assert "计算失败，请检查输入格式" in response.json()["detail"]

    @pytest.mark.api
    def test_invalid_lunar_day_returns_400(self, client):
        request = {
            "calendar_type": "lunar",
            "lunar_year": 2024,
            "lunar_month": 1,
            "lunar_day": 30,
            "birth_hour": 12,
            "gender": "male",
        }
        response = client.post("/api/v1/chart/calculate", json=request)

        assert response.status_code == 400

    @pytest.mark.api
    def test_missing_birth_hour(self, client, sample_chart_request):
        """缺少必填字段由 FastAPI 返回 422"""
        sample_chart_request.pop("birth_hour")
        response = client.post("/api/v1/chart/calculate", json=sample_chart_request)

        assert response.status_code == 422


class TestChartTextAPI:
    """测试 /api/v1/chart/text 接口"""

    @pytest.mark.api
    def test_text(self, client, sample_chart_request):
        response = client.post("/api/v1/chart/text", json=sample_chart_request)

        assert response.status_code == 200
        text = response.json()["data"]["text"]
        assert text.startswith("【紫微斗数排盘")
        assert "己巳" in text


class TestChartAnalysisStreamAPI:
    """测试 /api/v1/chart/analysis/stream 接口"""

    @pytest.mark.api
    def test_stream_without_llm_key(self, client, sample_chart_request, llm_unconfigured):
        response = client.post("/api/v1/chart/analysis/stream", json=sample_chart_request)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        events = _sse_events(response.text)
        assert events == [{"type": "error", "content": "", "error": ANALYSIS_FAILED_MESSAGE}]

    @pytest.mark.api
    def test_stream_invalid_input(self, client, sample_chart_request):
        sample_chart_request["gender"] = "x"
        response = client.post("/api/v1/chart/analysis/stream", json=sample_chart_request)

        assert response.status_code == 400


class TestHealthAPI:

    @pytest.mark.api
    @pytest.mark.parametrize("path", ["/health", "/api/v1/health"])
    def test_health(self, client, path):
        response = client.get(path)

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "llm_configured" in response.json()
