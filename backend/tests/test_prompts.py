"""
Tests for prompts.py - date context and keyword tables in the system prompts.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from prompts import EXTRACTION_PROMPT, ANALYSIS_PROMPT, build_analysis_prompt, build_extraction_prompt


class TestExtractionPrompt:
    def test_has_date_placeholders(self):
        assert "{current_date}" in EXTRACTION_PROMPT
        assert "{current_time}" in EXTRACTION_PROMPT

    def test_formats_now(self, now):
        prompt = build_extraction_prompt(now)
        assert "Current Date: 2024-01-01" in prompt
        assert "Current Time: 08:00" in prompt
        # Escaped braces survive formatting as a JSON example
        assert '"due_time": "HH:MM"' in prompt
        assert "{{" not in prompt

    @pytest.mark.parametrize("keyword", ["내일", "모레", "다음 주", "오후", "저녁", "급하게", "언젠가", "보고서", "요가"])
    def test_keyword_tables(self, keyword):
        assert keyword in EXTRACTION_PROMPT

    def test_time_bands(self):
        for clock in ("09:00", "12:00", "14:00", "18:00", "21:00"):
            assert clock in EXTRACTION_PROMPT


class TestAnalysisPrompt:
    def test_has_timeframe_placeholder(self):
        assert "{timeframe_label}" in ANALYSIS_PROMPT

    @pytest.mark.parametrize("timeframe,label", [("today", "오늘 하루"), ("week", "이번 주")])
    def test_timeframe_label(self, now, timeframe, label):
        prompt = build_analysis_prompt(now, timeframe)
        assert f"Target Timeframe: {label}" in prompt
        assert "Current Date: 2024-01-01" in prompt

    def test_requests_four_fields(self, now):
        prompt = build_analysis_prompt(now, "today")
        for field in ("summary", "urgentTasks", "insights", "recommendations"):
            assert f'"{field}"' in prompt
