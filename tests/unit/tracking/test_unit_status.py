# tests/unit/tracking/test_unit_status.py — v1
"""Tests for tracking/status.py — progress report from a storage scan."""

from __future__ import annotations

import pytest

from qalamseed.tracking.status import StatusReport, SurahProgress, collect_status, render_status


class TestCollectStatus:
    @pytest.mark.asyncio
    async def test_empty_store(self, store, corpus):
        report = await collect_status(store, corpus)
        assert report.done == 0
        assert report.total == 10
        assert report.complete_surahs == []
        assert report.partial_surahs == []

    @pytest.mark.asyncio
    async def test_complete_and_partial(self, store, corpus):
        for v in range(1, 8):
            await store.write_text(f"analysis/1-{v}.json", "{}")
        await store.write_text("analysis/2-1.json", "{}")
        await store.write_text("analysis/_temp/2-2.base.json", "{}")
        await store.write_text("analysis/_temp/2-2.w1.json", "{}")

        report = await collect_status(store, corpus)
        assert report.done == 8
        assert report.complete_surahs == [1]
        assert report.partial_surahs == [SurahProgress(surah_id=2, done=1, total=3)]
        assert report.pending_checkpoints == ["2:2"]
        assert report.percent == pytest.approx(80.0)


class TestRenderStatus:
    def test_render(self):
        report = StatusReport(
            done=8, total=10, complete_surahs=[1],
            partial_surahs=[SurahProgress(surah_id=2, done=1, total=3)],
            pending_checkpoints=["2:2"],
        )
        text = render_status(report)
        assert "Total: 8 / 10 (80.0%)" in text
        assert "Complete surahs (1): 1" in text
        assert "Surah 2: 1/3 (33%)" in text
        assert "2:2" in text

    def test_render_empty(self):
        text = render_status(StatusReport(done=0, total=0))
        assert "Total: 0 / 0 (0.0%)" in text
        assert "Partial" not in text
