from datetime import date
from types import SimpleNamespace

import pytest

from app.services.reports.report_service import (
    achievement,
    build_report_rows,
    current_report_month,
    rank_departments,
)
from app.utils.data_exporter import achievement_badge


def monthly(parent, month, target, actual):
    return SimpleNamespace(parent_kpi_id=parent, month=month, target=target, actual=actual)


def cascaded(id, corporate_kpi_id, department, weight):
    return SimpleNamespace(id=id, corporate_kpi_id=corporate_kpi_id, department=department, weight=weight)


class TestAchievement:
    def test_percentage(self):
        assert achievement(50, 200) == 25.0

    def test_zero_target(self):
        assert achievement(10, 0) == 0.0

    @pytest.mark.parametrize("value,badge", [
        (120, "success"),
        (100, "success"),
        (99.9, "warning"),
        (80, "warning"),
        (79.9, "destructive"),
        (0, "destructive"),
    ])
    def test_badges(self, value, badge):
        assert achievement_badge(value) == badge


class TestCurrentReportMonth:
    def test_latest_month_with_actuals(self):
        rows = [monthly("k", 1, 10, 5), monthly("k", 4, 10, 7), monthly("k", 6, 10, 0)]
        assert current_report_month(rows) == 4

    def test_falls_back_to_today(self):
        assert current_report_month([monthly("k", 2, 10, 0)], today=date(2026, 9, 15)) == 9


class TestBuildReportRows:
    def test_month_and_ytd_figures(self):
        figures = [
            monthly("k1", 1, 100, 90),
            monthly("k1", 2, 100, 110),
            monthly("k1", 3, 100, 50),
        ]
        rows = build_report_rows([cascaded("c1", "k1", "Sales", 40)], figures, 2, {"k1": "Revenue"})

        assert len(rows) == 1
        row = rows[0]
        assert row["measure"] == "Revenue"
        assert row["month_target"] == 100.0
        assert row["month_actual"] == 110.0
        assert row["month_achievement"] == pytest.approx(110.0)
        assert row["month_badge"] == "success"
        # year to date stops at the report month
        assert row["ytd_target"] == 200.0
        assert row["ytd_actual"] == 200.0
        assert row["ytd_badge"] == "success"

    def test_kpi_without_figures(self):
        rows = build_report_rows([cascaded("c1", "k9", "Sales", 10)], [], 5)
        assert rows[0]["month_achievement"] == 0.0
        assert rows[0]["ytd_badge"] == "destructive"
        assert rows[0]["measure"] is None


class TestRankDepartments:
    def test_weighted_ytd_ranking(self):
        rows = [
            {"department": "Sales", "weight": 60, "ytd_achievement": 100.0},
            {"department": "Sales", "weight": 40, "ytd_achievement": 50.0},
            {"department": "Finance", "weight": 100, "ytd_achievement": 90.0},
            {"department": "HR", "weight": 50, "ytd_achievement": 120.0},
        ]
        ranking = rank_departments(["Sales", "Finance", "HR", "IT"], rows)

        assert [r["department"] for r in ranking] == ["HR", "Finance", "Sales"]
        assert ranking[2]["achievement"] == pytest.approx(80.0)
        assert ranking[2]["badge"] == "warning"

    def test_department_without_kpis_scores_zero(self):
        ranking = rank_departments(["IT"], [], limit=3)
        assert ranking == [{"department": "IT", "achievement": 0.0, "badge": "destructive"}]
