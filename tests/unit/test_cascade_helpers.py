from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from app.schemas.kpi.cascade_schema import AssignKpisRequest, CascadeRequest
from app.services.kpi.cascade_service import (
    UNCATEGORIZED,
    committed_kpi_id,
    group_by_perspective,
    list_departments,
    list_managers,
)


class TestGroupByPerspective:
    def test_groups_keep_first_seen_order(self):
        kpis = [
            {"id": "1", "perspective": "Financial"},
            {"id": "2", "perspective": "Customer"},
            {"id": "3", "perspective": "Financial"},
        ]
        groups = group_by_perspective(kpis)
        assert list(groups) == ["Financial", "Customer"]
        assert [k["id"] for k in groups["Financial"]] == ["1", "3"]

    def test_group_sizes(self):
        kpis = [{"perspective": "Sustainability"}, {"perspective": "Sustainability"}, {"perspective": "Financial"}, {}]
        groups = group_by_perspective(kpis)
        assert [(name, len(members)) for name, members in groups.items()] == [
            ("Sustainability", 2), ("Financial", 1), (UNCATEGORIZED, 1)
        ]

    def test_every_kpi_lands_in_exactly_one_group(self):
        kpis = [
            SimpleNamespace(id="1", perspective="Financial"),
            SimpleNamespace(id="2", perspective=None),
            SimpleNamespace(id="3", perspective="  "),
            SimpleNamespace(id="4", perspective="Learning"),
        ]
        groups = group_by_perspective(kpis)
        flattened = [k.id for members in groups.values() for k in members]
        assert sorted(flattened) == ["1", "2", "3", "4"]
        assert [k.id for k in groups[UNCATEGORIZED]] == ["2", "3"]

    def test_empty_catalog(self):
        assert group_by_perspective([]) == {}


class TestOrgLists:
    def test_distinct_departments_and_managers(self):
        employees = [
            SimpleNamespace(department="Sales", manager="Ann"),
            SimpleNamespace(department="Finance", manager=""),
            SimpleNamespace(department="Sales", manager="Ann"),
            SimpleNamespace(department=None, manager="Bob"),
        ]
        assert list_departments(employees) == ["Sales", "Finance"]
        assert list_managers(employees) == ["Ann", "Bob"]

    def test_committed_id_format(self):
        assert committed_kpi_id().startswith("committed-")
        assert committed_kpi_id()[len("committed-"):].isdigit()


class TestRequests:
    def test_cascade_request_dedupes_departments(self):
        request = CascadeRequest(departments=["Sales", " Sales ", "HR"], department_target="10%", weight=20)
        assert request.departments == ["Sales", "HR"]

    def test_cascade_request_needs_a_department(self):
        with pytest.raises(ValidationError):
            CascadeRequest(departments=[" "], department_target="10%", weight=20)

    def test_one_committed_item_per_request(self):
        committed = {"type": "committed", "task": "Train staff", "kpi_measure": "Sessions", "weight": 10}
        with pytest.raises(ValidationError):
            AssignKpisRequest(assignments=[committed, dict(committed)])

    def test_assignment_type_discriminates(self):
        request = AssignKpisRequest(assignments=[
            {"type": "cascaded", "kpi_id": "k1", "target": "50", "weight": 60},
            {"type": "committed", "task": "Train staff", "kpi_measure": "Sessions", "weight": 40},
        ])
        assert request.assignments[0].kpi_id == "k1"
        assert request.assignments[1].targets.level1 == ""

    def test_weight_above_hundred_rejected(self):
        with pytest.raises(ValidationError):
            AssignKpisRequest(assignments=[{"type": "cascaded", "kpi_id": "k1", "target": "50", "weight": 101}])
