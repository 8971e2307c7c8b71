from __future__ import annotations

import pytest

from school_vacation.api import call_api, get_api_function, get_api_functions, invoke_tool
from school_vacation.domain import ToolArgumentsError, UnknownRegionError, UnknownToolError

pytestmark = pytest.mark.usefixtures("context")


def test_registry_exposes_the_three_tools() -> None:
    names = [spec.name for spec in get_api_functions()]
    assert names == ["check_school_vacation", "get_vacation_periods", "get_supported_regions"]


def test_check_school_vacation_schema() -> None:
    schema = get_api_function("check_school_vacation").parameter_schema
    assert schema["type"] == "object"
    assert schema["required"] == ["date", "region"]
    assert schema["properties"]["date"]["type"] == "string"
    assert "DD/MM/YYYY" in schema["properties"]["date"]["description"]
    assert schema["properties"]["region"]["enum"][0] == "flanders"


def test_get_vacation_periods_schema_bounds_year() -> None:
    schema = get_api_function("get_vacation_periods").parameter_schema
    assert schema["required"] == ["region"]
    year = schema["properties"]["year"]
    integer = next(option for option in year["anyOf"] if option.get("type") == "integer")
    assert integer["minimum"] == 2019
    assert integer["maximum"] == 2028


def test_check_school_vacation_payload() -> None:
    assert call_api("check_school_vacation", {"date": "01/01/2019", "region": "vlaanderen"}) == {
        "date": "01/01/2019",
        "region": "vlaanderen",
        "isSchoolVacation": True,
        "message": "01/01/2019 is a school vacation day in vlaanderen",
    }
    negative = call_api("check_school_vacation", {"date": "01/02/2019", "region": "flanders"})
    assert negative["isSchoolVacation"] is False
    assert negative["message"] == "01/02/2019 is not a school vacation day in flanders"


def test_get_vacation_periods_payload() -> None:
    payload = call_api("get_vacation_periods", {"region": "luxembourg"})
    assert payload == {
        "region": "luxembourg",
        "year": "all years",
        "vacationPeriods": [
            {"start": "02/01/2019", "end": "02/01/2019"},
            {"start": "04/01/2019", "end": "04/01/2019"},
        ],
        "totalPeriods": 2,
    }
    assert call_api("get_vacation_periods", {"region": "flanders", "year": 2020})["year"] == 2020


def test_get_supported_regions_payload() -> None:
    payload = call_api("get_supported_regions")
    assert payload["supportedRegions"][-1] == "luxembourg"
    assert payload["description"] == "These are the available regions for school vacation lookups"


@pytest.mark.parametrize(
    "name, arguments",
    [
        ("check_school_vacation", {"date": "01/01/2019"}),
        ("check_school_vacation", {"region": "flanders"}),
        ("check_school_vacation", {"date": 20190101, "region": "flanders"}),
        ("get_vacation_periods", {}),
        ("get_vacation_periods", {"region": "flanders", "year": 2018}),
        ("get_vacation_periods", {"region": "flanders", "year": "soon"}),
    ],
)
def test_malformed_arguments_are_rejected_before_the_engine(name: str, arguments: dict) -> None:
    with pytest.raises(ToolArgumentsError):
        call_api(name, arguments)


def test_non_object_arguments_are_rejected() -> None:
    with pytest.raises(ToolArgumentsError, match="must be an object"):
        call_api("get_vacation_periods", ["flanders"])  # type: ignore[arg-type]


def test_unknown_tool() -> None:
    with pytest.raises(UnknownToolError, match="Unknown tool: nope"):
        call_api("nope", {})


def test_unknown_region_propagates_from_call_api() -> None:
    with pytest.raises(UnknownRegionError):
        call_api("check_school_vacation", {"date": "01/01/2019", "region": "atlantis"})


def test_invoke_tool_renders_failures_as_payloads() -> None:
    outcome = invoke_tool("check_school_vacation", {"date": "01/01/2019", "region": "atlantis"})
    assert outcome.is_error is True
    assert outcome.payload == {
        "error": "Unknown region: atlantis",
        "tool": "check_school_vacation",
        "arguments": {"date": "01/01/2019", "region": "atlantis"},
    }

    missing = invoke_tool("get_vacation_periods", {})
    assert missing.is_error is True
    assert "region" in missing.payload["error"]

    unknown = invoke_tool("nope", {"x": 1})
    assert unknown.payload["error"] == "Unknown tool: nope"


def test_invoke_tool_success() -> None:
    outcome = invoke_tool("get_vacation_periods", {"region": "wallonia", "year": 2019})
    assert outcome.is_error is False
    assert outcome.payload["totalPeriods"] == 2
