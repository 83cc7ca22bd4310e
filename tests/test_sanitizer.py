"""sanitizer unit tests."""

import re

import pytest

from redefynn_gate import ApplicationInput, sanitize_application, sanitize_input

_HANDLER_RE = re.compile(r"on\w+=", re.IGNORECASE)


@pytest.mark.parametrize("value", [None, "", 42, ["<b>"]])
def test_sanitize_input_non_string_or_empty(value: object) -> None:
    assert sanitize_input(value) == ""


def test_sanitize_input_trims() -> None:
    assert sanitize_input("  hello world \n") == "hello world"


@pytest.mark.parametrize(
    "value",
    [
        "<script>alert(1)</script>",
        "hi <script>document.cookie</script> there",
        "<<script>>",
    ],
)
def test_sanitize_input_removes_angle_brackets(value: str) -> None:
    result = sanitize_input(value)
    assert "<" not in result
    assert ">" not in result


def test_sanitize_input_script_tag_text() -> None:
    assert sanitize_input("<script>alert(1)</script>") == "scriptalert(1)/script"


@pytest.mark.parametrize("value", ["javascript:alert(1)", "JavaScript:alert(1)", "JAVASCRIPT:x"])
def test_sanitize_input_removes_javascript_protocol(value: str) -> None:
    assert "javascript:" not in sanitize_input(value).lower()


@pytest.mark.parametrize(
    "value",
    [
        'img src=x onClick="steal()"',
        "ONCLICK=alert(1)",
        "a onmouseover=b onload=c",
        "oonclick=nclick=x",
    ],
)
def test_sanitize_input_removes_event_handlers(value: str) -> None:
    assert not _HANDLER_RE.search(sanitize_input(value))


def test_sanitize_input_reassembled_protocol_is_removed() -> None:
    assert sanitize_input("javajavascript:script:alert(1)") == "alert(1)"
    assert sanitize_input("java<script:x") == "x"


def test_sanitize_input_keeps_ordinary_text() -> None:
    text = "Dentist since 2010, income $200k & growing"
    assert sanitize_input(text) == text


def test_sanitize_application_leaves_age_untouched() -> None:
    data = ApplicationInput(
        name=" <b>Jane</b> ",
        age=30,
        address="1 Main St onload=x, Springfield",
        annual_income="<100k>",
        job_description="javascript:Orthodontist at a clinic",
    )
    clean = sanitize_application(data)
    assert clean.name == "bJane/b"
    assert clean.age == 30
    assert clean.address == "1 Main St x, Springfield"
    assert clean.annual_income == "100k"
    assert clean.job_description == "Orthodontist at a clinic"
    assert data.name == " <b>Jane</b> "
