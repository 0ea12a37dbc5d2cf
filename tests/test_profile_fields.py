import os
import sys

# Ensure backend package is on sys.path for imports during tests
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.utils.profile_fields import (
    build_profile_fields,
    build_social,
    normalize_handle,
    parse_skills,
)


def test_handle_case_and_whitespace_normalize_to_same_value():
    assert normalize_handle(" Neo ") == "neo"
    assert normalize_handle("NEO") == "neo"


def test_skills_are_split_trimmed_and_empty_pieces_dropped():
    assert parse_skills("python, fastapi ,, ,sql") == ["python", "fastapi", "sql"]


def test_skills_keep_input_order():
    assert parse_skills("z,a,m") == ["z", "a", "m"]


def test_skills_list_input_is_treated_as_already_split():
    assert parse_skills([" go ", "", "rust"]) == ["go", "rust"]


def test_social_omits_absent_and_empty_keys():
    social = build_social({"twitter": " twitter.com/neo ", "youtube": "", "bio": "ignored"})
    assert social == {"twitter": "twitter.com/neo"}


def test_social_is_always_present_even_when_no_keys_sent():
    fields = build_profile_fields({"status": "Developer"})
    assert fields["social"] == {}


def test_only_sent_truthy_fields_are_included():
    fields = build_profile_fields({"status": " Developer ", "company": "", "bio": None})
    assert fields == {"status": "Developer", "social": {}}


def test_handle_is_trimmed_and_lowercased():
    fields = build_profile_fields({"handle": "  The.One ", "status": "Dev"})
    assert fields["handle"] == "the.one"


def test_blank_handle_is_left_out():
    fields = build_profile_fields({"handle": "   ", "status": "Dev"})
    assert "handle" not in fields


def test_skills_absent_leaves_field_out():
    assert "skills" not in build_profile_fields({"status": "Dev"})


def test_empty_skills_string_clears_skills():
    assert build_profile_fields({"status": "Dev", "skills": ""})["skills"] == []
