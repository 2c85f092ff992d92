# tests/utils/test_forms.py
"""Tests for blogcms/utils/forms.py module."""

import pytest

from blogcms.errors import ValidationError
from blogcms.schemas import PostCreate
from blogcms.utils.forms import parse_tags, validate_form


class TestParseTags:
    """Tests for parse_tags."""

    def test_none_passes_through(self) -> None:
        assert parse_tags(None) is None

    def test_repeated_fields_are_kept_in_order(self) -> None:
        assert parse_tags(["python", "fastapi"]) == ["python", "fastapi"]

    def test_json_array_string_is_decoded(self) -> None:
        assert parse_tags(['["python", "fastapi"]']) == ["python", "fastapi"]

    def test_plain_single_tag(self) -> None:
        assert parse_tags(["python"]) == ["python"]

    @pytest.mark.parametrize("raw", ['["python"', '[1, 2]', '["ok", null]'])
    def test_invalid_json_is_rejected(self, raw: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_tags([raw])
        assert exc_info.value.detail == "Invalid tags format"


class TestValidateForm:
    """Tests for validate_form."""

    def test_valid_payload(self) -> None:
        post = validate_form(
            PostCreate,
            {"title": "  Hello  ", "content": "Body", "tags": [" a ", "b"], "metaDescription": "m"},
        )
        assert post.title == "Hello"
        assert post.tags == ["a", "b"]
        assert post.meta_description == "m"

    def test_errors_are_collected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_form(PostCreate, {"content": "Body", "tags": []})

        error = exc_info.value
        assert error.status_code == 400
        assert error.detail == "Invalid post data"
        fields = {entry["field"] for entry in error.errors}
        assert fields == {"title", "tags"}

    def test_blank_tag_is_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_form(PostCreate, {"title": "t", "content": "c", "tags": ["ok", "  "]})
        assert exc_info.value.errors[0]["field"] == "tags"
