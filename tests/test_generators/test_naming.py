"""Unit tests for generator name helpers (nova_cli.generators.naming)."""

from __future__ import annotations

import re
from datetime import datetime

import pytest

from nova_cli.generators.naming import (
    normalize_suffix,
    sanitize_file_name,
    timestamp,
    to_class_name,
)


class TestNormalizeSuffix:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("user", "user.controller.js"),
            ("user.controller.js", "user.controller.js"),
            ("user.controller.ts", "user.controller.js"),
            ("user.ts", "user.controller.js"),
            ("user.controller", "user.controller.js"),
            ("FooBar", "FooBar.controller.js"),
        ],
    )
    def test_controller_names(self, name, expected):
        assert normalize_suffix(name, ".controller.js") == expected

    @pytest.mark.unit
    def test_middleware_suffix(self):
        assert normalize_suffix("auth", ".middleware.js") == "auth.middleware.js"
        assert normalize_suffix("auth.middleware", ".middleware.js") == "auth.middleware.js"

    @pytest.mark.unit
    def test_only_last_extension_stripped(self):
        assert normalize_suffix("api.v2.ts", ".controller.js") == "api.v2.controller.js"


class TestToClassName:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("foo", "Foo"),
            ("foo-bar", "FooBar"),
            ("user profile", "UserProfile"),
            ("a_b", "AB"),
            ("fooBar", "FooBar"),
            ("--foo--", "Foo"),
            ("v2-api", "V2Api"),
        ],
    )
    def test_conversion(self, text, expected):
        assert to_class_name(text) == expected

    @pytest.mark.unit
    def test_empty(self):
        assert to_class_name("") == ""


class TestSanitizeFileName:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("My Migration", "my_migration"),
            ("  create users  ", "create_users"),
            ("add-posts!", "addposts"),
            ("multiple   spaces", "multiple_spaces"),
            ("already_ok", "already_ok"),
        ],
    )
    def test_slug(self, text, expected):
        assert sanitize_file_name(text) == expected


class TestTimestamp:
    @pytest.mark.unit
    def test_fixed_time(self):
        assert timestamp(datetime(2024, 3, 9, 7, 5, 1)) == "2024_03_09_07_05_01"

    @pytest.mark.unit
    def test_defaults_to_now(self):
        assert re.fullmatch(r"\d{4}(_\d{2}){5}", timestamp())
