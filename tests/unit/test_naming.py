"""Tests for relaxed-name to Key Vault name translation."""

import pytest

from kvsource.common.exceptions import ErrorCode, KVSourceValueError
from kvsource.naming import expand, expand_all, to_canonical


class TestToCanonical:
    """Test the ordered translation rules."""

    @pytest.mark.parametrize("name", [
        "acme.my-project.person.first-name",
        "acme.myProject.person.firstName",
        "acme.my_project.person.first_name",
        "ACME_MYPROJECT_PERSON_FIRSTNAME",
    ])
    def test_relaxed_spellings_share_one_secret_name(self, name):
        assert to_canonical(name) == "acme-myproject-person-firstname"

    @pytest.mark.parametrize("name,expected", [
        ("db-password", "db-password"),
        ("DB-Password", "db-password"),
        ("Secret1", "secret1"),
        ("a", "a"),
    ])
    def test_vault_legal_names_are_lower_cased(self, name, expected):
        assert to_canonical(name) == expected

    @pytest.mark.parametrize("name,expected", [
        ("DB_PASSWORD", "db-password"),
        ("API_KEY_2", "api-key-2"),
        ("_LEADING", "-leading"),
    ])
    def test_upper_snake_names_swap_underscores(self, name, expected):
        assert to_canonical(name) == expected

    def test_upper_snake_only_applies_without_lower_case_letters(self):
        # mixed case with underscore falls through to the dotted rule
        assert to_canonical("Db_Password") == "dbpassword"

    def test_dotted_rule_strips_separators_before_mapping_dots(self):
        assert to_canonical("spring.data-source.user_name") == "spring-datasource-username"

    def test_vault_legal_rule_wins_over_dotted_rule(self):
        # a hyphenated name must keep its hyphens
        assert to_canonical("my-project") == "my-project"

    def test_digits_only_name(self):
        assert to_canonical("12345") == "12345"

    @pytest.mark.parametrize("name", [
        "acme.myProject.person.firstName",
        "DB_PASSWORD",
        "Mixed-Case",
    ])
    def test_case_sensitive_policy_is_identity(self, name):
        assert to_canonical(name, case_sensitive=True) == name

    @pytest.mark.parametrize("name", [None, ""])
    def test_empty_names_are_rejected(self, name):
        with pytest.raises(KVSourceValueError) as exc_info:
            to_canonical(name)
        assert exc_info.value.error_code is ErrorCode.INVALID_ARGUMENT

    def test_rejection_is_a_value_error(self):
        with pytest.raises(ValueError):
            to_canonical("", case_sensitive=True)


class TestExpand:
    """Test display-name expansion used when listing property names."""

    def test_hyphenated_name_gets_dotted_variant(self):
        assert expand("db-password") == ("db-password", "db.password")

    def test_name_without_hyphen_is_not_duplicated(self):
        assert expand("password") == ("password",)

    def test_case_sensitive_policy_does_not_expand(self):
        assert expand("db-password", case_sensitive=True) == ("db-password",)

    def test_expand_all_deduplicates(self):
        names = expand_all(["a-b", "a-b", "c"])
        assert names == frozenset({"a-b", "a.b", "c"})

    def test_expand_all_of_nothing_is_empty(self):
        assert expand_all([]) == frozenset()
