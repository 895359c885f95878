"""Tests for taxonomy and entry classification."""

from datetime import date

import pytest

from flextime.core.taxonomy import (
    Category,
    Classifier,
    ConfigurationError,
    TaskIdResolver,
    TaskNameResolver,
    TaskTaxonomy,
    parse_categories,
)


class TestTaskTaxonomy:
    def test_duplicate_identifier_rejected(self):
        with pytest.raises(ConfigurationError, match="both"):
            TaskTaxonomy({Category.VACATION: "123", Category.SICK_LEAVE: "123"})

    def test_duplicate_differs_only_in_case_when_insensitive(self):
        with pytest.raises(ConfigurationError):
            TaskTaxonomy({"vacation": "Holiday", "unpaidLeave": "holiday"}, case_insensitive=True)

    def test_case_sensitive_allows_case_variants(self):
        taxonomy = TaskTaxonomy({"vacation": "Holiday", "unpaidLeave": "holiday"})
        assert taxonomy.category_for("Holiday") == Category.VACATION
        assert taxonomy.category_for("holiday") == Category.UNPAID_LEAVE

    def test_empty_identifiers_mean_unused(self):
        taxonomy = TaskTaxonomy({"vacation": "", "flexLeave": None, "sickLeave": "7"})
        assert not taxonomy.has(Category.VACATION)
        assert not taxonomy.has(Category.FLEX_LEAVE)
        assert taxonomy.has(Category.SICK_LEAVE)

    def test_string_keys_and_numeric_ids(self):
        taxonomy = TaskTaxonomy({"vacation": 11369141})
        assert taxonomy.category_for("11369141") == Category.VACATION
        assert taxonomy.category_for(11369141) == Category.VACATION

    def test_unknown_category_key(self):
        with pytest.raises(ConfigurationError, match="holidayz"):
            TaskTaxonomy({"holidayz": "1"})

    def test_unknown_identifier(self):
        taxonomy = TaskTaxonomy({"vacation": "1"})
        assert taxonomy.category_for("2") is None


class TestParseCategories:
    def test_parses_list(self):
        assert parse_categories("vacation, unpaidLeave") == {Category.VACATION, Category.UNPAID_LEAVE}

    def test_ignores_blanks(self):
        assert parse_categories("vacation,,") == {Category.VACATION}

    def test_unknown(self):
        with pytest.raises(ConfigurationError):
            parse_categories("vacation,holiday")


class TestResolvers:
    def test_id_resolver_exact(self, taxonomy, make_entry):
        resolver = TaskIdResolver(taxonomy)
        assert resolver.category_of(make_entry(date(2024, 1, 2), task_id="VAC")) == Category.VACATION
        assert resolver.category_of(make_entry(date(2024, 1, 2), task_id="vac")) is None

    def test_name_resolver_case_insensitive(self, make_entry):
        taxonomy = TaskTaxonomy({"vacation": "Annual Holiday"})
        resolver = TaskNameResolver(taxonomy)
        entry = make_entry(date(2024, 1, 2), task_id="annual holiday")
        assert resolver.category_of(entry) == Category.VACATION

    def test_name_resolver_falls_back_to_task_name(self, make_entry):
        resolver = TaskNameResolver(TaskTaxonomy({"sickLeave": "sick leave"}))
        entry = make_entry(date(2024, 1, 2), task_id="", task_name="Sick Leave")
        assert resolver.category_of(entry) == Category.SICK_LEAVE


class TestClassifier:
    @pytest.fixture
    def day(self):
        return date(2024, 1, 2)

    def test_work_entry_has_no_category(self, classifier, make_entry, day):
        entry = make_entry(day)
        assert classifier.category_of(entry) is None
        assert not classifier.is_holiday(entry)
        assert not classifier.is_away(entry)

    @pytest.mark.parametrize("task_id", ["PH", "VAC", "UL"])
    def test_holiday_categories(self, classifier, make_entry, day, task_id):
        assert classifier.is_holiday(make_entry(day, task_id=task_id))

    @pytest.mark.parametrize("task_id", ["SL", "CS", "PL", "EPL", "FL", "II", "PSD"])
    def test_non_holiday_categories(self, classifier, make_entry, day, task_id):
        assert not classifier.is_holiday(make_entry(day, task_id=task_id))

    def test_default_away_is_vacation_and_unpaid(self, classifier, make_entry, day):
        assert classifier.is_away(make_entry(day, task_id="VAC"))
        assert classifier.is_away(make_entry(day, task_id="UL"))
        assert not classifier.is_away(make_entry(day, task_id="PH"))
        assert not classifier.is_away(make_entry(day, task_id="SL"))

    def test_custom_away(self, taxonomy, make_entry, day):
        classifier = Classifier(
            TaskIdResolver(taxonomy),
            away=frozenset({Category.VACATION, Category.UNPAID_LEAVE, Category.PARENTAL_LEAVE}),
        )
        assert classifier.is_away(make_entry(day, task_id="PL"))

    def test_named_predicates(self, classifier, make_entry, day):
        assert classifier.is_public_holiday(make_entry(day, task_id="PH"))
        assert classifier.is_vacation(make_entry(day, task_id="VAC"))
        assert classifier.is_flex_leave(make_entry(day, task_id="FL"))
        assert classifier.is_category(make_entry(day, task_id="II"), Category.INTERNALLY_INVOICABLE)

    def test_counts_toward_work_hours(self, classifier, make_entry, day):
        assert classifier.counts_toward_work_hours(make_entry(day))
        assert classifier.counts_toward_work_hours(make_entry(day, task_id="SL"))
        assert classifier.counts_toward_work_hours(make_entry(day, task_id="CS"))
        assert classifier.counts_toward_work_hours(make_entry(day, task_id="II"))
        assert classifier.counts_toward_work_hours(make_entry(day, task_id="PSD"))
        assert not classifier.counts_toward_work_hours(make_entry(day, billable=False))
        assert not classifier.counts_toward_work_hours(make_entry(day, task_id="VAC"))
