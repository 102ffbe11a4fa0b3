"""Unit tests for cascading dropdown resolution."""
import pytest

from src.services.filter_resolver import (
    ALL_PLACEHOLDER,
    SELECT_PLACEHOLDER,
    DependentOptions,
    FieldSpec,
    Selection,
    clear_stale_selections,
    normalize_selection,
    resolve_admin_filters,
    resolve_dependent_options,
    resolve_selection,
    with_placeholder,
)
from src.utils.date_utils import to_timestamp

MAY_1 = to_timestamp("2024-05-01")
MAY_2 = to_timestamp("2024-05-02")


class TestFieldSpec:
    """Test typed field descriptors."""

    def test_select_resolves_options_through_provider(self):
        """Test options come from the explicit provider."""
        spec = FieldSpec("category", "Category", kind="select", options_provider=lambda: {"Tech": "Tech"})
        assert spec.options() == {"Tech": "Tech"}

    def test_text_field_has_no_options(self):
        """Test non-select fields resolve to no options."""
        assert FieldSpec("full_name", "Full Name").options() == {}

    def test_unknown_kind_raises_error(self):
        """Test only known kinds are accepted."""
        with pytest.raises(ValueError, match="Unknown field kind"):
            FieldSpec("x", "X", kind="checkbox")

    def test_provider_on_text_field_raises_error(self):
        """Test providers are reserved for select fields."""
        with pytest.raises(ValueError, match="Only select fields"):
            FieldSpec("email", "Email", kind="email", options_provider=dict)


class TestNormalizeSelection:
    """Test raw widget values to Selection."""

    def test_blanks_become_none(self):
        """Test placeholders and blanks are unset."""
        assert normalize_selection("", "", "") == Selection()

    def test_values_are_coerced(self):
        """Test numeric strings become ints and category is trimmed."""
        selection = normalize_selection(" Tech ", str(MAY_1), "3")
        assert selection == Selection(category="Tech", event_date=MAY_1, event_id=3)


class TestResolveDependentOptions:
    """Test the category -> date -> name dependency."""

    def test_nothing_chosen(self, catalog, add_event):
        """Test no category means no dates and no names."""
        add_event()
        assert resolve_dependent_options(catalog, None, None) == DependentOptions()

    def test_category_only(self, catalog, add_event):
        """Test a category unlocks dates but not names."""
        add_event()
        options = resolve_dependent_options(catalog, "Tech", None)
        assert options.dates == {MAY_1: "01 May 2024"}
        assert options.event_names == {}

    def test_date_without_category(self, catalog, add_event):
        """Test a date alone unlocks nothing."""
        add_event()
        assert resolve_dependent_options(catalog, None, MAY_1) == DependentOptions()

    def test_category_and_date(self, catalog, add_event):
        """Test both choices unlock event names."""
        summit = add_event()
        options = resolve_dependent_options(catalog, "Tech", MAY_1)
        assert options.event_names == {summit: "AI Summit"}

    def test_unknown_category_only_placeholder(self, catalog, add_event):
        """Test an unknown category leaves the date field with just the placeholder."""
        add_event()
        options = resolve_dependent_options(catalog, "Sports", None)
        assert with_placeholder(options.dates) == {"": SELECT_PLACEHOLDER}


class TestClearStaleSelections:
    """Test downstream clearing after upstream changes."""

    OPTIONS = DependentOptions(dates={MAY_1: "01 May 2024"}, event_names={1: "AI Summit"})

    def test_unchanged_selection_is_kept(self):
        """Test a consistent selection survives."""
        current = Selection("Tech", MAY_1, 1)
        assert clear_stale_selections(current, current, self.OPTIONS) == current

    def test_category_change_clears_date_and_event(self):
        """Test switching category drops both downstream choices."""
        previous = Selection("Tech", MAY_1, 1)
        current = Selection("Cultural", MAY_1, 1)
        assert clear_stale_selections(previous, current, self.OPTIONS) == Selection("Cultural")

    def test_date_change_clears_event(self):
        """Test switching date drops the event choice."""
        options = DependentOptions(dates={MAY_1: "01 May 2024", MAY_2: "02 May 2024"}, event_names={2: "Expo"})
        previous = Selection("Tech", MAY_1, 1)
        current = Selection("Tech", MAY_2, 1)
        assert clear_stale_selections(previous, current, options) == Selection("Tech", MAY_2)

    def test_values_outside_options_are_cleared(self):
        """Test choices not offered any more are dropped even without history."""
        assert clear_stale_selections(None, Selection("Tech", MAY_2, 1), self.OPTIONS) == Selection("Tech")
        assert clear_stale_selections(None, Selection("Tech", MAY_1, 7), self.OPTIONS) == Selection("Tech", MAY_1)


class TestResolveSelection:
    """Test one full cascade round."""

    def test_category_switch_recomputes_options(self, catalog, add_event):
        """Test a cleared date leaves no event names behind."""
        summit = add_event()
        add_event(name="Poetry Slam", category="Cultural", event_date=MAY_2)

        previous = Selection("Tech", MAY_1, summit)
        selection, options = resolve_selection(catalog, Selection("Cultural", MAY_1, summit), previous)

        assert selection == Selection("Cultural")
        assert options.dates == {MAY_2: "02 May 2024"}
        assert options.event_names == {}


class TestResolveAdminFilters:
    """Test admin filter options."""

    def test_events_restricted_by_date(self, catalog, add_event):
        """Test choosing a date narrows the event options."""
        summit = add_event()
        expo = add_event(name="Robotics Expo", event_date=MAY_2)

        unfiltered = resolve_admin_filters(catalog, None, None)
        by_date = resolve_admin_filters(catalog, MAY_2, None)

        assert unfiltered.events == {summit: "AI Summit", expo: "Robotics Expo"}
        assert by_date.events == {expo: "Robotics Expo"}
        assert by_date.event_date == MAY_2

    def test_event_outside_date_is_dropped(self, catalog, add_event):
        """Test an event not held on the chosen date is unselected."""
        summit = add_event()
        add_event(name="Robotics Expo", event_date=MAY_2)
        assert resolve_admin_filters(catalog, MAY_2, summit).event_id is None

    def test_unknown_date_is_dropped(self, catalog, add_event):
        """Test a date with no events is unselected."""
        add_event()
        result = resolve_admin_filters(catalog, 42, None)
        assert result.event_date is None
        assert len(result.events) == 1

    def test_all_placeholder(self):
        """Test admin placeholder label."""
        assert with_placeholder({1: "AI Summit"}, ALL_PLACEHOLDER) == {"": "- All -", 1: "AI Summit"}
