from listing.sorting import SortOrder, SortSpec, resolve_sort


def test_defaults_to_date_desc():
    assert resolve_sort() == SortOrder("date", "desc")
    assert resolve_sort(SortSpec()) == SortOrder("date", "desc")


def test_whitelisted_field_is_kept():
    for field in ("location", "magnitude", "date", "createdAt"):
        assert resolve_sort(SortSpec(field, "asc")) == SortOrder(field, "asc")


def test_unknown_field_falls_back_to_date_without_error():
    order = resolve_sort(SortSpec("elevation", "asc"))
    assert order.field == "date"
    assert order.direction == "asc"


def test_field_is_case_sensitive():
    assert resolve_sort(SortSpec("Magnitude", "asc")).field == "date"


def test_direction_is_normalized():
    assert resolve_sort(SortSpec("magnitude", " ASC ")).direction == "asc"


def test_invalid_direction_falls_back_to_desc():
    order = resolve_sort(SortSpec("magnitude", "sideways"))
    assert order == SortOrder("magnitude", "desc")
    assert order.descending


def test_non_string_values_fall_back():
    assert resolve_sort(SortSpec(42, 7)) == SortOrder("date", "desc")
