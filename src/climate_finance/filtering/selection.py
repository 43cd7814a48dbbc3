"""Multi-value selection state for filter dropdowns.

Builds the list values the filter engine consumes. Deselecting the "All"
option yields an empty selection, which the engine treats the same as
["All"].
"""

from collections.abc import Sequence
from typing import Any

from climate_finance.filtering.models import ALL, FilterOption


def find_all_option(options: Sequence[FilterOption]) -> FilterOption | None:
    """Find the "All" option by value, or by a label containing "all"."""
    for option in options:
        if option.value == ALL or "all" in option.label.lower():
            return option
    return None


def toggle_option(
    selected: Sequence[Any],
    option_value: Any,
    options: Sequence[FilterOption],
) -> list[Any]:
    """
    Toggle an option in a selection.

    - toggling "All" off clears the selection, toggling it on keeps only it
    - toggling any other option drops "All" from the result
    """
    all_option = find_all_option(options)
    all_value = all_option.value if all_option else None

    if all_option is not None and option_value == all_value:
        if all_value in selected:
            return []
        return [all_value]

    if option_value in selected:
        new_value = [v for v in selected if v != option_value]
    else:
        new_value = [*selected, option_value]

    if all_option is not None:
        new_value = [v for v in new_value if v != all_value]
    return new_value


def remove_option(selected: Sequence[Any], option_value: Any) -> list[Any]:
    """Remove a single option from a selection."""
    return [v for v in selected if v != option_value]


def visible_options(
    options: Sequence[FilterOption],
    search_term: str = "",
) -> list[FilterOption]:
    """Options whose label matches the search term, "All" pinned first."""
    term = search_term.lower()
    filtered = [o for o in options if term in o.label.lower()]

    all_option = find_all_option(options)
    if all_option is not None and (search_term == "" or term in all_option.label.lower()):
        without_all = [o for o in filtered if o.value != all_option.value]
        return [all_option, *without_all]
    return filtered


def selected_labels(
    selected: Sequence[Any],
    options: Sequence[FilterOption],
    max_display: int = 3,
) -> tuple[list[str], int]:
    """
    Labels to display for a selection.

    Returns:
        Tuple of (labels to show, count of hidden labels)
    """
    all_option = find_all_option(options)
    if all_option is not None and all_option.value in selected:
        return [all_option.label or ALL], 0

    labels = [o.label for o in options if o.value in selected]
    return labels[:max_display], max(len(labels) - max_display, 0)
