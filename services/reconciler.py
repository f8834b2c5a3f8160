"""
Facet Reconciler

Merges freshly aggregated facet options with the values the visitor has
already selected. A selected value always stays in the option list, even when
no product matches it under the other active filters; otherwise the visitor
could neither see why the result is empty nor deselect it.
"""
from collections.abc import Iterable, Mapping

from models.catalog import CategoryFacet, FacetValue
from models.category import CategoryDTO


def reconcile(available: Iterable[str], selected: Iterable[str]) -> list[str]:
    """Union of available and selected values, deduplicated and sorted."""
    return sorted(set(available) | set(selected))


def reconcile_counts(available: Iterable[str],
                     selected: Iterable[str],
                     counts: Mapping[str, int]) -> list[FacetValue]:
    selected = set(selected)
    return [
        FacetValue(value=value, count=counts.get(value, 0), selected=value in selected)
        for value in reconcile(available, selected)
    ]


def _category_sort_key(category: CategoryDTO) -> tuple[str, str]:
    return category.name, category.slug


def reconcile_categories(available: Iterable[CategoryDTO],
                         selected_slugs: Iterable[str],
                         names_by_slug: Mapping[str, str]) -> list[CategoryDTO]:
    """
    Union of available categories and selected slugs, ordered by display name.

    A selected slug that is not among the available categories is resolved
    through names_by_slug; an unknown slug is shown under its own name.
    """
    by_slug = {category.slug: category for category in available}
    for slug in selected_slugs:
        if slug not in by_slug:
            by_slug[slug] = CategoryDTO(slug=slug, name=names_by_slug.get(slug, slug))
    return sorted(by_slug.values(), key=_category_sort_key)


def reconcile_category_counts(available: Iterable[CategoryDTO],
                              selected_slugs: Iterable[str],
                              names_by_slug: Mapping[str, str],
                              counts: Mapping[str, int]) -> list[CategoryFacet]:
    selected_slugs = set(selected_slugs)
    return [
        CategoryFacet(
            slug=category.slug,
            name=category.name,
            count=counts.get(category.slug, 0),
            selected=category.slug in selected_slugs,
        )
        for category in reconcile_categories(available, selected_slugs, names_by_slug)
    ]
