import pytest

from searchable import SearchAspect, SearchResult, SearchResultCollection, SearchableAttribute


def make_collection() -> SearchResultCollection:
    return SearchResultCollection(
        [
            SearchResult("a", "a", type="users"),
            SearchResult("b", "b", type="posts"),
            SearchResult("c", "c", type="users"),
        ]
    )


def test_group_by_type_partitions_in_order() -> None:
    results = make_collection()

    groups = results.group_by_type()

    assert list(groups) == ["users", "posts"]
    assert [r.title for r in groups["users"]] == ["a", "c"]
    assert sum(len(group) for group in groups.values()) == len(results)


def test_aspect_filters_by_type() -> None:
    results = make_collection()

    assert results.aspect("users") == results.group_by_type()["users"]
    assert results.aspect("comments") == []


def test_collection_behaves_like_a_sequence() -> None:
    results = make_collection()

    assert len(results) == 3
    assert results[-1].title == "c"
    assert [r.title for r in results] == ["a", "b", "c"]
    assert isinstance(results[:2], SearchResultCollection)
    assert len(results[:2]) == 2
    assert results[1] in results


def test_search_result_with_type_returns_a_tagged_copy() -> None:
    result = SearchResult("item", "Title", url="/item", metadata={"score": 1})

    tagged = result.with_type("items")

    assert tagged.type == "items"
    assert result.type is None
    assert (tagged.searchable, tagged.title, tagged.url) == ("item", "Title", "/item")
    assert tagged.metadata == {"score": 1}
    with pytest.raises(AttributeError):
        tagged.title = "changed"  # type: ignore[misc]


def test_searchable_attribute_factories() -> None:
    assert SearchableAttribute.create("name") == SearchableAttribute("name", True)
    assert SearchableAttribute.create("name", False).partial is False
    assert SearchableAttribute.create_exact("email") == SearchableAttribute("email", False)
    assert SearchableAttribute.create_many(["a", ["b", ("c",)]]) == [
        SearchableAttribute("a"),
        SearchableAttribute("b"),
        SearchableAttribute("c"),
    ]


class DocumentSearchAspect(SearchAspect):
    def get_results(self, term):
        return []


class HTTPDocsSearchAspect(SearchAspect):
    def get_results(self, term):
        return []


class Report(SearchAspect):
    def get_results(self, term):
        return []


class NamedSearchAspect(SearchAspect):
    search_type = "named"

    def get_results(self, term):
        return []


@pytest.mark.parametrize(
    "aspect, expected",
    [
        (DocumentSearchAspect(), "documents"),
        (HTTPDocsSearchAspect(), "http_docs"),
        (Report(), "reports"),
        (NamedSearchAspect(), "named"),
    ],
)
def test_aspect_type_is_derived_from_the_class_name(aspect, expected) -> None:
    assert aspect.get_type() == expected
