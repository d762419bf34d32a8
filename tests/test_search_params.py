from werkzeug.datastructures import MultiDict

from search_repo.common.paging import SearchParams


def test_defaults_outside_request():
    p = SearchParams.from_request()
    assert p == SearchParams()
    assert p.term == ""
    assert p.direction == "asc"


def test_parses_mapping():
    p = SearchParams.from_request({
        "q": "  alice ",
        "orderBy": "First_Name",
        "orderDirection": "DESC",
        "per_page": "25",
        "page": "3",
    })
    assert p == SearchParams(term="alice", order_by="First_Name", order_direction="desc", per_page=25, page=3)
    assert p.direction == "desc"


def test_bad_integers_fall_back_to_none():
    p = SearchParams.from_request(MultiDict({"per_page": "lots", "page": "0"}))
    assert p.per_page is None
    assert p.page is None

    p = SearchParams.from_request({"per_page": "-5", "page": ""})
    assert p.per_page is None
    assert p.page is None


def test_blank_values_are_absent():
    p = SearchParams.from_request({"q": "   ", "orderBy": "", "orderDirection": " "})
    assert p.term == ""
    assert p.order_by is None
    assert p.order_direction is None


def test_unknown_direction_sorts_ascending():
    assert SearchParams(order_direction="sideways").direction == "asc"


def test_reads_active_request(app):
    with app.test_request_context("/?q=bob&orderBy=code&per_page=5"):
        p = SearchParams.from_request()
    assert (p.term, p.order_by, p.order_direction, p.per_page, p.page) == ("bob", "code", None, 5, None)
