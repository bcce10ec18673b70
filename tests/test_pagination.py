import pytest

from app.api.customers import DEFAULT_LIMIT, DEFAULT_PAGE, parse_positive_int


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, 7),
        ("3", 3),
        (" 12 ", 12),
        ("abc", 7),
        ("", 7),
        ("0", 7),
        ("-4", 7),
        ("2.5", 7),
        ("2147483647", 2147483647),
        ("2147483648", 7),
        ("99999999999999999999", 7),
    ],
)
def test_parse_positive_int(value, expected):
    assert parse_positive_int(value, 7) == expected


def test_list_defaults(client, make_customer):
    make_customer()
    make_customer()

    body = client.get("/api/customers").json()
    assert body["page"] == 1
    assert body["limit"] == DEFAULT_LIMIT
    assert body["total"] == 2
    assert body["total_count"] == 2
    assert [c["customer_id"] for c in body["data"]] == [1, 2]


def test_second_page_is_offset_by_limit(client, make_customer):
    for _ in range(25):
        make_customer()

    first = client.get("/api/customers", params={"page": 1, "limit": 10}).json()
    second = client.get("/api/customers", params={"page": 2, "limit": 10}).json()
    third = client.get("/api/customers", params={"page": 3, "limit": 10}).json()

    first_ids = [c["customer_id"] for c in first["data"]]
    second_ids = [c["customer_id"] for c in second["data"]]
    assert second_ids == [i + 10 for i in first_ids]

    # total counts the rows on the page, total_count the whole table
    assert (first["total"], second["total"], third["total"]) == (10, 10, 5)
    assert third["total_count"] == 25


def test_invalid_paging_values_fall_back_to_defaults(client, make_customer):
    make_customer()

    body = client.get("/api/customers", params={"page": "abc", "limit": "xyz"}).json()
    assert body["page"] == 1
    assert body["limit"] == DEFAULT_LIMIT
    assert body["total"] == 1


def test_page_past_the_end_is_empty(client, make_customer):
    make_customer()

    body = client.get("/api/customers", params={"page": 5, "limit": 10}).json()
    assert body["data"] == []
    assert body["total"] == 0
    assert body["total_count"] == 1


def test_out_of_range_paging_values_fall_back_to_defaults(client, make_customer):
    make_customer()

    response = client.get(
        "/api/customers",
        params={"page": "99999999999999999999", "limit": "99999999999999999999"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["page"] == DEFAULT_PAGE
    assert body["limit"] == DEFAULT_LIMIT
    assert body["total"] == 1
