"""Item list integration steps.

Requests go through ``context.client`` (set up in environment.py), which
keeps the session cookie for the whole scenario.
"""

from __future__ import annotations

from typing import Any, Dict, List

from behave import given, then, when
from fastapi.testclient import TestClient

PROBLEM_MEDIA_TYPE = "application/problem+json"


def _ids(text: str) -> List[int]:
    return [int(part) for part in text.split(",") if part.strip()]


def _json(context) -> Dict[str, Any]:
    resp = context.last_response
    assert resp is not None, "No request has been sent in this scenario"
    return resp.json()


def _page_ids(context) -> List[int]:
    return [item["id"] for item in _json(context)["items"]]


def _move_to_top(context, ids: str) -> None:
    context.last_response = context.client.post("/api/reorder", json={"orderedIds": _ids(ids)})


# ------------------
# Requests
# ------------------


@when("I fetch the page at offset {offset:d} with limit {limit:d}")
def fetch_page(context, offset: int, limit: int) -> None:
    context.last_response = context.client.get("/api/items", params={"offset": offset, "limit": limit})


@when("another caller fetches the page at offset {offset:d} with limit {limit:d}")
def another_caller_fetches(context, offset: int, limit: int) -> None:
    with TestClient(context.app) as other:
        context.last_response = other.get("/api/items", params={"offset": offset, "limit": limit})


@when('I search for "{query}" with limit {limit:d}')
def search(context, query: str, limit: int) -> None:
    context.last_response = context.client.get("/api/items", params={"q": query, "limit": limit})


@given('I moved "{ids}" to the top')
def moved_to_top(context, ids: str) -> None:
    _move_to_top(context, ids)
    assert context.last_response.status_code == 200, context.last_response.text


@when('I move "{ids}" to the top')
def move_to_top(context, ids: str) -> None:
    _move_to_top(context, ids)


@when("I insert {ident:d} between {before:d} and {after:d}")
def insert_between(context, ident: int, before: int, after: int) -> None:
    context.last_response = context.client.post(
        "/api/reorderSingle",
        json={"id": ident, "beforeId": before, "afterId": after},
    )


@when('I send a reorder body with orderedIds set to "{raw}"')
def send_raw_reorder(context, raw: str) -> None:
    context.last_response = context.client.post("/api/reorder", json={"orderedIds": raw})


@when('I select "{ids}"')
def select(context, ids: str) -> None:
    context.last_response = context.client.post("/api/select", json={"ids": _ids(ids), "selected": True})


@when('I deselect "{ids}"')
def deselect(context, ids: str) -> None:
    context.last_response = context.client.post("/api/select", json={"ids": _ids(ids), "selected": False})


@when("I reset my session")
def reset(context) -> None:
    context.last_response = context.client.post("/api/reset")
    assert context.last_response.status_code == 200


# ------------------
# Assertions
# ------------------


@then("the response status is {status:d}")
def response_status(context, status: int) -> None:
    assert context.last_response.status_code == status, context.last_response.text


@then('the page ids are "{ids}"')
def page_ids_are(context, ids: str) -> None:
    assert _page_ids(context) == _ids(ids), _page_ids(context)


@then("the page holds {count:d} items")
def page_holds(context, count: int) -> None:
    assert len(_page_ids(context)) == count


@then("the page has more items")
def page_has_more(context) -> None:
    assert _json(context)["hasMore"] is True


@then("the next offset is {offset:d}")
def next_offset(context, offset: int) -> None:
    assert _json(context)["nextOffset"] == offset


@then('the response field "{name}" is {value:d}')
def response_field(context, name: str, value: int) -> None:
    assert _json(context)[name] == value, _json(context)


@then('the selected ids on the page are "{ids}"')
def selected_on_page(context, ids: str) -> None:
    selected = [item["id"] for item in _json(context)["items"] if item["selected"]]
    assert selected == _ids(ids), selected


@then("nothing on the page is selected")
def nothing_selected(context) -> None:
    assert not any(item["selected"] for item in _json(context)["items"])


@then('the response is a problem with status {status:d} and code "{code}"')
def problem_response(context, status: int, code: str) -> None:
    resp = context.last_response
    assert resp.status_code == status, resp.text
    assert resp.headers["content-type"].startswith(PROBLEM_MEDIA_TYPE)
    assert resp.json()["code"] == code
