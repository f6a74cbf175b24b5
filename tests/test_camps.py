import asyncio
import time

import httpx
from mongomock.collection import Collection

from conftest import camp_payload


def test_add_and_get_camp(client, organizer, make_camp):
    camp_id = make_camp()
    response = client.get(f"/camp/{camp_id}")
    assert response.status_code == 200
    camp = response.json()
    assert camp["_id"] == camp_id
    assert camp["participantCount"] == 0
    assert camp["fees"] == "500"
    assert camp["organizerEmail"] == "organizer@example.com"


def test_numeric_fees_are_stored_as_text(client, organizer, db):
    client.post("/camps", json=camp_payload(fees=750), headers=organizer)
    assert db["camps"].find_one()["fees"] == "750"


def test_camp_lookup_errors(client):
    assert client.get("/camp/not-an-object-id").status_code == 400
    response = client.get("/camp/65f1c0e2a1b2c3d4e5f60718")
    assert response.status_code == 404
    assert "does not exist" in response.json()["message"]


def test_missing_fields_are_bad_request(client, organizer):
    response = client.post("/camps", json={"campName": "Incomplete"}, headers=organizer)
    assert response.status_code == 400
    assert "fees" in response.json()["message"]


def test_search_matches_name_date_and_professional(client, make_camp):
    make_camp(campName="Dermatology Drive")
    make_camp(campName="Eye Care", professionalName="Dr. DERMAN")
    make_camp(campName="Heart Screening", dateTime="Derma day 2026-12-01")
    make_camp(campName="Dental Camp", location="Derma Road")

    response = client.get("/camps", params={"search": "derma"})
    names = sorted(c["campName"] for c in response.json())
    assert names == ["Dermatology Drive", "Eye Care", "Heart Screening"]
    assert client.get("/camps-count", params={"search": "derma"}).json() == {"count": 3}
    assert client.get("/camps-count").json() == {"count": 4}


def test_search_text_is_not_a_pattern(client, make_camp):
    make_camp(campName="Child (0-5) Vaccination")
    make_camp(campName="Adult Vaccination")
    response = client.get("/camps", params={"search": "(0-5)"})
    assert [c["campName"] for c in response.json()] == ["Child (0-5) Vaccination"]


def test_sorting(client, db, make_camp):
    a = make_camp(campName="Bravo", fees="500")
    b = make_camp(campName="alpha", fees="1500")
    c = make_camp(campName="Charlie", fees="90")
    db["camps"].update_one({"campName": "Charlie"}, {"$set": {"participantCount": 9}})
    db["camps"].update_one({"campName": "Bravo"}, {"$set": {"participantCount": 3}})

    by_count = [x["_id"] for x in client.get("/camps", params={"sorted": "participantCount"}).json()]
    by_fees = [x["_id"] for x in client.get("/camps", params={"sorted": "fees"}).json()]
    by_name = [x["campName"] for x in client.get("/camps", params={"sorted": "campName"}).json()]

    assert by_count == [c, a, b]
    assert by_fees == [b, a, c]
    assert by_name == ["Bravo", "Charlie", "alpha"]


def test_pages_are_disjoint_and_ordered(client, db, make_camp):
    for i in range(25):
        make_camp(campName=f"Camp {i:02d}", fees=str(100 + (i // 2) * 10))
        # only three distinct counts, so most camps tie with others
        db["camps"].update_one({"campName": f"Camp {i:02d}"}, {"$set": {"participantCount": i % 3}})

    for sorted_by in (None, "fees", "campName", "participantCount"):
        params = {"sorted": sorted_by} if sorted_by else {}
        everything = [c["_id"] for c in client.get("/camps", params=params).json()]
        first = [c["_id"] for c in client.get("/camps", params={**params, "page": 0, "size": 10}).json()]
        second = [c["_id"] for c in client.get("/camps", params={**params, "page": 1, "size": 10}).json()]
        third = [c["_id"] for c in client.get("/camps", params={**params, "page": 2, "size": 10}).json()]

        assert len(first) == len(second) == 10
        assert len(third) == 5
        assert not set(first) & set(second)
        assert first + second + third == everything

    by_count = client.get("/camps", params={"sorted": "participantCount"}).json()
    keys = [(-c["participantCount"], c["_id"]) for c in by_count]
    assert keys == sorted(keys)


def test_negative_page_is_bad_request(client):
    assert client.get("/camps", params={"page": -1, "size": 10}).status_code == 400


def test_huge_page_is_bad_request(client, make_camp):
    make_camp()
    assert client.get("/camps", params={"page": 10 ** 18, "size": 10}).status_code == 400
    assert client.get("/camps", params={"page": 0, "size": 10 ** 6}).status_code == 400
    assert client.get("/camps", params={"page": 100000, "size": 1000}).json() == []


def test_slow_datastore_call_does_not_hold_other_requests(app, make_camp, monkeypatch):
    camp_id = make_camp()
    original = Collection.find_one

    def slow_find_one(self, *args, **kwargs):
        time.sleep(0.5)
        return original(self, *args, **kwargs)

    monkeypatch.setattr(Collection, "find_one", slow_find_one)

    async def overlap():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
            started = time.perf_counter()
            slow = asyncio.create_task(http.get(f"/camp/{camp_id}"))
            await asyncio.sleep(0.05)
            root = await http.get("/")
            elapsed = time.perf_counter() - started
            return root, elapsed, await slow

    root, elapsed, camp = asyncio.run(overlap())
    assert root.status_code == 200
    assert camp.status_code == 200
    assert elapsed < 0.3


def test_popular_and_affordable(client, db, make_camp):
    for i in range(8):
        make_camp(campName=f"Camp {i}", fees=str(1000 - i * 100))
        db["camps"].update_one({"campName": f"Camp {i}"}, {"$set": {"participantCount": i}})

    popular = client.get("/popular-camps").json()
    assert [c["participantCount"] for c in popular] == [7, 6, 5, 4, 3, 2]

    affordable = client.get("/affordable-camps").json()
    assert [c["fees"] for c in affordable] == ["300", "400", "500", "600", "700", "800"]


def test_update_camp(client, organizer, db, make_camp):
    camp_id = make_camp()
    response = client.put(f"/update-camp/{camp_id}",
                          json={"fees": 650, "location": "Chattogram", "participantCount": 99},
                          headers=organizer)
    assert response.status_code == 200
    assert response.json()["modifiedCount"] == 1

    camp = client.get(f"/camp/{camp_id}").json()
    assert camp["fees"] == "650"
    assert camp["location"] == "Chattogram"
    assert camp["participantCount"] == 0


def test_update_camp_errors(client, organizer, make_camp):
    camp_id = make_camp()
    assert client.put(f"/update-camp/{camp_id}", json={}, headers=organizer).status_code == 400
    assert client.put("/update-camp/65f1c0e2a1b2c3d4e5f60718", json={"fees": "1"},
                      headers=organizer).status_code == 404


def test_delete_camp(client, organizer, make_camp):
    camp_id = make_camp()
    response = client.delete(f"/delete-camp/{camp_id}", headers=organizer)
    assert response.json() == {"acknowledged": True, "deletedCount": 1}
    assert client.get(f"/camp/{camp_id}").status_code == 404
    assert client.delete(f"/delete-camp/{camp_id}", headers=organizer).status_code == 404
