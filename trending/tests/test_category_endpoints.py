# trending/tests/test_category_endpoints.py

def test_category_politics_only_and_ordered(client):
    client.post("/api/news/raw", json={"title": "Cabinet reshuffle", "summary": "s", "category": "Politics"})
    client.post("/api/news/raw", json={"title": "Election dates out", "summary": "s", "category": "Politics"})
    client.post("/api/news/raw", json={"title": "Election dates out!!", "summary": "s", "category": "Politics"})
    client.post("/api/news/raw", json={"title": "Century at Eden Gardens", "summary": "s", "category": "Cricket"})
    client.post("/api/news/raw", json={"title": "Rain in the capital", "summary": "s"})

    r = client.get("/api/category/Politics")
    assert r.status_code == 200
    data = r.json()
    assert {d["category"] for d in data} == {"Politics"}
    assert [d["title"] for d in data] == ["Election dates out", "Cabinet reshuffle"]
    scores = [d["score"] for d in data]
    assert scores == sorted(scores, reverse=True)

def test_category_exact_match(client):
    client.post("/api/news/raw", json={"title": "Bowler injured", "summary": "s", "category": "Cricket"})
    assert client.get("/api/category/cricket").json() == []
    assert len(client.get("/api/category/Cricket").json()) == 1

def test_category_capped_at_fifty(client):
    for i in range(55):
        client.post("/api/news/raw", json={"title": f"vote {'y' * (i + 1)}", "summary": "s", "category": "Politics"})
    assert len(client.get("/api/category/Politics").json()) == 50

def test_merge_keeps_first_category(client):
    client.post("/api/news/raw", json={"title": "Opposition walkout", "summary": "s", "category": "Politics"})
    r = client.post("/api/news/raw", json={"title": "OPPOSITION WALKOUT", "summary": "s", "category": "Cricket"})
    assert r.json() == {"updated": True}

    assert client.get("/api/category/Cricket").json() == []
    row = client.get("/api/category/Politics").json()[0]
    assert row["repetition_count"] == 2
    assert row["score"] == 2 * 6 + 10 + 2
