import pytest

from workout_progress.services import records

API = "/api/v1"


def start(client, **body):
    response = client.post(f"{API}/workout/start", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def add_exercises(client, *exercise_ids):
    response = client.post(f"{API}/workout/exercises", json={"exercise_ids": list(exercise_ids)})
    assert response.status_code == 201, response.text
    return response.json()


def set_url(workout_exercise_id, entry_id=None, action=None):
    url = f"{API}/workout/exercises/{workout_exercise_id}/sets"
    if entry_id:
        url += f"/{entry_id}"
    if action:
        url += f"/{action}"
    return url


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "ok"
    health = client.get(f"{API}/health").json()
    assert health["status"] == "ok"
    assert health["active_workout"] is False
    assert client.get(f"{API}/health/ready").json()["database"] == "connected"


def test_session_errors_map_to_status_codes(client):
    assert client.get(f"{API}/workout").json() is None

    response = client.post(f"{API}/workout/exercises", json={"exercise_ids": ["bench"]})
    assert response.status_code == 409
    assert response.json()["detail"] == "No active workout"

    start(client)
    assert client.post(f"{API}/workout/start", json={}).status_code == 409
    assert client.post(f"{API}/workout/exercises", json={"exercise_ids": ["nope"]}).status_code == 404
    assert client.delete(f"{API}/workout/exercises/wex_missing").status_code == 404

    (squat,) = add_exercises(client, "squat")
    response = client.post(set_url(squat["id"], squat["entries"][0]["id"], "complete"), json={"rpe": 8})
    assert response.status_code == 400
    assert set(response.json()["fields"]) == {"weight", "reps"}

    response = client.post(f"{API}/workout/finish", json={})
    assert response.status_code == 400  # nothing completed yet

    assert client.post(f"{API}/workout/discard").status_code == 204
    assert client.get(f"{API}/workout").json() is None


def test_full_workout_flow_updates_history_and_progress(client):
    start(client, name="Push")
    bench, squat = add_exercises(client, "bench", "squat")
    assert bench["exercise_details"]["name"] == "Bench Press (Barbell)"
    entry_id = bench["entries"][0]["id"]

    response = client.post(set_url(bench["id"]), json={})
    assert response.status_code == 201
    exercise = client.patch(set_url(bench["id"], entry_id), json={"weight": 60, "reps": 5}).json()
    assert [(e["weight"], e["reps"]) for e in exercise["entries"]] == [(60, 5), (60, 5)]

    done = client.post(set_url(bench["id"], entry_id, "complete"), json={"rpe": 10}).json()
    assert done["is_completed"] is True
    assert done["is_pr"] is True
    client.put(f"{API}/workout/exercises/{bench['id']}/notes", json={"notes": "Paused reps"})

    stats = client.get(f"{API}/workout/stats").json()
    assert stats["completed_sets"] == 1
    assert stats["total_volume"] == 300

    response = client.post(f"{API}/workout/finish", json={})
    assert response.status_code == 200, response.text
    result = response.json()
    assert result["summary"]["exercise_ids"] == ["bench"]
    assert result["summary"]["total_sets"] == 1
    assert result["summary"]["name"] == "Push"
    assert len(result["logged_entries"]) == 1
    assert client.get(f"{API}/workout").json() is None

    # XP enrichment ran as a background task: PR bonus gives 15 + 8 + 8
    sessions = client.get(f"{API}/history/sessions").json()
    assert len(sessions) == 1
    assert sessions[0]["total_xp"] == 31

    detail = client.get(f"{API}/history/sessions/{sessions[0]['id']}").json()
    assert [n["notes"] for n in detail["notes"]] == ["Paused reps"]

    muscles = {m["muscle_id"]: m for m in client.get(f"{API}/progress/muscles").json()}
    assert muscles["pectoralis_major"]["xp"] == 15
    assert muscles["pectoralis_major"]["percentage"] == 3
    assert muscles["deltoids"]["xp"] == 8
    assert "sternocleidomastoid" not in muscles
    everything = client.get(f"{API}/progress/muscles", params={"include_untrainable": True}).json()
    assert "sternocleidomastoid" in {m["muscle_id"] for m in everything}

    groups = {g["major_group"]: g for g in client.get(f"{API}/progress/groups").json()}
    assert groups["chest"]["percentage"] == 3

    streak = client.get(f"{API}/streak").json()
    assert streak["current_streak"] == 1

    trophies = client.get(f"{API}/pr/trophy-room").json()
    assert trophies["count"] == 1
    assert trophies["records"][0]["exercise_name"] == "Bench Press (Barbell)"

    previous = client.get(f"{API}/history/exercises/bench/previous-session").json()
    assert len(previous["entries"]) == 1
    assert previous["notes"] == "Paused reps"
    assert previous["current_pr"]["id"] == entry_id

    # Next time bench is added it starts with as many sets as were logged last time
    start(client)
    (bench_again,) = add_exercises(client, "bench")
    assert len(bench_again["entries"]) == 1
    client.post(f"{API}/workout/discard")


def test_remove_and_restore_logged_entry(client):
    start(client)
    (bench,) = add_exercises(client, "bench")
    first = bench["entries"][0]["id"]
    client.patch(set_url(bench["id"], first), json={"weight": 100, "reps": 1})
    client.post(set_url(bench["id"], first, "complete"), json={"rpe": 9})
    second = client.post(set_url(bench["id"]), json={"weight": 80, "reps": 1}).json()["id"]
    client.post(set_url(bench["id"], second, "complete"), json={"rpe": 8})
    client.post(f"{API}/workout/finish", json={})

    response = client.delete(f"{API}/history/entries/{first}")
    assert response.status_code == 200
    body = response.json()
    assert body["removed"]["id"] == first
    assert [(e["id"], e["is_pr"]) for e in body["updated"]] == [(second, True)]
    assert client.get(f"{API}/history/exercises/bench/best").json()["id"] == second

    response = client.post(f"{API}/history/entries", json=body["removed"])
    assert response.status_code == 201
    entries = client.get(f"{API}/history/exercises/bench/entries").json()
    assert [(e["id"], e["is_pr"]) for e in entries] == [(first, True), (second, False)]
    assert client.delete(f"{API}/history/entries/missing").status_code == 404


def test_routine_crud(client):
    response = client.post(f"{API}/routines", json={"title": "  "})
    assert response.status_code == 400
    assert response.json()["fields"] == ["title"]

    created = client.post(
        f"{API}/routines",
        json={"title": "Legs", "exercises": [{"exercise_id": "squat", "sets": [{"weight": 100, "reps": 5}] * 2}]},
    )
    assert created.status_code == 201
    routine = created.json()
    assert routine["version"] == 1

    assert [r["id"] for r in client.get(f"{API}/routines").json()] == [routine["id"]]

    updated = client.put(f"{API}/routines/{routine['id']}", json={"title": "Leg Day"}).json()
    assert updated["title"] == "Leg Day"
    assert updated["version"] == 2
    fetched = client.get(f"{API}/routines/{routine['id']}").json()
    assert fetched["title"] == "Leg Day"
    assert len(fetched["exercises"][0]["sets"]) == 2

    assert client.delete(f"{API}/routines/{routine['id']}").status_code == 204
    assert client.get(f"{API}/routines/{routine['id']}").status_code == 404
    assert client.put(f"{API}/routines/{routine['id']}", json={"title": "x"}).status_code == 404


def test_public_routines_resolve_against_catalog(client):
    routines = {r["id"]: r for r in client.get(f"{API}/routines/public").json()}

    assert len(routines) == 4
    assert routines["public:push-day"]["exercises"][0]["exercise_id"] == "bench"
    # The test catalog has no push-ups, so the static fallback is used
    assert routines["public:full-body-home"]["exercises"][0]["exercise_id"] == "fallback:pushups"
    assert client.get(f"{API}/routines/public:cardio-20min").json()["exercises"][0]["exercise_id"] == "run"


def test_stack_routines_into_workout(client):
    mine = client.post(
        f"{API}/routines",
        json={"title": "Core", "exercises": [{"exercise_id": "plank", "sets": [{"duration": 60}]}]},
    ).json()

    response = client.post(f"{API}/routines/stack", json={"routine_ids": ["missing"]})
    assert response.status_code == 404

    response = client.post(
        f"{API}/routines/stack",
        json={"routine_ids": ["public:push-day", mine["id"], "missing"]},
    )
    assert response.status_code == 201, response.text
    session = response.json()
    assert session["is_active"] is True
    assert session["start_method"] == "routines"
    assert session["name"] == "Push Day (Barbell Focus) + Core"
    assert session["source_routine_ids"] == ["public:push-day", mine["id"]]
    assert [e["order"] for e in session["exercises"]] == [0, 1, 2, 3]
    assert session["exercises"][-1]["from_routine_id"] == mine["id"]

    again = client.post(f"{API}/routines/stack", json={"routine_ids": [mine["id"]]})
    assert again.status_code == 409

    # Fallback exercises can be logged; they are only skipped for XP
    dips = session["exercises"][2]
    assert dips["exercise_id"] == "fallback:tricep-dips"
    entry_id = dips["entries"][0]["id"]
    assert client.post(set_url(dips["id"], entry_id, "complete"), json={"rpe": 8}).status_code == 200
    result = client.post(f"{API}/workout/finish", json={}).json()
    assert result["summary"]["exercise_ids"] == ["fallback:tricep-dips"]
    assert result["summary"]["source_routine_ids"] == ["public:push-day", mine["id"]]

    best = client.get(f"{API}/history/exercises/fallback:tricep-dips/best").json()
    assert best["reps"] == 12
    assert client.get(f"{API}/history/sessions").json()[0]["total_xp"] == 0


def test_sets_cannot_be_completed_through_patch(client):
    start(client)
    (bench,) = add_exercises(client, "bench")
    entry_id = bench["entries"][0]["id"]

    response = client.patch(set_url(bench["id"], entry_id), json={"weight": 50, "reps": 2, "is_completed": True})

    assert response.status_code == 422
    assert client.get(f"{API}/workout/stats").json()["completed_sets"] == 0


def test_failed_save_keeps_the_workout_active(client, monkeypatch):
    start(client, name="Push")
    (bench,) = add_exercises(client, "bench")
    entry_id = bench["entries"][0]["id"]
    client.patch(set_url(bench["id"], entry_id), json={"weight": 60, "reps": 5})
    client.post(set_url(bench["id"], entry_id, "complete"), json={"rpe": 8})

    async def failing_save(db, result):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(records, "save_finished_workout", failing_save)
    with pytest.raises(RuntimeError):
        client.post(f"{API}/workout/finish", json={})
    monkeypatch.undo()

    assert client.get(f"{API}/workout").json()["name"] == "Push"
    assert client.get(f"{API}/history/sessions").json() == []
    assert client.post(f"{API}/workout/finish", json={}).status_code == 200
    assert len(client.get(f"{API}/history/sessions").json()) == 1


def test_failed_delete_keeps_the_logged_entry(client, monkeypatch):
    start(client)
    (bench,) = add_exercises(client, "bench")
    entry_id = bench["entries"][0]["id"]
    client.patch(set_url(bench["id"], entry_id), json={"weight": 100, "reps": 1})
    client.post(set_url(bench["id"], entry_id, "complete"), json={"rpe": 9})
    client.post(f"{API}/workout/finish", json={})

    async def failing_delete(db, entry_id):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(records, "delete_logged_entry", failing_delete)
    with pytest.raises(RuntimeError):
        client.delete(f"{API}/history/entries/{entry_id}")

    entries = client.get(f"{API}/history/exercises/bench/entries").json()
    assert [(e["id"], e["is_pr"]) for e in entries] == [(entry_id, True)]
