import threading

import pytest

from app.core.errors import DuplicateRoadmapError, GenerationFailedError, RoadmapNotFoundError
from app.schemas.schemas import MockTestCreate, Roadmap, RoadmapStep, StudentProfile
from app.services.dashboard_service import admin_dashboard, roadmap_progress, student_dashboard
from app.services.roadmap_service import RoadmapService


@pytest.fixture
def roadmaps(store, generator):
    return RoadmapService(store, generator)


@pytest.fixture
async def uid(store):
    return (await store.register_user("student@example.com", "pw")).uid


async def test_personalize_saves_profile_and_first_roadmap(roadmaps, store, uid):
    profile = StudentProfile(goal_role="SDE", goal_companies=["Google", "Google", " "], skills=["Python"])

    roadmap = await roadmaps.personalize(uid, profile)

    record = await store.load_user_document(uid)
    assert record.profile.goal_role == "SDE"
    assert record.profile.goal_companies == ["Google"]
    assert record.roadmaps == [roadmap]
    assert roadmap.role == "SDE"


async def test_personalize_failure_saves_nothing(roadmaps, store, fake_client, uid):
    fake_client.fail = True
    with pytest.raises(GenerationFailedError):
        await roadmaps.personalize(uid, StudentProfile(goal_role="SDE"))

    record = await store.load_user_document(uid)
    assert record.profile is None
    assert record.roadmaps == []


async def test_add_roadmap_prepends(roadmaps, store, uid):
    await roadmaps.personalize(uid, StudentProfile(goal_role="SDE"))
    await roadmaps.add_roadmap(uid, "Data Analyst")

    record = await store.load_user_document(uid)
    assert [r.role for r in record.roadmaps] == ["Data Analyst", "SDE"]


async def test_add_duplicate_roadmap_skips_generation(roadmaps, fake_client, uid):
    await roadmaps.add_roadmap(uid, "Data Analyst")
    calls = len(fake_client.calls)

    with pytest.raises(DuplicateRoadmapError):
        await roadmaps.add_roadmap(uid, "DATA ANALYST")
    assert len(fake_client.calls) == calls


async def test_generation_runs_off_the_event_loop_thread(roadmaps, fake_client, uid):
    await roadmaps.add_roadmap(uid, "SDE")
    assert fake_client.threads[-1] != threading.get_ident()


async def test_delete_roadmap(roadmaps, store, uid):
    await roadmaps.add_roadmap(uid, "SDE")
    await roadmaps.add_roadmap(uid, "Data Analyst")

    remaining = await roadmaps.delete_roadmap(uid, "SDE")

    assert [r.role for r in remaining] == ["Data Analyst"]
    assert (await store.load_user_document(uid)).roadmaps == remaining


async def test_toggle_step_flips_one_step(roadmaps, store, uid):
    await roadmaps.add_roadmap(uid, "SDE")

    toggled = await roadmaps.toggle_step(uid, "SDE", 1)
    assert [s.completed for s in toggled.steps] == [False, True]

    await roadmaps.toggle_step(uid, "SDE", 1)
    stored = (await store.load_user_document(uid)).roadmaps[0]
    assert [s.completed for s in stored.steps] == [False, False]


async def test_toggle_unknown_step_or_role(roadmaps, uid):
    await roadmaps.add_roadmap(uid, "SDE")
    with pytest.raises(RoadmapNotFoundError):
        await roadmaps.toggle_step(uid, "SDE", 7)
    with pytest.raises(RoadmapNotFoundError):
        await roadmaps.toggle_step(uid, "Designer", 0)


async def test_replace_roadmap(roadmaps, store, uid):
    await roadmaps.add_roadmap(uid, "SDE")
    edited = Roadmap(role="SDE", steps=[RoadmapStep(title="Only step", description="Custom")])

    await roadmaps.replace_roadmap(uid, edited)

    assert (await store.load_user_document(uid)).roadmaps == [edited]
    with pytest.raises(RoadmapNotFoundError):
        await roadmaps.replace_roadmap(uid, Roadmap(role="Other", steps=[]))


# ============================================================
# DASHBOARDS
# ============================================================

def test_roadmap_progress():
    done = RoadmapStep(title="a", description="", completed=True)
    todo = RoadmapStep(title="b", description="")
    assert roadmap_progress([]) == 0
    assert roadmap_progress([Roadmap(role="x", steps=[])]) == 0
    assert roadmap_progress([Roadmap(role="x", steps=[done, todo, todo])]) == 33


async def test_student_dashboard(roadmaps, store, uid):
    await store.initialize()
    await roadmaps.personalize(uid, StudentProfile(goal_role="SDE"))
    await roadmaps.toggle_step(uid, "SDE", 0)
    for i in range(6):
        await store.append_mock_test_result(uid, MockTestCreate(topic=f"T{i}", score=1, total_questions=2))

    dashboard = await student_dashboard(store, uid)

    assert dashboard.goal_role == "SDE"
    assert dashboard.upcoming_drives == 3
    assert dashboard.roadmap_progress == 50
    assert dashboard.mock_tests_taken == 6
    assert len(dashboard.recent_drives) == 3
    assert [t.topic for t in dashboard.recent_mock_tests] == ["T5", "T4", "T3", "T2"]


async def test_admin_dashboard(store, uid):
    await store.initialize()
    dashboard = await admin_dashboard(store)
    assert dashboard.total_drives == 3
    assert dashboard.total_students == 1
