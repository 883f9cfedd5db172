from combat_analyzer.models import Athlete, SessionTag, Tag, TagCategory, TagOutcome, TrainingSession
from combat_analyzer.scripts.maintenance import delete_global_tags, main, repair_null_categories


def _athlete(db) -> Athlete:
    athlete = Athlete(name="Legacy")
    db.add(athlete)
    db.commit()
    return athlete


def test_repair_null_categories_only_touches_athlete_tags(db):
    athlete = _athlete(db)
    legacy = Tag(name="Old", category=None, athlete_id=athlete.id)
    legacy_global = Tag(name="Old global", category=None)
    fine = Tag(name="Sprawl", category=TagCategory.DEFENSIVE, outcome=TagOutcome.SUCCESS, athlete_id=athlete.id)
    db.add_all([legacy, legacy_global, fine])
    db.commit()

    assert repair_null_categories(db) == 1

    db.expire_all()
    assert legacy.category == TagCategory.TECHNICAL_ERROR
    assert legacy.outcome is None
    assert legacy_global.category is None
    assert fine.category == TagCategory.DEFENSIVE
    assert fine.outcome == TagOutcome.SUCCESS

    assert repair_null_categories(db) == 0


def test_delete_global_tags_removes_their_applications(db):
    athlete = _athlete(db)
    own = Tag(name="Mine", category=TagCategory.MENTAL, athlete_id=athlete.id)
    shared = Tag(name="Shared", category=TagCategory.PHYSICAL)
    session = TrainingSession(athlete_id=athlete.id, video_url="https://cdn/x.mp4")
    db.add_all([own, shared, session])
    db.flush()
    db.add_all([SessionTag(session_id=session.id, tag_id=own.id), SessionTag(session_id=session.id, tag_id=shared.id)])
    db.commit()

    assert delete_global_tags(db) == 1

    assert [t.name for t in db.query(Tag).all()] == ["Mine"]
    assert [st.tag_id for st in db.query(SessionTag).all()] == [own.id]


def test_main_runs_selected_command(db, capsys):
    db.add(Tag(name="Shared", category=TagCategory.PHYSICAL))
    db.commit()

    main(["cleanup-global-tags"])

    assert capsys.readouterr().out.strip().endswith("Deleted 1 global tags")
    assert db.query(Tag).count() == 0
