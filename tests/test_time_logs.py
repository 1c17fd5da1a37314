from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import Session

import cowork.models as models
import cowork.schemas as schemas
from cowork.api.v1 import tasks as task_routes
from cowork.api.v1 import time_logs as routes
from cowork.errors import Forbidden, NotFound
from cowork.services import time_logs
from tests.conftest import as_caller, make_project, make_task, make_user


@pytest.fixture
def setup(db_session: Session):
    owner = make_user(db_session, "owner@example.com", "Owner")
    project = make_project(db_session, owner)
    first = make_task(db_session, owner, project, "Write report")
    second = make_task(db_session, owner, project, "Review report")
    return owner, first, second


def _running(session: Session, user: models.User):
    return session.query(models.TimeLog).filter_by(user_id=user.id, end_time=None).all()


def test_start_timer_opens_a_running_log(db_session: Session, setup):
    owner, first, _ = setup

    envelope = routes.start_timer(schemas.TimerStart(task_id=first.id), caller=as_caller(owner), db=db_session)

    assert envelope.message == "Timer started"
    assert envelope.auto_stopped is None
    assert envelope.time_log.end_time is None
    assert envelope.time_log.task_title == "Write report"

    active = routes.get_active_timer(caller=as_caller(owner), db=db_session).active_timer
    assert active.id == envelope.time_log.id
    assert active.project_id == first.project_id


def test_starting_another_timer_stops_the_running_one(db_session: Session, setup):
    owner, first, second = setup
    earlier = time_logs.start_timer(db_session, first.id, as_caller(owner)).time_log

    result = time_logs.start_timer(db_session, second.id, as_caller(owner))

    assert result.auto_stopped_task_id == first.id
    db_session.refresh(earlier)
    assert earlier.end_time is not None
    assert earlier.duration_seconds is not None
    assert [log.task_id for log in _running(db_session, owner)] == [second.id]


def test_stop_timer_records_duration(db_session: Session, setup):
    owner, first, _ = setup
    log = time_logs.start_timer(db_session, first.id, as_caller(owner)).time_log
    log.start_time = datetime.utcnow() - timedelta(seconds=90)
    db_session.commit()

    envelope = routes.stop_timer(None, caller=as_caller(owner), db=db_session)

    assert envelope.message == "Timer stopped"
    assert 90 <= envelope.duration_seconds < 150
    assert envelope.time_log.end_time is not None
    assert routes.get_active_timer(caller=as_caller(owner), db=db_session).active_timer is None


def test_stop_timer_for_other_task_leaves_timer_running(db_session: Session, setup):
    owner, first, second = setup
    time_logs.start_timer(db_session, first.id, as_caller(owner))

    with pytest.raises(NotFound) as exc:
        routes.stop_timer(schemas.TimerStop(task_id=second.id), caller=as_caller(owner), db=db_session)
    assert exc.value.message == "No active timer found"
    assert len(_running(db_session, owner)) == 1

    stopped = routes.stop_timer(schemas.TimerStop(task_id=first.id), caller=as_caller(owner), db=db_session)
    assert stopped.time_log.task_id == first.id


def test_stop_without_running_timer_is_not_found(db_session: Session, setup):
    owner, _, _ = setup

    with pytest.raises(NotFound):
        time_logs.stop_timer(db_session, as_caller(owner))


def test_timers_require_project_membership(db_session: Session, setup):
    _, first, _ = setup
    outsider = make_user(db_session, "outsider@example.com")

    with pytest.raises(Forbidden):
        time_logs.start_timer(db_session, first.id, as_caller(outsider))
    with pytest.raises(Forbidden):
        time_logs.task_logs(db_session, first.id, as_caller(outsider))
    with pytest.raises(NotFound):
        time_logs.start_timer(db_session, 9999, as_caller(outsider))
    assert db_session.query(models.TimeLog).count() == 0


def test_task_logs_total_only_counts_finished_logs(db_session: Session, setup):
    owner, first, _ = setup
    helper = make_user(db_session, "helper@example.com", "Helper")
    now = datetime.utcnow()
    db_session.add_all(
        [
            models.TimeLog(
                user_id=owner.id,
                task_id=first.id,
                start_time=now - timedelta(hours=3),
                end_time=now - timedelta(hours=2),
                duration_seconds=3600,
            ),
            models.TimeLog(
                user_id=helper.id,
                task_id=first.id,
                start_time=now - timedelta(hours=1),
                end_time=now - timedelta(minutes=30),
                duration_seconds=1800,
            ),
            models.TimeLog(user_id=owner.id, task_id=first.id, start_time=now - timedelta(minutes=5)),
        ]
    )
    db_session.commit()

    envelope = routes.list_task_time_logs(first.id, caller=as_caller(owner), db=db_session)

    assert envelope.total_seconds == 5400
    assert [log.duration_seconds for log in envelope.time_logs] == [None, 1800, 3600]
    assert envelope.time_logs[1].full_name == "Helper"


def test_my_logs_filters_by_date_and_limit(db_session: Session, setup):
    owner, first, second = setup
    other = make_user(db_session, "other@example.com")
    for day, task in ((1, first), (5, second), (9, first)):
        db_session.add(models.TimeLog(user_id=owner.id, task_id=task.id, start_time=datetime(2026, 4, day, 9)))
    db_session.add(models.TimeLog(user_id=other.id, task_id=first.id, start_time=datetime(2026, 4, 5, 9)))
    db_session.commit()

    everything = time_logs.my_logs(db_session, as_caller(owner))
    assert [log.start_time.day for log in everything] == [9, 5, 1]

    windowed = time_logs.my_logs(
        db_session, as_caller(owner), start_date=datetime(2026, 4, 2), end_date=datetime(2026, 4, 9)
    )
    assert [log.task_id for log in windowed] == [second.id]

    assert len(time_logs.my_logs(db_session, as_caller(owner), limit=2)) == 2


def test_deleting_task_removes_its_time_logs(db_session: Session, setup):
    owner, first, _ = setup
    time_logs.start_timer(db_session, first.id, as_caller(owner))

    task_routes.delete_task(first.id, caller=as_caller(owner), db=db_session)

    assert db_session.query(models.TimeLog).count() == 0
