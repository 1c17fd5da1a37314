import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import cowork.models as models
import cowork.schemas as schemas
from cowork.api.v1 import projects as project_routes
from cowork.api.v1 import tasks as task_routes
from cowork.database import Base
from cowork.dependencies import CallerIdentity

TEST_DATABASE_URL = "sqlite://"
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def db_session() -> Session:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def as_caller(user: models.User) -> CallerIdentity:
    return CallerIdentity(id=user.id, email=user.email)


def make_user(session: Session, email: str, full_name: str = None) -> models.User:
    user = models.User(
        email=email,
        password_hash="not-a-real-hash",
        full_name=full_name or email.split("@")[0].title(),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def make_project(session: Session, owner: models.User, title: str = "Demo Project") -> models.Project:
    project_in = schemas.ProjectCreate(title_en=title, category="General")
    envelope = project_routes.create_project(project_in, caller=as_caller(owner), db=session)
    return session.get(models.Project, envelope.project.id)


def make_task(session: Session, creator: models.User, project: models.Project, title: str = "Task") -> models.Task:
    task_in = schemas.TaskCreate(project_id=project.id, title_en=title)
    envelope = task_routes.create_task(task_in, caller=as_caller(creator), db=session)
    return session.get(models.Task, envelope.task.id)


def add_membership(
    session: Session,
    project: models.Project,
    user: models.User,
    role: models.MemberRole = models.MemberRole.MEMBER,
    status: models.MembershipStatus = models.MembershipStatus.ACTIVE,
) -> models.ProjectMember:
    membership = models.ProjectMember(project_id=project.id, user_id=user.id, role=role, status=status)
    session.add(membership)
    session.commit()
    session.refresh(membership)
    return membership
