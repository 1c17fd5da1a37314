from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import Session

import cowork.models as models
from cowork.errors import Conflict, Forbidden, NotFound
from cowork.models import MemberRole, MembershipStatus
from cowork.services import membership
from tests.conftest import add_membership, as_caller, make_project, make_user


def _rows_for(session: Session, project: models.Project, user: models.User):
    return (
        session.query(models.ProjectMember)
        .filter(models.ProjectMember.project_id == project.id, models.ProjectMember.user_id == user.id)
        .all()
    )


def test_project_owner_is_enrolled_as_active_admin(db_session: Session):
    owner = make_user(db_session, "owner@example.com")
    project = make_project(db_session, owner)

    rows = _rows_for(db_session, project, owner)
    assert len(rows) == 1
    assert rows[0].role == MemberRole.ADMIN
    assert rows[0].status == MembershipStatus.ACTIVE
    assert rows[0].joined_at is not None


def test_invite_creates_pending_membership(db_session: Session):
    owner = make_user(db_session, "owner@example.com")
    guest = make_user(db_session, "guest@example.com")
    project = make_project(db_session, owner)

    result = membership.invite(db_session, project.id, as_caller(owner), "guest@example.com")

    assert result.created is True
    assert result.membership.status == MembershipStatus.PENDING
    assert result.membership.role == MemberRole.MEMBER
    assert result.membership.joined_at is None
    assert len(_rows_for(db_session, project, guest)) == 1


def test_reinviting_pending_target_updates_row_in_place(db_session: Session):
    owner = make_user(db_session, "owner@example.com")
    guest = make_user(db_session, "guest@example.com")
    project = make_project(db_session, owner)

    first = membership.invite(db_session, project.id, as_caller(owner), guest.email)
    stale = datetime.utcnow() - timedelta(days=3)
    first.membership.invited_at = stale
    db_session.commit()

    second = membership.invite(db_session, project.id, as_caller(owner), guest.email, MemberRole.VIEWER)

    assert second.created is False
    assert second.membership.id == first.membership.id
    rows = _rows_for(db_session, project, guest)
    assert len(rows) == 1
    assert rows[0].status == MembershipStatus.PENDING
    assert rows[0].role == MemberRole.VIEWER
    assert rows[0].invited_at > stale


def test_reinvite_after_decline_resets_to_pending(db_session: Session):
    owner = make_user(db_session, "owner@example.com")
    guest = make_user(db_session, "guest@example.com")
    project = make_project(db_session, owner)

    invite = membership.invite(db_session, project.id, as_caller(owner), guest.email).membership
    membership.decline(db_session, invite.id, as_caller(guest))

    again = membership.invite(db_session, project.id, as_caller(owner), guest.email)

    assert again.created is False
    assert again.membership.id == invite.id
    assert again.membership.status == MembershipStatus.PENDING


def test_inviting_active_member_conflicts_without_touching_row(db_session: Session):
    owner = make_user(db_session, "owner@example.com")
    guest = make_user(db_session, "guest@example.com")
    project = make_project(db_session, owner)
    existing = add_membership(db_session, project, guest, MemberRole.VIEWER)
    invited_at = existing.invited_at

    with pytest.raises(Conflict) as exc:
        membership.invite(db_session, project.id, as_caller(owner), guest.email, MemberRole.ADMIN)
    assert exc.value.message == "User is already a member"

    db_session.refresh(existing)
    assert existing.role == MemberRole.VIEWER
    assert existing.status == MembershipStatus.ACTIVE
    assert existing.invited_at == invited_at


def test_invite_unknown_email_is_not_found(db_session: Session):
    owner = make_user(db_session, "owner@example.com")
    project = make_project(db_session, owner)

    with pytest.raises(NotFound) as exc:
        membership.invite(db_session, project.id, as_caller(owner), "nobody@example.com")
    assert exc.value.message == "User not found"


def test_invite_into_missing_project_is_not_found(db_session: Session):
    owner = make_user(db_session, "owner@example.com")
    make_user(db_session, "guest@example.com")

    with pytest.raises(NotFound):
        membership.invite(db_session, 999, as_caller(owner), "guest@example.com")


@pytest.mark.parametrize(
    "role,status",
    [
        (MemberRole.MEMBER, MembershipStatus.ACTIVE),
        (MemberRole.VIEWER, MembershipStatus.ACTIVE),
        (MemberRole.ADMIN, MembershipStatus.PENDING),
        (MemberRole.ADMIN, MembershipStatus.DECLINED),
    ],
)
def test_invite_requires_active_owner_or_admin(db_session: Session, role, status):
    owner = make_user(db_session, "owner@example.com")
    inviter = make_user(db_session, "inviter@example.com")
    make_user(db_session, "guest@example.com")
    project = make_project(db_session, owner)
    add_membership(db_session, project, inviter, role, status)

    with pytest.raises(Forbidden):
        membership.invite(db_session, project.id, as_caller(inviter), "guest@example.com")


def test_active_admin_can_invite(db_session: Session):
    owner = make_user(db_session, "owner@example.com")
    admin = make_user(db_session, "admin@example.com")
    guest = make_user(db_session, "guest@example.com")
    project = make_project(db_session, owner)
    add_membership(db_session, project, admin, MemberRole.ADMIN)

    result = membership.invite(db_session, project.id, as_caller(admin), guest.email)

    assert result.created is True


def test_accept_activates_membership_once(db_session: Session):
    owner = make_user(db_session, "owner@example.com")
    guest = make_user(db_session, "guest@example.com")
    project = make_project(db_session, owner)
    invite = membership.invite(db_session, project.id, as_caller(owner), guest.email).membership

    accepted = membership.accept(db_session, invite.id, as_caller(guest))

    assert accepted.status == MembershipStatus.ACTIVE
    assert accepted.joined_at is not None

    with pytest.raises(Conflict) as exc:
        membership.accept(db_session, invite.id, as_caller(guest))
    assert exc.value.message == "Invitation already accepted"


def test_accepting_declined_invitation_conflicts(db_session: Session):
    owner = make_user(db_session, "owner@example.com")
    guest = make_user(db_session, "guest@example.com")
    project = make_project(db_session, owner)
    invite = membership.invite(db_session, project.id, as_caller(owner), guest.email).membership
    membership.decline(db_session, invite.id, as_caller(guest))

    with pytest.raises(Conflict) as exc:
        membership.accept(db_session, invite.id, as_caller(guest))
    assert exc.value.message == "Invitation was declined"


def test_invitation_belongs_to_its_invitee(db_session: Session):
    owner = make_user(db_session, "owner@example.com")
    guest = make_user(db_session, "guest@example.com")
    stranger = make_user(db_session, "stranger@example.com")
    project = make_project(db_session, owner)
    invite = membership.invite(db_session, project.id, as_caller(owner), guest.email).membership

    with pytest.raises(NotFound):
        membership.accept(db_session, invite.id, as_caller(stranger))
    with pytest.raises(NotFound):
        membership.decline(db_session, invite.id, as_caller(stranger))
    with pytest.raises(NotFound):
        membership.accept(db_session, 12345, as_caller(guest))


def test_decline_has_no_status_guard(db_session: Session):
    # Declining an already active membership demotes it; kept as observed behaviour.
    owner = make_user(db_session, "owner@example.com")
    guest = make_user(db_session, "guest@example.com")
    project = make_project(db_session, owner)
    invite = membership.invite(db_session, project.id, as_caller(owner), guest.email).membership
    membership.accept(db_session, invite.id, as_caller(guest))

    declined = membership.decline(db_session, invite.id, as_caller(guest))
    assert declined.status == MembershipStatus.DECLINED

    again = membership.decline(db_session, invite.id, as_caller(guest))
    assert again.status == MembershipStatus.DECLINED
    assert again.joined_at == declined.joined_at
    assert len(_rows_for(db_session, project, guest)) == 1


def test_list_members_orders_owner_first_then_by_status(db_session: Session):
    carol = make_user(db_session, "carol@example.com")
    dave = make_user(db_session, "dave@example.com")
    erin = make_user(db_session, "erin@example.com")
    owner = make_user(db_session, "owner@example.com")
    project = make_project(db_session, owner)

    # Inserted in the "wrong" order on purpose; the owner row is not first by id either.
    db_session.query(models.ProjectMember).filter(models.ProjectMember.user_id == owner.id).delete()
    db_session.commit()
    add_membership(db_session, project, erin, status=MembershipStatus.DECLINED)
    add_membership(db_session, project, dave, status=MembershipStatus.ACTIVE)
    add_membership(db_session, project, carol, status=MembershipStatus.PENDING)
    add_membership(db_session, project, owner, MemberRole.ADMIN, MembershipStatus.ACTIVE)

    members = membership.list_members(db_session, project.id, as_caller(owner))

    assert [m.user_id for m in members] == [owner.id, carol.id, dave.id, erin.id]
    assert members[0].is_owner is True
    assert members[0].role == MemberRole.ADMIN
    assert not any(m.is_owner for m in members[1:])


def test_list_members_prefers_recent_joins_and_invites(db_session: Session):
    owner = make_user(db_session, "owner@example.com")
    early = make_user(db_session, "early@example.com")
    late = make_user(db_session, "late@example.com")
    never = make_user(db_session, "never@example.com")
    project = make_project(db_session, owner)
    now = datetime.utcnow()

    for user, joined in ((never, None), (early, now - timedelta(days=2)), (late, now - timedelta(days=1))):
        row = add_membership(db_session, project, user)
        row.joined_at = joined
    db_session.commit()

    members = membership.list_members(db_session, project.id, as_caller(owner))

    assert [m.user_id for m in members] == [owner.id, late.id, early.id, never.id]


def test_list_members_requires_access(db_session: Session):
    owner = make_user(db_session, "owner@example.com")
    guest = make_user(db_session, "guest@example.com")
    project = make_project(db_session, owner)
    membership.invite(db_session, project.id, as_caller(owner), guest.email)

    with pytest.raises(Forbidden):
        membership.list_members(db_session, project.id, as_caller(guest))
    with pytest.raises(NotFound):
        membership.list_members(db_session, 4242, as_caller(owner))


def test_invite_accept_then_list_members(db_session: Session):
    u1 = make_user(db_session, "u1@example.com", "Owner One")
    u2 = make_user(db_session, "u2@example.com", "Member Two")
    project = make_project(db_session, u1)

    invite = membership.invite(db_session, project.id, as_caller(u1), u2.email, MemberRole.MEMBER).membership
    membership.accept(db_session, invite.id, as_caller(u2))

    members = membership.list_members(db_session, project.id, as_caller(u2))

    assert [(m.user_id, m.is_owner) for m in members] == [(u1.id, True), (u2.id, False)]
    assert members[1].status == MembershipStatus.ACTIVE
    assert members[1].role == MemberRole.MEMBER


def test_my_invitations_lists_only_pending(db_session: Session):
    owner = make_user(db_session, "owner@example.com", "Project Owner")
    guest = make_user(db_session, "guest@example.com")
    first = make_project(db_session, owner, "First")
    second = make_project(db_session, owner, "Second")
    third = make_project(db_session, owner, "Third")

    membership.invite(db_session, first.id, as_caller(owner), guest.email)
    membership.invite(db_session, second.id, as_caller(owner), guest.email)
    declined = membership.invite(db_session, third.id, as_caller(owner), guest.email).membership
    membership.decline(db_session, declined.id, as_caller(guest))

    invitations = membership.list_my_invitations(db_session, as_caller(guest))

    assert [i.project_id for i in invitations] == [second.id, first.id]
    assert invitations[0].title_en == "Second"
    assert invitations[0].inviter_id == owner.id
    assert invitations[0].inviter_name == "Project Owner"
