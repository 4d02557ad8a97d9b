import logging

import pytest

from ideabox.config import settings
from ideabox.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ideabox.models.activity import ActivityType
from ideabox.models.idea import Category, IdeaStatus
from ideabox.models.notification import NotificationType
from ideabox.models.user import Role
from ideabox.schemas.idea import AttachmentIn, IdeaCreate
from ideabox.services import activity, ideas, notifications


def _payload(**overrides):
    data = {
        "title": "Recycle printer toner",
        "description": "Send empty cartridges back to the vendor.",
        "category": "cost_reduction",
    }
    data.update(overrides)
    return IdeaCreate(**data)


# ═══════════════════════════════════════════════════════════════
#  Submission
# ═══════════════════════════════════════════════════════════════

async def test_submit_creates_submitted_idea_with_history(db, make_user):
    submitter = await make_user()

    idea = await ideas.submit_idea(db, submitter, _payload(title="  Recycle printer toner  "))

    assert idea.status == IdeaStatus.SUBMITTED
    assert idea.title == "Recycle printer toner"
    assert idea.category == Category.COST_REDUCTION
    assert idea.submitter_id == submitter.id
    assert idea.is_public is False
    assert idea.submitter_email == submitter.email

    history = await activity.status_history(db, idea.id)
    assert [(h.status, h.changed_by) for h in history] == [(IdeaStatus.SUBMITTED, submitter.id)]

    feed = await activity.recent_activities(db)
    assert [(a.type, a.idea_id, a.user_email) for a in feed] == [
        (ActivityType.IDEA_SUBMITTED, idea.id, submitter.email)
    ]


async def test_submit_stores_attachment_metadata(db, make_user):
    submitter = await make_user()
    attachment = AttachmentIn(
        filename="a1b2c3.pdf", original_name="plan.pdf", mimetype="application/pdf", size=2048
    )

    idea = await ideas.submit_idea(db, submitter, _payload(attachment=attachment))

    stored = await ideas.get_attachments(db, idea.id)
    assert [(a.original_name, a.size) for a in stored] == [("plan.pdf", 2048)]


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"title": ""}, "Title is required."),
        ({"title": "   "}, "Title is required."),
        ({"title": None}, "Title is required."),
        ({"title": "x" * 201}, "Title must be at most 200 characters."),
        ({"description": ""}, "Description is required."),
        ({"category": "snacks"}, None),
        ({"category": None}, None),
        (
            {"attachment": AttachmentIn(filename="f", original_name="f.exe", mimetype="application/x-msdownload", size=1)},
            "Invalid file type. Allowed: PDF, DOCX, XLSX, PNG, JPG.",
        ),
        (
            {"attachment": AttachmentIn(filename="f", original_name="f.png", mimetype="image/png", size=10 * 1024 * 1024 + 1)},
            "File exceeds the 10 MB size limit.",
        ),
    ],
)
async def test_invalid_submission_is_rejected(db, make_user, overrides, message):
    submitter = await make_user()

    with pytest.raises(ValidationError) as exc_info:
        await ideas.submit_idea(db, submitter, _payload(**overrides))

    if message is None:
        assert exc_info.value.message.startswith("Category must be one of:")
    else:
        assert exc_info.value.message == message
    assert await ideas.list_ideas(db, submitter) == []


async def test_failing_side_effect_keeps_idea_and_other_effects(db, make_user, monkeypatch, caplog):
    await make_user(Role.ADMIN)
    submitter = await make_user()

    async def broken(*args, **kwargs):
        raise RuntimeError("notification store is down")

    monkeypatch.setattr(notifications, "notify_admins_of_submission", broken)

    with caplog.at_level(logging.WARNING, logger="ideabox.services.side_effects"):
        idea = await ideas.submit_idea(db, submitter, _payload())

    assert (await ideas.get_idea(db, idea.id)) is not None
    assert len(await activity.status_history(db, idea.id)) == 1
    assert len(await activity.recent_activities(db)) == 1
    assert "notify_admins" in caplog.text


# ═══════════════════════════════════════════════════════════════
#  Visibility
# ═══════════════════════════════════════════════════════════════

async def test_list_visibility(db, make_user, make_idea):
    admin = await make_user(Role.ADMIN)
    alice = await make_user()
    bob = await make_user()

    alice_private = await make_idea(alice, is_public=False, title="A private")
    alice_public = await make_idea(alice, is_public=True, title="A public")
    bob_private = await make_idea(bob, is_public=False, title="B private")

    def ids(items):
        return {i.id for i in items}

    assert ids(await ideas.list_ideas(db, admin)) == {alice_private.id, alice_public.id, bob_private.id}
    assert ids(await ideas.list_ideas(db, alice)) == {alice_private.id, alice_public.id}
    assert ids(await ideas.list_ideas(db, bob)) == {alice_public.id, bob_private.id}


async def test_list_with_votes_reports_counts(db, make_user, make_idea):
    from ideabox.services import votes

    alice = await make_user()
    bob = await make_user()
    idea = await make_idea(alice, is_public=True)
    await votes.toggle_vote(db, idea.id, bob.id)

    [as_bob] = await ideas.list_ideas_with_votes(db, bob)
    [as_alice] = await ideas.list_ideas_with_votes(db, alice)
    assert (as_bob.vote_count, as_bob.has_voted) == (1, True)
    assert (as_alice.vote_count, as_alice.has_voted) == (1, False)


async def test_detail_respects_visibility(db, make_user, make_idea):
    admin = await make_user(Role.ADMIN)
    owner = await make_user()
    other = await make_user()
    idea = await make_idea(owner, is_public=False)

    for viewer in (admin, owner):
        detail = await ideas.get_idea_detail(db, idea.id, viewer)
        assert detail.id == idea.id
        assert detail.evaluation is None
        assert detail.attachments == []

    with pytest.raises(ForbiddenError):
        await ideas.get_idea_detail(db, idea.id, other)
    with pytest.raises(NotFoundError):
        await ideas.get_idea_detail(db, idea.id + 100, admin)


# ═══════════════════════════════════════════════════════════════
#  Mark under review
# ═══════════════════════════════════════════════════════════════

async def test_mark_under_review(db, make_user, make_idea):
    admin = await make_user(Role.ADMIN)
    owner = await make_user()
    idea = await make_idea(owner)

    updated = await ideas.mark_under_review(db, idea.id, admin)

    assert updated.status == IdeaStatus.UNDER_REVIEW
    inbox = await notifications.list_for_user(db, owner.id)
    assert [n.type for n in inbox] == [NotificationType.UNDER_REVIEW]
    assert inbox[0].message == f"Your idea '{idea.title}' is now under review"
    assert [h.status for h in await activity.status_history(db, idea.id)] == [IdeaStatus.UNDER_REVIEW]


async def test_mark_under_review_requires_admin(db, make_user, make_idea):
    owner = await make_user()
    idea = await make_idea(owner, is_public=True)

    with pytest.raises(ForbiddenError):
        await ideas.mark_under_review(db, idea.id, owner)
    assert (await ideas.get_idea(db, idea.id)).status == IdeaStatus.SUBMITTED


async def test_mark_under_review_missing_idea(db, make_user):
    admin = await make_user(Role.ADMIN)
    with pytest.raises(NotFoundError):
        await ideas.mark_under_review(db, 31337, admin)


async def test_decided_idea_can_return_to_review_unless_strict(db, make_user, make_idea, monkeypatch):
    admin = await make_user(Role.ADMIN)
    owner = await make_user()
    first = await make_idea(owner, status=IdeaStatus.ACCEPTED)
    second = await make_idea(owner, status=IdeaStatus.REJECTED)

    reopened = await ideas.mark_under_review(db, first.id, admin)
    assert reopened.status == IdeaStatus.UNDER_REVIEW

    monkeypatch.setattr(settings, "STRICT_STATUS_TRANSITIONS", True)
    with pytest.raises(ConflictError):
        await ideas.mark_under_review(db, second.id, admin)
    assert (await ideas.get_idea(db, second.id)).status == IdeaStatus.REJECTED


def test_check_transition_table():
    ideas.check_transition(IdeaStatus.SUBMITTED, IdeaStatus.UNDER_REVIEW, strict=True)
    ideas.check_transition(IdeaStatus.UNDER_REVIEW, IdeaStatus.ACCEPTED, strict=True)
    ideas.check_transition(IdeaStatus.ACCEPTED, IdeaStatus.REJECTED, strict=False)
    with pytest.raises(ConflictError):
        ideas.check_transition(IdeaStatus.UNDER_REVIEW, IdeaStatus.UNDER_REVIEW, strict=True)
