import uuid

import pytest

from gigmarket.core.errors import NotFound


def test_create_gig(register, make_gig):
    owner = register("owner@mail.com").user

    gig = make_gig(owner.id)

    assert gig.freelancer_id == owner.id
    assert gig.is_active is True
    assert gig.pricing_type == "fixed"
    assert gig.tags == ["html", "css"]


def test_inactive_gig_is_hidden_from_everyone_but_its_owner(db, register, make_gig, gigs):
    owner = register("owner@mail.com").user
    other = register("other@mail.com").user
    gig = make_gig(owner.id)

    gigs.deactivate(db, gig_id=gig.id, owner_id=owner.id)

    assert gigs.get(db, gig.id, owner.id).is_active is False
    with pytest.raises(NotFound):
        gigs.get(db, gig.id, other.id)
    with pytest.raises(NotFound):
        gigs.get(db, gig.id)


def test_only_owner_can_deactivate(db, register, make_gig, gigs):
    owner = register("owner@mail.com").user
    other = register("other@mail.com").user
    gig = make_gig(owner.id)

    with pytest.raises(NotFound) as exc:
        gigs.deactivate(db, gig_id=gig.id, owner_id=other.id)

    assert exc.value.reason == "forbidden"
    assert gigs.get(db, gig.id).is_active is True


def test_missing_gig(db, gigs):
    with pytest.raises(NotFound) as exc:
        gigs.get(db, uuid.uuid4())

    assert exc.value.reason == "missing"
