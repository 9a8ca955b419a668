"""
Content Trust Ledger Tests
==========================

Key invariants tested:
1. Only verified users may change a ledger, only on fact-tagged content
2. Membership preconditions raise; rejected calls leave the ledger unchanged
3. Concurrent endorsements by one actor record one membership
4. Endorse and denounce by the same actor coexist
"""

import asyncio

import pytest

from services.errors import (
    AlreadyDenounced,
    AlreadyEndorsed,
    ContentNotFound,
    NotAFact,
    NotDenounced,
    NotEndorsed,
    NotVerified,
)


@pytest.fixture
def vsp(make_user):
    return make_user("vera", verified=True)


@pytest.fixture
def fact(content_repo, make_user):
    author = make_user("writer")
    return content_repo.put(author, "Water boils at 100C at sea level", is_fact=True)


@pytest.fixture
def opinion(content_repo, make_user):
    author = make_user("pundit")
    return content_repo.put(author, "Tabs are better than spaces", is_fact=False)


class TestGating:

    @pytest.mark.asyncio
    async def test_opinion_cannot_be_endorsed(self, services, content_repo, vsp, opinion):
        with pytest.raises(NotAFact):
            await services.ledger.endorse(opinion.id, "vera")

        assert content_repo.snapshot(opinion.id).endorsers == []

    @pytest.mark.asyncio
    async def test_unverified_user_cannot_denounce(self, services, content_repo, make_user, fact):
        make_user("ursula")

        with pytest.raises(NotVerified):
            await services.ledger.denounce(fact.id, "ursula")

        assert content_repo.snapshot(fact.id).denouncers == []

    @pytest.mark.asyncio
    async def test_unknown_content(self, services, vsp):
        with pytest.raises(ContentNotFound):
            await services.ledger.endorse("ct_00000000", "vera")


class TestMembership:

    @pytest.mark.asyncio
    async def test_endorse_then_unendorse(self, services, vsp, fact):
        item = await services.ledger.endorse(fact.id, "vera")
        assert item.endorsers == ["vera"]

        item = await services.ledger.unendorse(fact.id, "vera")
        assert item.endorsers == []

    @pytest.mark.asyncio
    async def test_double_endorse_rejected(self, services, content_repo, vsp, fact):
        await services.ledger.endorse(fact.id, "vera")

        with pytest.raises(AlreadyEndorsed):
            await services.ledger.endorse(fact.id, "vera")

        assert content_repo.snapshot(fact.id).endorsers == ["vera"]

    @pytest.mark.asyncio
    async def test_unendorse_without_endorsement(self, services, vsp, fact):
        with pytest.raises(NotEndorsed):
            await services.ledger.unendorse(fact.id, "vera")

    @pytest.mark.asyncio
    async def test_denounce_then_undenounce(self, services, vsp, fact):
        item = await services.ledger.denounce(fact.id, "vera")
        assert item.denouncers == ["vera"]

        with pytest.raises(AlreadyDenounced):
            await services.ledger.denounce(fact.id, "vera")

        item = await services.ledger.undenounce(fact.id, "vera")
        assert item.denouncers == []

        with pytest.raises(NotDenounced):
            await services.ledger.undenounce(fact.id, "vera")

    @pytest.mark.asyncio
    async def test_endorse_and_denounce_coexist(self, services, vsp, fact):
        await services.ledger.endorse(fact.id, "vera")
        item = await services.ledger.denounce(fact.id, "vera")

        assert item.endorsers == ["vera"]
        assert item.denouncers == ["vera"]

    @pytest.mark.asyncio
    async def test_concurrent_endorsements_keep_uniqueness(self, services, content_repo, vsp, fact):
        results = await asyncio.gather(
            *[services.ledger.endorse(fact.id, "vera") for _ in range(8)],
            return_exceptions=True,
        )

        assert sum(not isinstance(r, Exception) for r in results) == 1
        assert content_repo.snapshot(fact.id).endorsers == ["vera"]

