"""
Social Graph Manager Tests
==========================

Key invariants tested:
1. Symmetry: B in A.following <=> A in B.followers, after any sequence
2. No self-edges, compared case-insensitively
3. Failed follow/unfollow leaves both documents unchanged
4. Concurrent follows of the same pair record exactly one edge
5. Interests behave as a set; account deletion detaches all edges
"""

import asyncio
import random

import pytest

from services.errors import (
    AlreadyFollowing,
    AlreadyPresent,
    NotFollowing,
    NotPresent,
    SelfFollow,
    UserNotFound,
    ValidationError,
)


def assert_symmetric(user_repo):
    users = {u.username: u for u in user_repo.all()}
    for a in users.values():
        assert a.username not in a.following
        assert len(a.following) == len(set(a.following))
        assert len(a.followers) == len(set(a.followers))
        for b in users.values():
            if a is b:
                continue
            assert (b.username in a.following) == (a.username in b.followers), (
                f"asymmetric edge {a.username} -> {b.username}"
            )


# ============================================================================
# FOLLOW
# ============================================================================

class TestFollow:

    @pytest.mark.asyncio
    async def test_follow_writes_both_projections(self, services, user_repo, people):
        actor = await services.social_graph.follow("alice", "bob")

        assert actor.following == ["bob"]
        assert user_repo.snapshot("bob").followers == ["alice"]
        assert_symmetric(user_repo)

    @pytest.mark.asyncio
    async def test_follow_is_case_insensitive_on_target(self, services, user_repo, people):
        actor = await services.social_graph.follow("alice", "BOB")

        assert actor.following == ["bob"]
        assert user_repo.snapshot("bob").followers == ["alice"]

    @pytest.mark.asyncio
    async def test_self_follow_rejected(self, services, user_repo, people):
        with pytest.raises(SelfFollow):
            await services.social_graph.follow("alice", "Alice")

        alice = user_repo.snapshot("alice")
        assert alice.following == []
        assert alice.followers == []

    @pytest.mark.asyncio
    async def test_existing_edge_fails_without_mutation(self, services, user_repo, people):
        await services.social_graph.follow("alice", "bob")
        before = (user_repo.snapshot("alice"), user_repo.snapshot("bob"))

        with pytest.raises(AlreadyFollowing):
            await services.social_graph.follow("alice", "bob")

        assert (user_repo.snapshot("alice"), user_repo.snapshot("bob")) == before

    @pytest.mark.asyncio
    async def test_unknown_target(self, services, user_repo, people):
        with pytest.raises(UserNotFound):
            await services.social_graph.follow("alice", "nobody")

        assert user_repo.snapshot("alice").following == []

    @pytest.mark.asyncio
    async def test_concurrent_follows_record_one_edge(self, services, user_repo, people):
        results = await asyncio.gather(
            *[services.social_graph.follow("alice", "bob") for _ in range(10)],
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(successes) == 1
        assert all(isinstance(f, AlreadyFollowing) for f in failures)
        assert user_repo.snapshot("bob").followers == ["alice"]

    @pytest.mark.asyncio
    async def test_crossing_follows_do_not_deadlock(self, services, user_repo, people):
        await asyncio.wait_for(
            asyncio.gather(
                services.social_graph.follow("alice", "bob"),
                services.social_graph.follow("bob", "alice"),
            ),
            timeout=2.0,
        )

        assert user_repo.snapshot("alice").followers == ["bob"]
        assert user_repo.snapshot("bob").followers == ["alice"]
        assert_symmetric(user_repo)


# ============================================================================
# UNFOLLOW
# ============================================================================

class TestUnfollow:

    @pytest.mark.asyncio
    async def test_unfollow_removes_both_projections(self, services, user_repo, people):
        await services.social_graph.follow("alice", "bob")
        actor = await services.social_graph.unfollow("alice", "bob")

        assert actor.following == []
        assert user_repo.snapshot("bob").followers == []

    @pytest.mark.asyncio
    async def test_unfollow_without_edge(self, services, user_repo, people):
        with pytest.raises(NotFollowing):
            await services.social_graph.unfollow("alice", "bob")

    @pytest.mark.asyncio
    async def test_unfollow_heals_stale_half_edge(self, services, user_repo, make_user):
        make_user("erin")
        make_user("frank", followers=["erin"])  # half edge from legacy data

        await services.social_graph.unfollow("erin", "frank")

        assert user_repo.snapshot("frank").followers == []
        assert_symmetric(user_repo)

    @pytest.mark.asyncio
    async def test_unfollow_removes_differently_cased_entries(self, services, user_repo, make_user):
        make_user("erin", following=["Frank"])
        make_user("frank", followers=["ERIN"])

        actor = await services.social_graph.unfollow("erin", "frank")

        assert actor.following == []
        assert user_repo.snapshot("frank").followers == []

    @pytest.mark.asyncio
    async def test_follow_absorbs_stale_half_edge(self, services, user_repo, make_user):
        make_user("erin")
        make_user("frank", followers=["erin"])

        await services.social_graph.follow("erin", "frank")

        assert user_repo.snapshot("frank").followers == ["erin"]
        assert_symmetric(user_repo)


# ============================================================================
# SYMMETRY PROPERTY
# ============================================================================

@pytest.mark.asyncio
async def test_symmetry_holds_after_random_sequence(services, user_repo, people):
    rng = random.Random(7)
    names = list(people)

    for _ in range(200):
        actor, target = rng.choice(names), rng.choice(names)
        operation = rng.choice([services.social_graph.follow, services.social_graph.unfollow])
        try:
            await operation(actor, target)
        except (SelfFollow, AlreadyFollowing, NotFollowing):
            pass
        assert_symmetric(user_repo)


@pytest.mark.asyncio
async def test_symmetry_holds_under_concurrent_mix(services, user_repo, people):
    rng = random.Random(11)
    names = list(people)
    calls = []
    for _ in range(60):
        actor, target = rng.sample(names, 2)
        operation = rng.choice([services.social_graph.follow, services.social_graph.unfollow])
        calls.append(operation(actor, target))

    await asyncio.gather(*calls, return_exceptions=True)

    assert_symmetric(user_repo)


# ============================================================================
# INTERESTS
# ============================================================================

class TestInterests:

    @pytest.mark.asyncio
    async def test_add_and_remove(self, services, people):
        user = await services.social_graph.add_interest("alice", " rust ")
        assert user.interests == ["rust"]

        user = await services.social_graph.remove_interest("alice", "rust")
        assert user.interests == []

    @pytest.mark.asyncio
    async def test_duplicate_interest(self, services, people):
        await services.social_graph.add_interest("alice", "rust")
        with pytest.raises(AlreadyPresent):
            await services.social_graph.add_interest("alice", "rust")

    @pytest.mark.asyncio
    async def test_remove_missing_interest(self, services, people):
        with pytest.raises(NotPresent):
            await services.social_graph.remove_interest("alice", "go")

    @pytest.mark.asyncio
    async def test_blank_interest(self, services, people):
        with pytest.raises(ValidationError):
            await services.social_graph.add_interest("alice", "   ")


# ============================================================================
# ACCOUNT DELETION
# ============================================================================

@pytest.mark.asyncio
async def test_remove_user_detaches_edges(services, user_repo, request_repo, people):
    await services.social_graph.follow("alice", "bob")
    await services.social_graph.follow("bob", "carol")
    await services.social_graph.follow("carol", "bob")
    await services.workflow.submit("bob", "reporter")
    await services.authority.grant_admin("Bob")

    assert await services.social_graph.remove_user("bob") is True

    assert user_repo.snapshot("bob") is None
    assert user_repo.snapshot("alice").following == []
    assert user_repo.snapshot("carol").followers == []
    assert user_repo.snapshot("carol").following == []
    assert_symmetric(user_repo)
    assert await request_repo.get_by_username("bob") is None
    assert await services.authority.admins() == ["lola"]
