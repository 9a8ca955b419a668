"""
Recommendation Engine Tests
===========================

Key invariants tested:
1. Never recommends the user or an author the user already follows
2. Each author appears once, in order of their most recent matching item
3. Keyword matching is a literal, case-sensitive substring test
4. A user without interests gets NoInterests
"""

import pytest

from services.errors import NoInterests, UserNotFound, ValidationError


def names(users):
    return [u.username for u in users]


@pytest.mark.asyncio
async def test_recommends_author_of_matching_content(services, content_repo, make_user):
    alice = make_user("alice", interests=["rust"], following=["carol"])
    bob = make_user("bob", followers=[])
    carol = make_user("carol", followers=["alice"])
    content_repo.put(bob, "I love rust")
    content_repo.put(carol, "rust is neat")
    content_repo.put(alice, "rust rust rust")

    result = await services.recommendations.recommend("alice")

    assert names(result) == ["bob"]


@pytest.mark.asyncio
async def test_no_interests(services, people):
    with pytest.raises(NoInterests):
        await services.recommendations.recommend("alice")


@pytest.mark.asyncio
async def test_unknown_user(services):
    with pytest.raises(UserNotFound):
        await services.recommendations.recommend("ghost")


@pytest.mark.asyncio
async def test_authors_are_distinct_and_most_recent_first(services, content_repo, make_user):
    make_user("alice", interests=["python", "go"])
    bob = make_user("bob")
    carol = make_user("carol")
    dave = make_user("dave")
    content_repo.put(bob, "python tips")
    content_repo.put(carol, "go concurrency")
    content_repo.put(dave, "gardening")
    content_repo.put(bob, "more python")

    result = await services.recommendations.recommend("alice")

    assert names(result) == ["bob", "carol"]


@pytest.mark.asyncio
async def test_matching_is_case_sensitive(services, content_repo, make_user):
    make_user("alice", interests=["Rust"])
    bob = make_user("bob")
    carol = make_user("carol")
    content_repo.put(bob, "rust all lowercase")
    content_repo.put(carol, "Rustaceans unite")

    result = await services.recommendations.recommend("alice")

    assert names(result) == ["carol"]


@pytest.mark.asyncio
async def test_follow_removes_author_from_results(services, content_repo, make_user):
    make_user("alice", interests=["chess"])
    bob = make_user("bob")
    content_repo.put(bob, "chess openings")

    assert names(await services.recommendations.recommend("alice")) == ["bob"]

    await services.social_graph.follow("alice", "bob")

    assert await services.recommendations.recommend("alice") == []


@pytest.mark.asyncio
async def test_limit(services, content_repo, make_user):
    make_user("alice", interests=["jazz"])
    for name in ("bob", "carol", "dave"):
        content_repo.put(make_user(name), f"{name} plays jazz")

    assert names(await services.recommendations.recommend("alice", limit=2)) == ["dave", "carol"]
    assert len(await services.recommendations.recommend("alice", limit=0)) == 3


@pytest.mark.asyncio
async def test_negative_limit_rejected(services, content_repo, make_user):
    make_user("alice", interests=["jazz"])
    for name in ("bob", "carol", "dave"):
        content_repo.put(make_user(name), f"{name} plays jazz")

    with pytest.raises(ValidationError):
        await services.recommendations.recommend("alice", limit=-1)


@pytest.mark.asyncio
async def test_rust_interest_picks_rust_author_only(services, content_repo, make_user):
    make_user("alice", interests=["rust"])
    bob = make_user("bob")
    carol = make_user("carol")
    content_repo.put(bob, "I love rust")
    content_repo.put(carol, "I love go")

    result = await services.recommendations.recommend("alice")

    assert names(result) == ["bob"]
