"""
Tests for short prefixed IDs.
"""

import pytest

from models.domain.content import Content
from models.domain.user import User
from utils.id_generator import generate_id, get_id_type, validate_id


def test_generated_ids_have_type_prefix():
    user_id = generate_id('user')
    content_id = generate_id('content')

    assert user_id.startswith('us_') and len(user_id) == 11
    assert get_id_type(user_id) == 'user'
    assert get_id_type(content_id) == 'content'


def test_unknown_entity_type():
    with pytest.raises(ValueError):
        generate_id('event')


@pytest.mark.parametrize("value", ["", "us_short", "xx_abcd1234", "US_ABCD1234", None])
def test_invalid_ids(value):
    assert validate_id(value) is False


def test_validate_checks_expected_type():
    assert validate_id('ct_abcd1234', 'content')
    assert not validate_id('ct_abcd1234', 'user')


def test_models_replace_missing_or_foreign_ids():
    user = User(user_id="", username="alice")
    item = Content(id="us_abcd1234", author_id=user.user_id, body="hello")

    assert validate_id(user.user_id, 'user')
    assert validate_id(item.id, 'content')
    assert item.id != "us_abcd1234"
