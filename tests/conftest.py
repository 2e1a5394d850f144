"""Shared fixtures for context-packer tests."""

import pytest

from context_packer.core.items import ContextItem, Priority


class CharTokenizer:
    """One token per character, for exact budget arithmetic in tests."""

    def count(self, text: str) -> int:
        return len(text)


@pytest.fixture
def char_tokenizer():
    return CharTokenizer()


@pytest.fixture
def make_item():
    def factory(id, **overrides):
        fields = {
            "id": id,
            "source": "test",
            "content": id,
            "value": id,
            "tokens": 10,
            "priority": Priority.MEDIUM,
            "score": 50.0,
            "index": 0,
        }
        fields.update(overrides)
        return ContextItem(**fields)
    return factory
