"""Tokenizer service for token measurement of context items."""

import math
import re
from typing import Dict, Optional, Union, List
from abc import ABC, abstractmethod


# { } [ ] ( ) < > ; = : , " '
STRUCTURAL_CHARS = frozenset('{}[]()<>;=:,"\'')


class BaseTokenizer(ABC):
    """Abstract base class for tokenizers.

    Anything exposing ``count(text) -> int`` can be handed to the optimizer;
    subclassing this is a convenience, not a requirement.
    """

    @abstractmethod
    def count(self, text: str) -> int:
        """Count tokens in the given text."""
        pass


class HeuristicTokenizer(BaseTokenizer):
    """Character-ratio estimator that leans toward over-estimation.

    Prose averages about 4 characters per token while code and JSON sit
    closer to 3. The ratio of structural characters interpolates between
    the two, bottoming out at 3 once 20% of the text is structural.
    """

    def __init__(self, prose_chars_per_token: float = 4.0, dense_chars_per_token: float = 3.0):
        self.prose_chars_per_token = prose_chars_per_token
        self.dense_chars_per_token = dense_chars_per_token

    def count(self, text: str) -> int:
        if not text:
            return 0
        length = len(text)
        structural = sum(1 for c in text if c in STRUCTURAL_CHARS)
        ratio = structural / length
        chars_per_token = max(self.dense_chars_per_token, self.prose_chars_per_token - ratio * 5)
        return math.ceil(length / chars_per_token)


class SimpleTokenizer(BaseTokenizer):
    """Simple tokenizer using regex-based word splitting."""

    def __init__(self):
        self.word_pattern = re.compile(r'\w+|[^\w\s]')

    def count(self, text: str) -> int:
        """Count tokens using word-based splitting."""
        if not text:
            return 0
        return len(self.word_pattern.findall(text))


class TiktokenTokenizer(BaseTokenizer):
    """Exact tokenizer backed by tiktoken (``pip install context-packer[tiktoken]``)."""

    def __init__(self, encoding_name: str = "cl100k_base"):
        try:
            import tiktoken
        except ImportError as e:
            raise ImportError(
                "The 'tiktoken' backend requires tiktoken: pip install context-packer[tiktoken]"
            ) from e
        self.encoding = tiktoken.get_encoding(encoding_name)

    def count(self, text: str) -> int:
        """Count tokens using tiktoken encoding."""
        if not text:
            return 0
        return len(self.encoding.encode(text))


class TokenizerService:
    """Unified tokenizer service supporting multiple backends."""

    BACKENDS = {
        "heuristic": HeuristicTokenizer,
        "simple": SimpleTokenizer,
        "tiktoken": TiktokenTokenizer,
    }

    def __init__(self, backend: str = "heuristic", **kwargs):
        """
        Initialize tokenizer service.

        Args:
            backend: Tokenizer backend ('heuristic', 'simple', 'tiktoken')
            **kwargs: Additional arguments for specific backends
        """
        if backend not in self.BACKENDS:
            raise ValueError(f"Unknown tokenizer backend: {backend}")
        self.backend = backend
        self.tokenizer: BaseTokenizer = self.BACKENDS[backend](**kwargs)

    def count(self, text: str) -> int:
        """Count tokens in a single string."""
        return self.tokenizer.count(text)

    def count_tokens(self, text: Union[str, List[str], Dict[str, str]]) -> int:
        """
        Count tokens in text.

        Args:
            text: String, list of strings, or dict of strings

        Returns:
            Total token count
        """
        if isinstance(text, str):
            return self.tokenizer.count(text)
        elif isinstance(text, list):
            return sum(self.tokenizer.count(item) for item in text)
        elif isinstance(text, dict):
            total = 0
            for key, value in text.items():
                total += self.tokenizer.count(str(key))
                total += self.tokenizer.count(str(value))
            return total
        else:
            return self.tokenizer.count(str(text))

    def count_tokens_with_breakdown(self, text: Dict[str, str]) -> Dict[str, int]:
        """
        Count tokens for each section in a dictionary.

        Args:
            text: Dictionary of text sections

        Returns:
            Dictionary with token counts for each section plus a "total" key
        """
        breakdown = {}
        total = 0

        for key, value in text.items():
            count = self.count_tokens(value)
            breakdown[key] = count
            total += count

        breakdown["total"] = total
        return breakdown

    def get_tokenizer_info(self) -> Dict[str, Optional[str]]:
        """Get information about the current tokenizer."""
        info = {
            "backend": self.backend,
            "class": type(self.tokenizer).__name__,
            "encoding_name": None,
        }
        if hasattr(self.tokenizer, 'encoding'):
            info["encoding_name"] = self.tokenizer.encoding.name
        return info
